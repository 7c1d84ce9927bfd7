# mediscan/domain/expiration.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .models import NO_DATE

EXPIRING_SOON_DAYS = 90  # ~3 months

_DATE_RX = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ONE_DAY = timedelta(days=1)


class Freshness(str, Enum):
    UNKNOWN = "unknown"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    VALID = "valid"


@dataclass(frozen=True)
class FreshnessResult:
    freshness: Freshness
    days_remaining: int  # negative once the date has passed


UNKNOWN = FreshnessResult(Freshness.UNKNOWN, 0)


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """Strict ``YYYY-MM-DD`` parse. Returns None for anything else."""
    if not raw or raw == NO_DATE:
        return None
    s = raw.strip()
    if not _DATE_RX.match(s):
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        return None


def classify(expiration_date: Optional[str], now: datetime) -> FreshnessResult:
    """
    Classify an expiration date against ``now``.

    The date counts from its midnight in ``now``'s timezone. Days remaining
    are floored, so a date that passed an hour ago is already -1.
    """
    parsed = parse_date(expiration_date)
    if parsed is None:
        return UNKNOWN

    expires_at = parsed.replace(tzinfo=now.tzinfo)
    days = (expires_at - now) // _ONE_DAY

    if days < 0:
        return FreshnessResult(Freshness.EXPIRED, days)
    if days <= EXPIRING_SOON_DAYS:
        return FreshnessResult(Freshness.EXPIRING_SOON, days)
    return FreshnessResult(Freshness.VALID, days)
