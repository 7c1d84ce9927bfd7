# mediscan/domain/history.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from .expiration import FreshnessResult, classify
from .models import UNKNOWN_MEDICINE, HistoryEntry, Record
from .status import Status, resolve

SCAN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_MINUTE_MS = 60 * 1000
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_ms(now: datetime) -> int:
    if now.tzinfo is None:
        now = now.astimezone()  # naive means local time
    return (now - _EPOCH) // timedelta(milliseconds=1)


def build_entry(scanned_code: str, record: Optional[Record], now: datetime) -> HistoryEntry:
    """
    Snapshot one verification attempt. ``scan_date`` is formatted here, once,
    and never derived from ``timestamp`` again.
    """
    return HistoryEntry(
        scanned_code=scanned_code,
        drug_name=record.name if record else UNKNOWN_MEDICINE,
        is_genuine=record.genuine if record else False,
        was_found=record is not None,
        scan_date=now.strftime(SCAN_DATE_FORMAT),
        timestamp=epoch_ms(now),
        expiration_date=record.expiration_date if record else None,
    )


@dataclass(frozen=True)
class ProjectedEntry:
    entry: HistoryEntry
    freshness: FreshnessResult
    status: Status
    label: str


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def relative_label(timestamp: int, now: datetime) -> str:
    elapsed = epoch_ms(now) - timestamp
    if elapsed < _MINUTE_MS:
        return "just now"
    if elapsed < _HOUR_MS:
        return _plural(elapsed // _MINUTE_MS, "min")
    if elapsed < _DAY_MS:
        return _plural(elapsed // _HOUR_MS, "hour")
    return _plural(elapsed // _DAY_MS, "day")


def project(entries: Iterable[HistoryEntry], now: datetime) -> List[ProjectedEntry]:
    """
    Newest first. Status is re-resolved against ``now``, so an old scan of a
    then-valid product can show as expired today.
    """
    # sorted() is stable with reverse=True, equal timestamps keep input order
    ordered = sorted(entries, key=lambda e: e.timestamp, reverse=True)
    out: List[ProjectedEntry] = []
    for e in ordered:
        fr = classify(e.expiration_date, now)
        out.append(
            ProjectedEntry(
                entry=e,
                freshness=fr,
                status=resolve(e.was_found, e.is_genuine, fr.freshness),
                label=relative_label(e.timestamp, now),
            )
        )
    return out


def select(
    projected: Iterable[ProjectedEntry],
    status: Optional[Status] = None,
    limit: Optional[int] = None,
) -> List[ProjectedEntry]:
    items = [p for p in projected if status is None or p.status == status]
    return items[:limit] if limit is not None else items
