# mediscan/domain/status.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from urllib.parse import quote

from .expiration import Freshness, FreshnessResult, classify
from .models import Record

DEFAULT_REPORT_EMAIL = "report@mediscan.org"


class Status(str, Enum):
    NOT_FOUND = "not_found"
    COUNTERFEIT = "counterfeit"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    GENUINE = "genuine"


def resolve(was_found: bool, is_genuine: bool, freshness: Freshness) -> Status:
    """
    Single prioritized outcome. Order matters: presence, then authenticity,
    then freshness. A counterfeit must never surface as "expiring soon".
    """
    if not was_found:
        return Status.NOT_FOUND
    if not is_genuine:
        return Status.COUNTERFEIT
    if freshness == Freshness.EXPIRED:
        return Status.EXPIRED
    if freshness == Freshness.EXPIRING_SOON:
        return Status.EXPIRING_SOON
    return Status.GENUINE


@dataclass(frozen=True)
class Verdict:
    status: Status
    freshness: FreshnessResult
    title: str
    message: str
    report_url: Optional[str] = None


def evaluate(
    code: str,
    record: Optional[Record],
    now: datetime,
    report_email: str = DEFAULT_REPORT_EMAIL,
) -> Verdict:
    """Classify + resolve a lookup result and attach the display text."""
    fr = classify(record.expiration_date if record else None, now)
    status = resolve(record is not None, bool(record and record.genuine), fr.freshness)
    title, message = describe(status, fr.days_remaining)
    return Verdict(
        status=status,
        freshness=fr,
        title=title,
        message=message,
        report_url=report_link(code, report_email) if status == Status.COUNTERFEIT else None,
    )


def describe(status: Status, days_remaining: int = 0) -> tuple[str, str]:
    if status == Status.NOT_FOUND:
        return "Product Not Found", "This barcode is not registered in our database."
    if status == Status.COUNTERFEIT:
        return "Suspicious Product", "This product has been flagged as suspicious."
    if status == Status.EXPIRED:
        return "Expired Product", f"This product expired {abs(days_remaining)} days ago."
    if status == Status.EXPIRING_SOON:
        return "Expiring Soon", f"This product will expire in {days_remaining} days."
    return "Genuine Product", "This product is verified and safe to use."


def report_link(code: str, email: str = DEFAULT_REPORT_EMAIL) -> str:
    subject = quote("Suspicious Drug Report")
    body = quote(f"Found suspicious drug with barcode: {code}")
    return f"mailto:{email}?subject={subject}&body={body}"
