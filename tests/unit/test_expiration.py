from datetime import datetime, timedelta, timezone

import pytest

from mediscan.domain.expiration import Freshness, classify, parse_date

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _in(days: int) -> str:
    return (NOW + timedelta(days=days)).strftime("%Y-%m-%d")


@pytest.mark.parametrize("days,expected", [
    (-365, Freshness.EXPIRED),
    (-1, Freshness.EXPIRED),
    (0, Freshness.EXPIRING_SOON),
    (1, Freshness.EXPIRING_SOON),
    (90, Freshness.EXPIRING_SOON),
    (91, Freshness.VALID),
    (3650, Freshness.VALID),
])
def test_thresholds(days, expected):
    out = classify(_in(days), NOW)
    assert out.freshness == expected
    assert out.days_remaining == days


@pytest.mark.parametrize("raw", [None, "", "N/A", "2024/01/01", "01-02-2024", "2024-13-01",
                                 "2024-02-30", "2024-1-1", "2024-01-01T00:00:00", "soon"])
def test_unparseable_is_unknown(raw):
    out = classify(raw, NOW)
    assert out.freshness == Freshness.UNKNOWN
    assert out.days_remaining == 0


def test_days_are_floored_within_the_day():
    noon = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert classify("2024-01-01", noon).days_remaining == -1
    assert classify("2024-01-01", noon).freshness == Freshness.EXPIRED
    assert classify("2024-01-02", noon).days_remaining == 0


def test_naive_now_is_supported():
    assert classify("2024-04-30", datetime(2024, 1, 1)).freshness == Freshness.VALID


def test_expired_long_ago():
    out = classify("2000-01-01", NOW)
    assert out.freshness == Freshness.EXPIRED
    assert out.days_remaining < 0


def test_parse_date_strict():
    assert parse_date("2024-02-29") == datetime(2024, 2, 29)
    assert parse_date("2023-02-29") is None
