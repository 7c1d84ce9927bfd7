from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from main import app
from mediscan.container import get_cache, get_clock, get_history_store, get_record_store
from mediscan.domain.models import Record
from mediscan.infra.memory.memory_store import InMemoryHistoryStore, InMemoryRecordStore

NOW = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock():
    return FixedClock(NOW)


@pytest.fixture()
def records():
    return InMemoryRecordStore([
        Record(id="GEN-1", name="Paracetamol 500mg", manufacturer="Kimia Farma",
               expiration_date="2026-01-01", batch_number="PX1", genuine=True),
        Record(id="SOON-1", name="Amoxicillin", genuine=True, expiration_date="2024-02-01"),
        Record(id="OLD-1", name="Old Syrup", genuine=True, expiration_date="2000-01-01"),
        Record(id="FAKE-1", name="Fake Pill", genuine=False, expiration_date="2099-01-01"),
        Record(id="NA-1", name="Vitamin C", genuine=True, expiration_date="N/A"),
    ])


@pytest.fixture()
def history():
    return InMemoryHistoryStore()


@pytest.fixture()
def client(records, history, clock):
    app.dependency_overrides[get_record_store] = lambda: records
    app.dependency_overrides[get_history_store] = lambda: history
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_cache] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
