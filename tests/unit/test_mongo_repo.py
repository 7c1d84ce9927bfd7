import asyncio
import copy
import itertools

import pytest
from pymongo import ASCENDING
from pymongo.errors import AutoReconnect

from mediscan.domain.models import HistoryEntry, Record
from mediscan.domain.ports import StoreUnavailableError
from mediscan.infra.repo.mongo_repo import MongoHistoryStore, MongoRecordStore


class FakeCursor:
    def __init__(self, docs, projection):
        self.docs, self.projection = docs, projection or {}

    def sort(self, keys, direction=ASCENDING):
        if isinstance(keys, str):
            keys = [(keys, direction)]
        for field, d in reversed(keys):
            self.docs.sort(key=lambda doc: doc[field], reverse=d != ASCENDING)
        return self

    async def __aiter__(self):
        for doc in self.docs:
            yield {k: v for k, v in doc.items() if self.projection.get(k, 1)}


class FakeCollection:
    """Just enough of an AsyncIOMotorCollection for the adapters."""

    def __init__(self, docs=(), broken: bool = False):
        self.docs = [dict(d) for d in docs]
        self.broken = broken
        self.indexes = []
        self._ids = itertools.count(1)

    def _check(self):
        if self.broken:
            raise AutoReconnect("connection refused")

    async def find_one(self, flt):
        self._check()
        for doc in self.docs:
            if all(doc.get(k) == v for k, v in flt.items()):
                return copy.deepcopy(doc)
        return None

    async def replace_one(self, flt, doc, upsert=False):
        self._check()
        for i, cur in enumerate(self.docs):
            if all(cur.get(k) == v for k, v in flt.items()):
                self.docs[i] = dict(doc)
                return
        if upsert:
            self.docs.append(dict(doc))

    async def insert_one(self, doc):
        self._check()
        doc.setdefault("_id", next(self._ids))
        self.docs.append(dict(doc))

    def find(self, flt=None, projection=None):
        self._check()
        return FakeCursor([copy.deepcopy(d) for d in self.docs], projection)

    async def delete_many(self, flt):
        self._check()
        self.docs.clear()

    async def create_index(self, keys):
        self.indexes.append(keys)


def _entry(code, ts, **kw):
    return HistoryEntry(scanned_code=code, scan_date="2024-01-01 00:00:00", timestamp=ts, **kw)


async def _record_get_strips_id():
    coll = FakeCollection([
        {"_id": "899", "id": "other", "name": "Syrup", "genuine": True, "batchNumber": 12345},
    ])
    store = MongoRecordStore(coll=coll)
    rec = await store.get("899")
    assert rec.id == "899"
    assert rec.batch_number == "12345"
    assert rec.expiration_date == "N/A"
    assert await store.get("missing") is None
    # the stored doc is untouched by the decode
    assert coll.docs[0]["_id"] == "899"


async def _record_put_upserts():
    coll = FakeCollection()
    store = MongoRecordStore(coll=coll)
    await store.put(Record(id="A1", name="Antasida", genuine=True))
    await store.put(Record(id="A1", name="Antasida DOEN", genuine=True))
    assert len(coll.docs) == 1
    assert coll.docs[0]["_id"] == "A1"
    assert coll.docs[0]["name"] == "Antasida DOEN"
    assert coll.docs[0]["expirationDate"] == "N/A"
    assert (await store.get("A1")).name == "Antasida DOEN"


async def _record_unreadable_doc():
    store = MongoRecordStore(coll=FakeCollection([{"_id": "", "name": "Blank"}]))
    with pytest.raises(StoreUnavailableError):
        await store.get("")


async def _history_order_and_clear():
    coll = FakeCollection()
    store = MongoHistoryStore(coll=coll)
    await store.ensure_indexes()
    assert coll.indexes == [[("timestamp", ASCENDING), ("_id", ASCENDING)]]

    await store.append(_entry("b", 200))
    await store.append(_entry("a", 100, expiration_date="2030-01-01"))
    await store.append(_entry("c", 200))
    got = await store.list_all()
    assert [e.scanned_code for e in got] == ["a", "b", "c"]
    assert got[0].expiration_date == "2030-01-01"

    await store.clear()
    assert await store.list_all() == []


async def _history_skips_malformed():
    coll = FakeCollection([
        {"_id": 1, "scannedCode": "ok", "timestamp": 1, "scanDate": "2024-01-01 00:00:00"},
        {"_id": 2, "timestamp": 2, "drugName": "no code"},
        {"_id": 3, "scannedCode": "bad-flag", "timestamp": 3, "wasFound": {"x": 1}},
    ])
    got = await MongoHistoryStore(coll=coll).list_all()
    assert [e.scanned_code for e in got] == ["ok"]


async def _connection_errors():
    records = MongoRecordStore(coll=FakeCollection(broken=True))
    history = MongoHistoryStore(coll=FakeCollection(broken=True))
    for call in (records.get("x"), records.put(Record(id="x")),
                 history.append(_entry("x", 1)), history.list_all(), history.clear()):
        with pytest.raises(StoreUnavailableError):
            await call


def test_record_get_strips_id_and_key_wins():
    asyncio.run(_record_get_strips_id())


def test_record_put_upserts():
    asyncio.run(_record_put_upserts())


def test_record_unreadable_doc_is_store_error():
    asyncio.run(_record_unreadable_doc())


def test_history_insertion_order_and_clear():
    asyncio.run(_history_order_and_clear())


def test_history_skips_malformed_docs():
    asyncio.run(_history_skips_malformed())


def test_pymongo_errors_become_store_unavailable():
    asyncio.run(_connection_errors())
