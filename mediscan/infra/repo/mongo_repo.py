# mediscan/infra/repo/mongo_repo.py
from __future__ import annotations

import os
import logging
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from mediscan.domain.models import HistoryEntry, Record
from mediscan.domain.ports import HistoryStorePort, RecordStorePort, StoreUnavailableError

MONGO_URI    = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME      = os.getenv("MONGO_DB", "mediscan")
RECORDS_COLL = os.getenv("MONGO_RECORDS_COLL", "drugs")
HISTORY_COLL = os.getenv("MONGO_HISTORY_COLL", "scanned_history")

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None


def get_client() -> AsyncIOMotorClient:
    """One motor client per process; it pools connections internally."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(MONGO_URI)
    return _client


class MongoRecordStore(RecordStorePort):
    """
    Koleksi `drugs`: satu dokumen per kode produk, `_id` = kode.
    Dokumen menyimpan bentuk wire Record apa adanya (camelCase).
    """

    def __init__(self, coll: AsyncIOMotorCollection | None = None) -> None:
        self.coll = coll if coll is not None else get_client()[DB_NAME][RECORDS_COLL]

    async def get(self, code: str) -> Optional[Record]:
        try:
            doc = await self.coll.find_one({"_id": code})
        except PyMongoError as e:
            raise StoreUnavailableError(f"record lookup failed: {e}") from e
        if not doc:
            return None
        doc.pop("_id", None)
        try:
            return Record.from_wire(code, doc)
        except ValidationError as e:
            logger.error("unreadable record doc for %s: %s", code, e)
            raise StoreUnavailableError(f"record {code!r} is unreadable") from e

    async def put(self, record: Record) -> None:
        body = record.to_wire()
        try:
            await self.coll.replace_one({"_id": record.id}, {"_id": record.id, **body}, upsert=True)
        except PyMongoError as e:
            raise StoreUnavailableError(f"record write failed: {e}") from e

    async def ping(self) -> bool:
        res = await self.coll.database.command("ping")
        return bool(res.get("ok"))


class MongoHistoryStore(HistoryStorePort):
    """
    Koleksi `scanned_history`, append-only.

    insert_one / delete_many are single-document / single-command atomic on
    the server, which covers the append and clear guarantees. Entries come
    back ordered by timestamp, then insertion order (ObjectId), so equal
    timestamps stay stable.
    """

    def __init__(self, coll: AsyncIOMotorCollection | None = None) -> None:
        self.coll = coll if coll is not None else get_client()[DB_NAME][HISTORY_COLL]

    async def ensure_indexes(self) -> None:
        # backs the (timestamp, _id) sort in list_all
        await self.coll.create_index([("timestamp", ASCENDING), ("_id", ASCENDING)])

    async def append(self, entry: HistoryEntry) -> None:
        try:
            # copy: insert_one mutates its argument with `_id`
            await self.coll.insert_one(dict(entry.to_wire()))
        except PyMongoError as e:
            raise StoreUnavailableError(f"history append failed: {e}") from e

    async def list_all(self) -> List[HistoryEntry]:
        out: List[HistoryEntry] = []
        try:
            cursor = self.coll.find({}, {"_id": 0}).sort([("timestamp", ASCENDING), ("_id", ASCENDING)])
            async for doc in cursor:
                try:
                    out.append(HistoryEntry.from_wire(doc))
                except ValidationError:
                    # tolerate stray documents written by older clients
                    logger.warning("skipping malformed history doc: %s", doc)
        except PyMongoError as e:
            raise StoreUnavailableError(f"history read failed: {e}") from e
        return out

    async def clear(self) -> None:
        try:
            await self.coll.delete_many({})
        except PyMongoError as e:
            raise StoreUnavailableError(f"history clear failed: {e}") from e
