# mediscan/container.py
import os
from datetime import datetime
from functools import lru_cache

from mediscan.domain.ports import HistoryStorePort, RecordStorePort
from mediscan.domain.status import DEFAULT_REPORT_EMAIL
from mediscan.infra.cache.redis_cache import CachedRecordStore, RedisCache
from mediscan.infra.memory.memory_store import InMemoryHistoryStore, InMemoryRecordStore
from mediscan.infra.repo.mongo_repo import MongoHistoryStore, MongoRecordStore
from mediscan.application.use_cases import Clock

STORE_BACKEND = os.getenv("STORE_BACKEND", "mongo").lower()
RECORD_CACHE = os.getenv("RECORD_CACHE", "1") == "1"
REPORT_EMAIL = os.getenv("REPORT_EMAIL", DEFAULT_REPORT_EMAIL)


def system_clock() -> datetime:
    # local, tz-aware; scanDate is written in server local time
    return datetime.now().astimezone()


@lru_cache
def _cache() -> RedisCache: return RedisCache.from_env()

@lru_cache
def _records() -> RecordStorePort:
    if STORE_BACKEND == "memory":
        return InMemoryRecordStore()
    repo = MongoRecordStore()
    return CachedRecordStore(repo, _cache()) if RECORD_CACHE else repo

@lru_cache
def _history() -> HistoryStorePort:
    if STORE_BACKEND == "memory":
        return InMemoryHistoryStore()
    return MongoHistoryStore()


def get_clock() -> Clock: return system_clock
def get_report_email() -> str: return REPORT_EMAIL
def get_record_store() -> RecordStorePort: return _records()
def get_history_store() -> HistoryStorePort: return _history()
def get_cache() -> RedisCache | None:
    return _cache() if STORE_BACKEND != "memory" and RECORD_CACHE else None

