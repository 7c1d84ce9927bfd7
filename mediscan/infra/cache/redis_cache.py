# mediscan/infra/cache/redis_cache.py
import os
import json
import logging
from typing import Any, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from pydantic import ValidationError

from mediscan.domain.models import Record
from mediscan.domain.ports import CachePort, RecordStorePort

DEFAULT_TTL = int(os.getenv("RECORD_CACHE_TTL", "43200"))  # 12h
KEY_PREFIX = "drug:"

logger = logging.getLogger(__name__)


class RedisCache(CachePort):
    """JSON values in Redis under plain string keys."""

    def __init__(self, client: Optional[aioredis.Redis] = None):
        self.r = client or aioredis.from_url(
            os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            encoding="utf-8",
            decode_responses=True,
        )

    @classmethod
    def from_env(cls):
        url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        return cls(aioredis.from_url(url, encoding="utf-8", decode_responses=True))

    async def get(self, k: str):
        v = await self.r.get(k)
        return json.loads(v) if v else None

    async def set(self, k: str, v: Any, ttl: int = DEFAULT_TTL):
        await self.r.set(k, json.dumps(v, ensure_ascii=False, default=str), ex=ttl)

    async def delete(self, *keys: str) -> int:
        return await self.r.delete(*keys)

    async def ping(self) -> bool:
        return bool(await self.r.ping())


class CachedRecordStore(RecordStorePort):
    """
    Read-through cache in front of another RecordStore.

    Only hits are cached; a miss always goes to the backing store so a newly
    added medicine is visible right away. Cache errors never fail a lookup.
    """

    def __init__(self, inner: RecordStorePort, cache: CachePort, ttl: int = DEFAULT_TTL):
        self.inner, self.cache, self.ttl = inner, cache, ttl

    async def get(self, code: str) -> Optional[Record]:
        key = KEY_PREFIX + code
        try:
            hit = await self.cache.get(key)
        except (RedisError, ValueError) as e:
            logger.warning("record cache read failed for %s: %s", code, e)
            hit = None

        if isinstance(hit, dict):
            try:
                return Record.from_wire(code, hit)
            except ValidationError as e:
                # treat as a miss; the backing store rewrites the key below
                logger.warning("dropping unreadable cache entry for %s: %s", code, e)

        rec = await self.inner.get(code)
        if rec is not None:
            try:
                await self.cache.set(key, rec.to_wire(), ttl=self.ttl)
            except RedisError as e:
                logger.warning("record cache write failed for %s: %s", code, e)
        return rec

    async def put(self, record: Record) -> None:
        await self.inner.put(record)
        try:
            await self.cache.delete(KEY_PREFIX + record.id)
        except RedisError as e:
            # stale for at most one TTL
            logger.warning("record cache invalidation failed for %s: %s", record.id, e)
