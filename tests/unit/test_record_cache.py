import asyncio

from redis.exceptions import ConnectionError as RedisConnectionError

from mediscan.domain.models import Record
from mediscan.domain.ports import CachePort
from mediscan.infra.cache.redis_cache import CachedRecordStore, KEY_PREFIX
from mediscan.infra.memory.memory_store import InMemoryRecordStore


class DictCache(CachePort):
    def __init__(self, broken: bool = False):
        self.data, self.broken = {}, broken

    async def get(self, key):
        if self.broken:
            raise RedisConnectionError("down")
        return self.data.get(key)

    async def set(self, key, value, ttl=0):
        if self.broken:
            raise RedisConnectionError("down")
        self.data[key] = value

    async def delete(self, *keys):
        if self.broken:
            raise RedisConnectionError("down")
        return sum(1 for k in keys if self.data.pop(k, None) is not None)


async def _read_through():
    inner = InMemoryRecordStore([Record(id="7", name="Cetirizine", genuine=True)])
    cache = DictCache()
    store = CachedRecordStore(inner, cache)

    assert (await store.get("7")).name == "Cetirizine"
    assert cache.data[KEY_PREFIX + "7"]["name"] == "Cetirizine"
    assert await store.get("nope") is None
    assert KEY_PREFIX + "nope" not in cache.data

    await store.put(Record(id="7", name="Cetirizine 10mg", genuine=True))
    assert KEY_PREFIX + "7" not in cache.data
    assert (await store.get("7")).name == "Cetirizine 10mg"


async def _cache_down():
    inner = InMemoryRecordStore([Record(id="7", name="Cetirizine")])
    store = CachedRecordStore(inner, DictCache(broken=True))
    assert (await store.get("7")).name == "Cetirizine"
    await store.put(Record(id="8", name="Loratadine"))
    assert (await inner.get("8")).name == "Loratadine"


def test_read_through_cache():
    asyncio.run(_read_through())


def test_cache_failure_falls_through():
    asyncio.run(_cache_down())


async def _odd_cache_entries():
    inner = InMemoryRecordStore()
    cache = DictCache()
    store = CachedRecordStore(inner, cache)

    cache.data[KEY_PREFIX + "9"] = {"id": "9", "name": "Syrup", "batchNumber": 12345, "genuine": True}
    rec = await store.get("9")
    assert rec.batch_number == "12345"
    assert rec.genuine is True

    # an entry that cannot decode at all is a miss, not an error
    cache.data[KEY_PREFIX] = {"name": "orphan"}
    assert await store.get("") is None


def test_cache_entries_decode_leniently():
    asyncio.run(_odd_cache_entries())
