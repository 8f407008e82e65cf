"""
Tests for the in-memory cache backend.
"""
from src.infrastructure.cache import InMemoryCache, create_cache


async def test_set_and_get_returns_equal_value():
    cache = InMemoryCache()
    await cache.set("all-tickets", [{"id": 1, "status": "open"}])
    assert await cache.get("all-tickets") == [{"id": 1, "status": "open"}]


async def test_missing_key_returns_none():
    assert await InMemoryCache().get("nope") is None


async def test_delete_removes_key():
    cache = InMemoryCache()
    await cache.set("reports-status", {"fs.csv": "idle"})
    await cache.delete("reports-status")
    assert await cache.get("reports-status") is None
    assert len(cache) == 0


async def test_delete_missing_key_is_a_noop():
    await InMemoryCache().delete("never-set")


async def test_cached_value_is_detached_from_caller():
    cache = InMemoryCache()
    payload = {"runs": 1}
    await cache.set("k", payload)
    payload["runs"] = 2
    assert await cache.get("k") == {"runs": 1}


async def test_expired_entry_is_dropped():
    cache = InMemoryCache(default_ttl_seconds=10)
    await cache.set("k", "v", ttl_seconds=-1)
    assert await cache.get("k") is None
    assert len(cache) == 0


async def test_create_cache_defaults_to_memory():
    cache = create_cache(redis_url="")
    assert isinstance(cache, InMemoryCache)
    assert await cache.ping() is True
