"""Tests for in-memory LRU cache backend."""

from __future__ import annotations

import time

from zcash_analytics.cache.memory import MemoryCache


class TestMemoryCache:
    """Test in-memory LRU cache with TTL."""

    async def test_init(self) -> None:  # noqa: ASYNC910
        cache = MemoryCache(max_size=100)
        assert cache._max_size == 100
        assert len(cache) == 0

    async def test_set_get(self) -> None:
        cache = MemoryCache()
        await cache.connect()

        await cache.set("key1", "value1")
        assert await cache.get("key1") == "value1"
        assert await cache.get("nonexistent") is None

    async def test_delete(self) -> None:
        cache = MemoryCache()
        await cache.set("key1", "value1")
        await cache.delete("key1")
        assert await cache.get("key1") is None

    async def test_no_ttl_never_expires(self, monkeypatch) -> None:
        cache = MemoryCache()
        await cache.set("block_1", "{}")
        monkeypatch.setattr(time, "time", lambda: 10**12)
        assert await cache.get("block_1") == "{}"

    async def test_ttl_expiry(self, monkeypatch) -> None:
        cache = MemoryCache()
        now = time.time()
        await cache.set("key1", "value1", ttl=60)

        monkeypatch.setattr(time, "time", lambda: now + 61)
        assert await cache.get("key1") is None
        assert len(cache) == 0

    async def test_lru_eviction(self) -> None:
        cache = MemoryCache(max_size=2)
        await cache.set("a", "1")
        await cache.set("b", "2")
        await cache.get("a")  # a becomes most recent
        await cache.set("c", "3")

        assert await cache.get("b") is None
        assert await cache.get("a") == "1"
        assert await cache.get("c") == "3"

    async def test_delete_prefix(self) -> None:
        cache = MemoryCache()
        await cache.set("explorer:tx_1", "{}")
        await cache.set("explorer:block_1", "{}")
        await cache.set("stats:zcash_stats", "{}")

        assert await cache.delete_prefix("explorer:") == 2
        assert await cache.get("stats:zcash_stats") == "{}"

    async def test_flush(self) -> None:
        cache = MemoryCache()
        await cache.set("a", "1")
        await cache.flush()
        assert len(cache) == 0
