"""Redis cache backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from redis.asyncio import Redis

if TYPE_CHECKING:
    from zcash_analytics.config.settings import CacheConfig


class RedisCache:
    """Redis-based cache backend using redis-py's asyncio client."""

    def __init__(self, config: CacheConfig) -> None:
        self._config = config
        self._redis: Redis | None = None

    async def connect(self) -> None:
        """Connect to Redis and verify the connection.

        Raises:
            ConnectionError: If Redis is unreachable.
        """
        self._redis = Redis.from_url(
            self._config.url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=self._config.max_connections,
        )
        try:
            await self._redis.ping()
        except Exception as e:
            msg = f"Failed to connect to Redis at {self._config.url}"
            raise ConnectionError(msg) from e

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

    async def get(self, key: str) -> str | None:
        return await self._client().get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        if ttl is not None:
            await self._client().setex(key, ttl, value)
        else:
            await self._client().set(key, value)

    async def delete(self, key: str) -> None:
        await self._client().delete(key)

    async def delete_prefix(self, prefix: str) -> int:
        """Delete keys matching ``prefix*`` using SCAN (never KEYS)."""
        client = self._client()
        count = 0
        async for key in client.scan_iter(match=f"{prefix}*"):
            count += await client.delete(key)
        return count

    async def flush(self) -> None:
        """Flush the whole Redis database (use with caution!)."""
        await self._client().flushdb()

    def _client(self) -> Redis:
        if self._redis is None:
            msg = "Redis cache not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._redis
