"""Cache client abstraction with Redis and in-memory backends.

Values are JSON documents. Each consumer works through a
:class:`CacheNamespace` so it can drop its own keys without touching
anyone else's (``explorer:`` blocks and transactions, ``stats:`` market
snapshots).
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

from zcash_analytics.config.settings import CacheEngine

if TYPE_CHECKING:
    from zcash_analytics.config.settings import CacheConfig

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    """Protocol for cache backend implementations."""

    async def connect(self) -> None: ...
    async def close(self) -> None: ...
    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str, ttl: int | None = None) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def delete_prefix(self, prefix: str) -> int: ...
    async def flush(self) -> None: ...


class CacheClient:
    """Cache abstraction that delegates to Redis or the in-memory LRU backend."""

    def __init__(self, config: CacheConfig) -> None:
        """Initialize cache client with configuration.

        Args:
            config: Cache configuration with engine type and connection params.
        """
        self._config = config
        self._backend: CacheBackend | None = None

    async def connect(self) -> None:
        """Create and connect the configured backend."""
        from zcash_analytics.cache.memory import MemoryCache
        from zcash_analytics.cache.redis import RedisCache

        match self._config.engine:
            case CacheEngine.REDIS:
                self._backend = RedisCache(self._config)
            case CacheEngine.MEMORY:
                self._backend = MemoryCache(max_size=self._config.max_size)

        await self._backend.connect()
        logger.info("Cache connected (%s)", self._config.engine)

    async def close(self) -> None:
        """Close the cache connection (idempotent)."""
        if self._backend is not None:
            await self._backend.close()
            self._backend = None

    @property
    def is_connected(self) -> bool:
        return self._backend is not None

    def namespace(self, name: str) -> CacheNamespace:
        """Return a view of this cache whose keys are prefixed with ``name:``."""
        return CacheNamespace(self, name)

    async def get_json(self, key: str) -> Any | None:
        """Get and decode a JSON value; undecodable entries read as missing."""
        raw = await self._ensure_connected().get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Dropping undecodable cache entry %s", key)
            await self._ensure_connected().delete(key)
            return None

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Encode *value* as JSON and store it. ``ttl=None`` never expires."""
        await self._ensure_connected().set(key, json.dumps(value), ttl=ttl)

    async def delete(self, key: str) -> None:
        await self._ensure_connected().delete(key)

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with *prefix*; returns how many went."""
        return await self._ensure_connected().delete_prefix(prefix)

    async def flush(self) -> None:
        """Flush all keys from the cache (development/testing only)."""
        await self._ensure_connected().flush()

    def _ensure_connected(self) -> CacheBackend:
        if self._backend is None:
            msg = "Cache not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._backend


class CacheNamespace:
    """Key-prefixed view over a :class:`CacheClient`."""

    def __init__(self, client: CacheClient, name: str) -> None:
        self._client = client
        self._prefix = f"{name}:"

    @property
    def prefix(self) -> str:
        return self._prefix

    async def get_json(self, key: str) -> Any | None:
        return await self._client.get_json(self._prefix + key)

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        await self._client.set_json(self._prefix + key, value, ttl=ttl)

    async def delete(self, key: str) -> None:
        await self._client.delete(self._prefix + key)

    async def clear(self) -> int:
        """Drop every key in this namespace."""
        return await self._client.delete_prefix(self._prefix)
