"""In-memory LRU cache backend with optional per-key TTL."""

from __future__ import annotations

import time
from collections import OrderedDict


class MemoryCache:
    """In-memory LRU cache with TTL support.

    Entries without a TTL live until evicted or deleted.
    """

    def __init__(self, max_size: int = 10000) -> None:
        """Initialize in-memory cache.

        Args:
            max_size: Maximum number of keys to store before evicting LRU.
        """
        self._max_size = max_size
        # {key: (value, expiry_timestamp_or_none)}
        self._cache: OrderedDict[str, tuple[str, float | None]] = OrderedDict()

    async def connect(self) -> None:  # noqa: ASYNC910
        """Connect (no-op for in-memory)."""

    async def close(self) -> None:  # noqa: ASYNC910
        """Close and clear the cache."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    async def get(self, key: str) -> str | None:  # noqa: ASYNC910
        """Return the cached value, or None if missing or expired."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        value, expiry = entry
        if expiry is not None and time.time() > expiry:
            del self._cache[key]
            return None
        self._cache.move_to_end(key)
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:  # noqa: ASYNC910
        """Store *value*; ``ttl`` in seconds, None = no expiry."""
        expiry = None if ttl is None else time.time() + ttl
        self._cache.pop(key, None)
        self._cache[key] = (value, expiry)
        if len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    async def delete(self, key: str) -> None:  # noqa: ASYNC910
        self._cache.pop(key, None)

    async def delete_prefix(self, prefix: str) -> int:  # noqa: ASYNC910
        doomed = [key for key in self._cache if key.startswith(prefix)]
        for key in doomed:
            del self._cache[key]
        return len(doomed)

    async def flush(self) -> None:  # noqa: ASYNC910
        """Clear all keys from the cache."""
        self._cache.clear()
