"""Cache client with in-memory and Redis backends."""

from zcash_analytics.cache.client import CacheClient

__all__ = ["CacheClient"]
