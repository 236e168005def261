"""Engine — owns the cache, upstream clients and services."""

from zcash_analytics.engine.client import DashboardEngine

__all__ = ["DashboardEngine"]
