"""Zcash network statistics from Blockchair."""

from zcash_analytics.stats.client import BlockchairClient, ProxyResult
from zcash_analytics.stats.formatting import metrics_from_stats
from zcash_analytics.stats.service import StatsService

__all__ = ["BlockchairClient", "ProxyResult", "StatsService", "metrics_from_stats"]
