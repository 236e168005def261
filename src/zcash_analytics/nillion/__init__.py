"""Privacy-preserving analytics over the nilDB confidential storage network."""

from zcash_analytics.nillion.demo_store import DemoDataStore
from zcash_analytics.nillion.models import AnalyticsRecord, aggregate_documents
from zcash_analytics.nillion.service import ConfidentialAnalyticsService
from zcash_analytics.nillion.vault import VaultClient

__all__ = [
    "AnalyticsRecord",
    "ConfidentialAnalyticsService",
    "DemoDataStore",
    "VaultClient",
    "aggregate_documents",
]
