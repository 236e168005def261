"""Error types for the analytics dashboard."""

from zcash_analytics.errors.dashboard_errors import (
    DashboardError,
    UpstreamError,
    VaultAuthError,
    VaultError,
)

__all__ = ["DashboardError", "UpstreamError", "VaultAuthError", "VaultError"]
