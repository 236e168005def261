"""Predefined error instances raised at the API boundary."""

from __future__ import annotations

from zcash_analytics.errors.dashboard_errors import DashboardError

# -- Engine ----------------------------------------------------------------

ErrEngineNotReady = DashboardError(
    "engine not initialized", status_code=503, code="engine-not-ready"
)

# -- Validation ------------------------------------------------------------

ErrMissingEndpoint = DashboardError(
    "Endpoint parameter required", status_code=400, code="missing-endpoint"
)

# -- Not Found -------------------------------------------------------------

ErrBlockNotFound = DashboardError("block not found", status_code=404, code="block-not-found")
ErrTransactionNotFound = DashboardError(
    "transaction not found", status_code=404, code="transaction-not-found"
)
