"""FastAPI dependency injection helpers.

Usage in a route::

    @router.get("/stats")
    async def get_stats(
        engine: Annotated[DashboardEngine, Depends(get_engine)],
    ) -> ...:
        ...
"""

from __future__ import annotations

from fastapi import Request

from zcash_analytics.engine.client import DashboardEngine  # noqa: TC001
from zcash_analytics.errors.definitions import ErrEngineNotReady


def get_engine(request: Request) -> DashboardEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        DashboardError: 503 if the engine is not available.
    """
    engine: DashboardEngine | None = getattr(request.app.state, "engine", None)
    if engine is None:
        raise ErrEngineNotReady
    return engine
