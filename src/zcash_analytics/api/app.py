"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from zcash_analytics import __version__
from zcash_analytics.api.middleware.cors import setup_cors
from zcash_analytics.api.routes import api_router
from zcash_analytics.config.settings import AppConfig
from zcash_analytics.engine.client import DashboardEngine
from zcash_analytics.errors.dashboard_errors import DashboardError
from zcash_analytics.metrics.collector import EngineMetrics
from zcash_analytics.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle hooks.

    Initialises the engine (cache, upstream clients, services) on startup
    and gracefully shuts down on exit.
    """
    config: AppConfig = app.state.config
    engine = DashboardEngine(config, metrics=getattr(app.state, "metrics", None))

    try:
        await engine.initialize()
        app.state.engine = engine
        logger.info("Zcash analytics engine initialized")
        yield
    finally:
        await engine.close()
        logger.info("Zcash analytics engine shut down")


def create_app(*, config: AppConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
    """
    if config is None:
        config = AppConfig()

    app = FastAPI(
        title="zcash-analytics",
        version=__version__,
        description="Zcash network analytics and privacy explorer API",
        debug=config.debug,
        lifespan=_lifespan,
    )

    # Store config on app.state for lifespan access
    app.state.config = config
    if config.metrics.enabled:
        app.state.metrics = EngineMetrics()

    # -- Middleware --
    setup_cors(app)

    # -- Error handler --
    @app.exception_handler(DashboardError)
    async def _dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.code, "message": exc.message},
        )

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        registry = app.state.metrics.registry if hasattr(app.state, "metrics") else None
        body = generate_latest(registry) if registry else generate_latest()
        return Response(
            content=body,
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    # -- Prometheus request metrics middleware --
    if hasattr(app.state, "metrics"):
        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)

    # -- Mount API --
    app.include_router(api_router)

    return app
