"""Network statistics endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from zcash_analytics.api.dependencies import get_engine
from zcash_analytics.engine.client import DashboardEngine  # noqa: TC001
from zcash_analytics.stats.formatting import metrics_from_stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("")
async def get_stats(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> dict:
    """Latest Blockchair stats with percentage changes (cached for 5 minutes)."""
    return await engine.stats.get_zcash_stats()


@router.get("/metrics")
async def get_metrics(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> list[dict]:
    """Headline metric cards built from the latest stats."""
    return metrics_from_stats(await engine.stats.get_zcash_stats())


@router.post("/refresh")
async def refresh_stats(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> dict:
    return await engine.stats.refresh()
