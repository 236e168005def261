"""REST API routes.

Combines all sub-routers under the ``/api`` prefix.
"""

from fastapi import APIRouter

from zcash_analytics.api.routes.explorer import router as explorer_router
from zcash_analytics.api.routes.nillion import router as nillion_router
from zcash_analytics.api.routes.stats import router as stats_router
from zcash_analytics.api.routes.zcash import router as zcash_router

api_router = APIRouter(prefix="/api")

api_router.include_router(nillion_router)
api_router.include_router(zcash_router)
api_router.include_router(stats_router)
api_router.include_router(explorer_router)

__all__ = ["api_router"]
