"""Blockchair proxy endpoint.

``GET /api/zcash?endpoint=<path>`` forwards to ``<blockchair>/<path>`` and
returns the upstream JSON verbatim.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from zcash_analytics.api.dependencies import get_engine
from zcash_analytics.engine.client import DashboardEngine  # noqa: TC001
from zcash_analytics.errors.definitions import ErrMissingEndpoint

router = APIRouter(tags=["zcash"])


@router.get("/zcash")
async def proxy(
    request: Request,
    engine: Annotated[DashboardEngine, Depends(get_engine)],
    endpoint: str = "",
) -> JSONResponse:
    """Proxy a Blockchair request, mirroring the upstream status on failure."""
    if not endpoint:
        return JSONResponse(status_code=400, content={"error": ErrMissingEndpoint.message})

    # Everything but ``endpoint`` is passed through to Blockchair.
    params = {k: v for k, v in request.query_params.items() if k != "endpoint"}
    result = await engine.blockchair.proxy(endpoint, params=params or None)
    return JSONResponse(status_code=result.status_code, content=result.body)
