"""Confidential analytics endpoints.

``GET`` on each path is a health check; ``POST`` performs the operation.
Every ``POST`` answers with ``{success, ...}``: failures render as
``{success: false, error}`` rather than the ``{code, message}`` envelope.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from zcash_analytics.api.dependencies import get_engine
from zcash_analytics.engine.client import DashboardEngine  # noqa: TC001
from zcash_analytics.errors.dashboard_errors import DashboardError
from zcash_analytics.nillion.models import REQUIRED_FIELDS, AnalyticsRecord

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nillion", tags=["nillion"])


def _failure(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def _execute(
    engine: DashboardEngine, operation: str, call: Awaitable[dict[str, Any]]
) -> JSONResponse:
    """Run *call* within the execution budget and render the outcome."""
    timeout = engine.config.nillion.execution_timeout
    try:
        result = await asyncio.wait_for(call, timeout=timeout)
    except TimeoutError:
        logger.error("Nillion %s exceeded %.0fs execution budget", operation, timeout)
        return _failure(f"Nillion {operation} timed out after {timeout:.0f}s", 504)
    except DashboardError as exc:
        logger.error("Nillion %s failed: %s", operation, exc.message)
        return _failure(exc.message, exc.status_code)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Nillion %s failed", operation)
        return _failure(str(exc) or "Unknown error", 500)
    return JSONResponse(content=result)


def _health(engine: DashboardEngine, name: str, usage: str) -> dict[str, Any]:
    return {
        "status": "ok",
        "message": f"Nillion {name} API is available",
        "config": engine.analytics.status(),
        "usage": usage,
    }


# ---------------------------------------------------------------------------
# /init
# ---------------------------------------------------------------------------


@router.get("/init")
async def init_health(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> dict:
    return _health(engine, "Init", "POST to this endpoint to initialize Nillion service")


@router.post("/init")
async def init(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> JSONResponse:
    """Register the builder and make sure the analytics collection exists."""
    return await _execute(engine, "init", engine.analytics.initialize())


# ---------------------------------------------------------------------------
# /store
# ---------------------------------------------------------------------------


@router.get("/store")
async def store_health(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> dict:
    result = _health(
        engine, "Store", "POST to this endpoint with analytics data to store privately"
    )
    result["requiredFields"] = list(REQUIRED_FIELDS)
    return result


@router.post("/store")
async def store(
    request: Request, engine: Annotated[DashboardEngine, Depends(get_engine)]
) -> JSONResponse:
    """Store one analytics record.

    A body that is not JSON or lacks a required field is rejected with 400
    before anything is stored.
    """
    try:
        payload = await request.json()
    except ValueError:
        return _failure("Request body must be JSON", 400)

    try:
        record = AnalyticsRecord.model_validate(payload)
    except ValidationError as exc:
        missing = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        return _failure(f"Invalid analytics record: {', '.join(missing) or 'body'}", 400)

    return await _execute(engine, "store", engine.analytics.store(record))


# ---------------------------------------------------------------------------
# /aggregate
# ---------------------------------------------------------------------------


@router.get("/aggregate")
async def aggregate_health(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> dict:
    return _health(
        engine, "Aggregate", "POST to this endpoint to compute aggregated analytics confidentially"
    )


@router.post("/aggregate")
async def aggregate(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> JSONResponse:
    """Aggregate every stored record."""
    return await _execute(engine, "aggregate", engine.analytics.aggregate())
