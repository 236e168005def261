"""Block explorer endpoints.

Only public chain data passes through here; viewing keys are never
accepted over HTTP.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from zcash_analytics.api.dependencies import get_engine
from zcash_analytics.engine.client import DashboardEngine  # noqa: TC001
from zcash_analytics.errors.definitions import ErrBlockNotFound, ErrTransactionNotFound

router = APIRouter(prefix="/explorer", tags=["explorer"])


@router.get("/blocks/latest")
async def get_latest_block(engine: Annotated[DashboardEngine, Depends(get_engine)]) -> dict:
    """Current chain height; 0 when no explorer answers."""
    height = await engine.explorer.get_latest_block_height()
    return {"height": height, "network": str(engine.config.explorer.network)}


@router.get("/blocks/{height_or_hash}")
async def get_block(
    height_or_hash: str,
    engine: Annotated[DashboardEngine, Depends(get_engine)],
) -> dict:
    block = await engine.explorer.get_block(height_or_hash)
    if block is None:
        raise ErrBlockNotFound
    return block.to_dict()


@router.get("/tx/{txid}")
async def get_transaction(
    txid: str,
    engine: Annotated[DashboardEngine, Depends(get_engine)],
) -> dict:
    tx = await engine.explorer.get_transaction(txid)
    if tx is None:
        raise ErrTransactionNotFound
    return tx.to_dict()


@router.get("/tx/{txid}/privacy")
async def get_transaction_privacy(
    txid: str,
    engine: Annotated[DashboardEngine, Depends(get_engine)],
) -> dict:
    """Privacy classification of one transaction."""
    tx = await engine.explorer.get_transaction(txid)
    if tx is None:
        raise ErrTransactionNotFound
    report = engine.explorer.verify_transaction_privacy(tx)
    return {"txid": tx.txid, **report.to_dict()}


@router.get("/address/{address}/transactions")
async def get_address_transactions(
    address: str,
    engine: Annotated[DashboardEngine, Depends(get_engine)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[dict]:
    """Recent transactions received by a transparent address."""
    return await engine.explorer.search_transactions_by_address(address, limit=limit)
