# api/routers/portfolio.py

from typing import Optional
import logging

import msgspec
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool

from dexmetrics.core.logging import log_with_context
from dexmetrics.services import ActivityService, BalanceHistoryService, TransactionRecorder
from dexmetrics.types.model import RecordTransactionRequest
from ..dependencies import (
    get_activity_service,
    get_balance_history_service,
    get_logger,
    get_transaction_recorder,
    http_error,
    json_response,
    parse_int,
)

router = APIRouter()


@router.get("/balance-history")
def get_balance_history(
    address: Optional[str] = Query(default=None),
    force: bool = Query(default=False),
    history: BalanceHistoryService = Depends(get_balance_history_service),
    logger = Depends(get_logger)
):
    """Portfolio value curve rebuilt by undoing the address's swaps"""
    try:
        return json_response(history.balance_history(address, force=force))
    except Exception as e:
        raise http_error(e, logger, "Error fetching balance history", address=address)


@router.get("/history")
def get_address_history(
    address: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None, description="Number of entries (default 10)"),
    force: bool = Query(default=False),
    activity: ActivityService = Depends(get_activity_service),
    logger = Depends(get_logger)
):
    try:
        return json_response(activity.address_activity(address, limit=parse_int(limit), force=force))
    except Exception as e:
        raise http_error(e, logger, "Error fetching address history", address=address)


@router.post("/transactions")
async def record_transaction(
    request: Request,
    recorder: TransactionRecorder = Depends(get_transaction_recorder),
    logger = Depends(get_logger)
):
    """Append a client-reported transaction to the log and invalidate cached aggregates"""
    try:
        body = msgspec.json.decode(await request.body(), type=RecordTransactionRequest)
    except msgspec.ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except msgspec.DecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    try:
        entry = await run_in_threadpool(recorder.record, body)

        log_with_context(logger, logging.INFO, "Transaction recorded via API",
                         txid=entry.txid, address=entry.address)

        return {"ok": True}

    except Exception as e:
        raise http_error(e, logger, "Error recording transaction", txid=body.txid)
