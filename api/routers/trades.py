# api/routers/trades.py

from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query

from dexmetrics.core.logging import log_with_context
from dexmetrics.services import ActivityService
from ..dependencies import get_activity_service, get_logger, http_error, json_response, parse_int

router = APIRouter()


@router.get("/recent")
def get_recent_trades(
    limit: Optional[str] = Query(default=None, description="Number of trades to return (default 50)"),
    token_category: Optional[str] = Query(default=None, alias="tokenCategory"),
    force: bool = Query(default=False),
    activity: ActivityService = Depends(get_activity_service),
    logger = Depends(get_logger)
):
    """Most recent swaps, newest first"""
    try:
        page = activity.recent_trades(limit=parse_int(limit), token_category=token_category, force=force)

        log_with_context(logger, logging.DEBUG, "Recent trades fetched",
                         entry_count=page.total, token_category=token_category)

        return json_response(page)

    except Exception as e:
        raise http_error(e, logger, "Error fetching recent trades")
