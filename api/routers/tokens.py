# api/routers/tokens.py

from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query

from dexmetrics.core.logging import log_with_context
from dexmetrics.services import PriceHistoryService, TokenService
from ..dependencies import (
    get_logger,
    get_price_history_service,
    get_token_service,
    http_error,
    json_response,
    parse_int,
)

router = APIRouter()


@router.get("/overview")
def get_tokens_overview(
    q: Optional[str] = Query(default=None, description="Search symbol, name or category"),
    limit: Optional[str] = Query(default=None),
    offset: Optional[str] = Query(default=None),
    force: bool = Query(default=False),
    tokens: TokenService = Depends(get_token_service),
    logger = Depends(get_logger)
):
    """Every token with pools, sorted by TVL"""
    try:
        overview = tokens.tokens_overview(
            q=q,
            limit=parse_int(limit),
            offset=parse_int(offset) or 0,
            force=force,
        )

        log_with_context(logger, logging.DEBUG, "Tokens overview fetched",
                         entry_count=len(overview.tokens))

        return json_response(overview)

    except Exception as e:
        raise http_error(e, logger, "Error fetching tokens overview")


@router.get("/{token_category}/price-history")
def get_price_history(
    token_category: str,
    range: Optional[str] = Query(default="30d", description="1h, 24h, 7d, 30d or 90d"),
    live: bool = Query(default=False, description="Append the current spot price"),
    force: bool = Query(default=False),
    history: PriceHistoryService = Depends(get_price_history_service),
    logger = Depends(get_logger)
):
    try:
        return json_response(history.price_history(token_category, range, live=live, force=force))
    except Exception as e:
        raise http_error(e, logger, "Error fetching price history",
                         token_category=token_category, range=range)


@router.get("/{token_category}")
def get_token_detail(
    token_category: str,
    force: bool = Query(default=False),
    tokens: TokenService = Depends(get_token_service),
    logger = Depends(get_logger)
):
    try:
        return json_response(tokens.token_detail(token_category, force=force))
    except Exception as e:
        raise http_error(e, logger, "Error fetching token", token_category=token_category)
