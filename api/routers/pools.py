# api/routers/pools.py

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query

from dexmetrics.core.logging import log_with_context
from dexmetrics.services import TokenService
from ..dependencies import get_token_service, get_logger, http_error, json_response

router = APIRouter()


@router.get("")
def get_pools(
    force: bool = Query(default=False),
    tokens: TokenService = Depends(get_token_service),
    logger = Depends(get_logger)
):
    """All registered pools with liquidity totals"""
    try:
        return json_response(tokens.pools_summary(force=force))
    except Exception as e:
        raise http_error(e, logger, "Error fetching pools")


@router.get("/price")
def get_market_price(
    token_category: Optional[str] = Query(default=None, alias="tokenCategory"),
    force: bool = Query(default=False),
    tokens: TokenService = Depends(get_token_service),
    logger = Depends(get_logger)
):
    """Liquidity-weighted market price of one token, rounded to BCH precision"""
    try:
        price = tokens.market_price(token_category, force=force)

        log_with_context(logger, logging.DEBUG, "Market price fetched",
                         token_category=token_category)

        if not price.has_market_pools:
            return {"hasMarketPools": False}
        return json_response(price)

    except Exception as e:
        raise http_error(e, logger, "Error fetching market price", token_category=token_category)


@router.get("/prices")
def get_market_prices(
    token_category: List[str] = Query(default=[], alias="tokenCategory"),
    token_categories: Optional[str] = Query(default=None, alias="tokenCategories"),
    force: bool = Query(default=False),
    tokens: TokenService = Depends(get_token_service),
    logger = Depends(get_logger)
):
    """Bulk market prices; accepts repeated tokenCategory and a comma separated tokenCategories"""
    categories = list(token_category)
    if token_categories:
        categories.extend(c.strip() for c in token_categories.split(","))

    try:
        return json_response({"prices": tokens.market_prices(categories, force=force)})
    except Exception as e:
        raise http_error(e, logger, "Error fetching bulk market prices")
