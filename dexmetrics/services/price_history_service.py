# dexmetrics/services/price_history_service.py

from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from .cache import AggregateCache
from .pricing import PricingService, weighted_price
from .transaction_queries import TransactionQueries
from ..core.logging import LoggingMixin
from ..types.errors import require_text
from ..types.model import PriceHistory, PricePoint, StoredTransaction, TradeDirection
from ..utils.amounts import is_finite, is_finite_positive
from ..utils.time import PRICE_HISTORY_RANGES, now_ms, resolve_range


def extract_trade_price(entry: StoredTransaction) -> Optional[Decimal]:
    """Execution price of a swap in BCH per token, None when an operand is unusable"""
    amounts = entry.amounts
    if amounts is None or entry.direction is None:
        return None

    if entry.direction is TradeDirection.BCH_TO_TOKEN:
        bch, tokens = amounts.bch_in, amounts.token_out
    elif entry.direction is TradeDirection.TOKEN_TO_BCH:
        bch, tokens = amounts.bch_out, amounts.token_in
    else:
        raise ValueError(f"Unknown trade direction: {entry.direction!r}")

    if not (is_finite_positive(bch) and is_finite_positive(tokens)):
        return None
    return bch / tokens


def extract_initial_price(entry: StoredTransaction) -> Optional[Decimal]:
    """Price implied by the deposit that created a pool"""
    amounts = entry.amounts
    if amounts is None:
        return None
    if not (is_finite_positive(amounts.bch_in) and is_finite_positive(amounts.token_in)):
        return None
    return amounts.bch_in / amounts.token_in


def trade_volume(entry: StoredTransaction) -> Decimal:
    """Both BCH legs added together; zero unless the sum is finite and positive"""
    amounts = entry.amounts
    if amounts is None:
        return Decimal(0)
    legs = [leg for leg in (amounts.bch_in, amounts.bch_out) if leg is not None]
    if not all(is_finite(leg) for leg in legs):
        return Decimal(0)
    total = sum(legs, Decimal(0))
    return total if total > 0 else Decimal(0)


def trade_price_points(entries: Iterable[StoredTransaction]) -> List[PricePoint]:
    points = []
    for entry in entries:
        price = extract_trade_price(entry)
        if price is None:
            continue
        points.append(PricePoint(timestamp=entry.created_at, price_bch=price, volume=trade_volume(entry)))
    return points


def initial_price_points(creations: Iterable[StoredTransaction]) -> Dict[str, PricePoint]:
    """Launch price per category from its earliest create_pool entry.

    ``creations`` must be sorted oldest first. A category whose first pool
    creation carries no usable amounts has no launch price.
    """
    initial: Dict[str, PricePoint] = {}
    seen = set()
    for entry in creations:
        category = entry.token_category
        if not category or category in seen:
            continue
        seen.add(category)
        price = extract_initial_price(entry)
        if price is None:
            continue
        initial[category] = PricePoint(timestamp=entry.created_at, price_bch=price, volume=Decimal(0))
    return initial


class PriceHistoryService(LoggingMixin):
    def __init__(self, queries: TransactionQueries, pricing: PricingService, cache: AggregateCache,
                 clock: Callable[[], int] = now_ms):
        self.queries = queries
        self.pricing = pricing
        self.cache = cache
        self.clock = clock

    def price_history(self, token_category: str, range_name: str = "30d",
                      live: bool = False, force: bool = False) -> PriceHistory:
        category = require_text(token_category, "tokenCategory").lower()
        resolved = resolve_range(range_name, PRICE_HISTORY_RANGES)

        return self.cache.get_or_set(
            ("price_history", category, resolved, live),
            lambda: self._price_history(category, resolved, live, force),
            force=force,
        )

    def _price_history(self, category: str, range_name: str, live: bool, force: bool) -> PriceHistory:
        now = self.clock()
        start = now - PRICE_HISTORY_RANGES[range_name]

        swaps = self.queries.swaps(created_from=start, token_categories=[category])
        points = trade_price_points(swaps)

        launch = initial_price_points(self.queries.pool_creations([category])).get(category)
        if launch is not None and launch.timestamp >= start:
            points.append(launch)

        points.sort(key=lambda p: p.timestamp)

        if live:
            spot = weighted_price(self.pricing.pools_for_token(category, force=force))
            if spot is not None:
                points.append(PricePoint(timestamp=now, price_bch=spot, volume=Decimal(0)))

        self.log_debug("Price history built", token_category=category, range=range_name,
                       entry_count=len(points))
        return PriceHistory(token_category=category, range=range_name, points=points)
