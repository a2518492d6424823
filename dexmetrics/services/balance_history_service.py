# dexmetrics/services/balance_history_service.py

from decimal import Decimal
from typing import Callable, Dict, List

from .cache import AggregateCache
from .pricing import build_price_map
from .transaction_queries import TransactionQueries
from .volume_service import extract_bch_volume
from ..clients.interfaces import BalanceReader, PoolRegistryReader
from ..core.logging import LoggingMixin
from ..types.config import AggregationConfig
from ..types.errors import require_text
from ..types.model import (
    BalanceHistory,
    BalancePoint,
    LiveBalance,
    SortOrder,
    StoredTransaction,
    TradeDirection,
)
from ..utils.amounts import is_finite, positive_or_zero
from ..utils.concurrency import fan_out
from ..utils.time import DAY_MS, now_ms


def value_in_bch(bch: Decimal, tokens: Dict[str, Decimal], prices: Dict[str, Decimal]) -> Decimal:
    """BCH plus every token holding at its price; categories without a price count as zero"""
    value = bch
    for category, amount in tokens.items():
        price = prices.get(category)
        if is_finite(price) and is_finite(amount):
            value += amount * price
    return value


def undo_swap(bch: Decimal, tokens: Dict[str, Decimal], entry: StoredTransaction) -> Decimal:
    """Reverse one swap on the running holdings. ``tokens`` is updated in place and
    the BCH balance from before the swap is returned."""
    amounts = entry.amounts
    category = entry.token_category

    if entry.direction is TradeDirection.BCH_TO_TOKEN:
        bch += positive_or_zero(amounts.bch_in)
        remaining = tokens.get(category, Decimal(0)) - positive_or_zero(amounts.token_out)
        if remaining <= 0:
            tokens.pop(category, None)
        else:
            tokens[category] = remaining
    elif entry.direction is TradeDirection.TOKEN_TO_BCH:
        bch -= positive_or_zero(amounts.bch_out)
        tokens[category] = tokens.get(category, Decimal(0)) + positive_or_zero(amounts.token_in)
    else:
        raise ValueError(f"Unknown trade direction: {entry.direction!r}")

    return bch


def replay_balance_history(live: LiveBalance, swaps_desc: List[StoredTransaction],
                           prices: Dict[str, Decimal], now: int) -> List[BalancePoint]:
    """Walk the address's swaps from newest to oldest, undoing each one.

    Every point is valued with today's prices, so the curve shows how the
    holdings changed rather than what they were worth at the time.
    """
    bch = live.bch
    tokens: Dict[str, Decimal] = {}
    for holding in live.tokens:
        tokens[holding.category] = tokens.get(holding.category, Decimal(0)) + holding.amount

    points = [BalancePoint(timestamp=now, value_bch=value_in_bch(bch, tokens, prices),
                           bch=bch, tokens=dict(tokens))]

    for entry in swaps_desc:
        if entry.amounts is None or not entry.token_category or entry.direction is None:
            continue
        bch = undo_swap(bch, tokens, entry)
        points.append(BalancePoint(timestamp=entry.created_at, value_bch=value_in_bch(bch, tokens, prices),
                                   bch=bch, tokens=dict(tokens)))

    # oldest first; the stable sort keeps the live point last on equal timestamps
    points.reverse()
    points.sort(key=lambda p: p.timestamp)
    return points


class BalanceHistoryService(LoggingMixin):
    def __init__(self, queries: TransactionQueries, pool_registry: PoolRegistryReader,
                 balance_reader: BalanceReader, cache: AggregateCache, aggregation: AggregationConfig,
                 clock: Callable[[], int] = now_ms):
        self.queries = queries
        self.pool_registry = pool_registry
        self.balance_reader = balance_reader
        self.cache = cache
        self.lookback_ms = aggregation.balance_lookback_days * DAY_MS
        self.fanout_workers = aggregation.fanout_workers
        self.clock = clock

    def balance_history(self, address: str, force: bool = False) -> BalanceHistory:
        address = require_text(address, "address")
        return self.cache.get_or_set(
            ("balance_history", address),
            lambda: self._balance_history(address),
            force=force,
        )

    def _balance_history(self, address: str) -> BalanceHistory:
        now = self.clock()

        live, pools, swaps = fan_out(
            lambda: self.balance_reader.balances_for(address),
            self.pool_registry.list_pools,
            lambda: self.queries.swaps(created_from=now - self.lookback_ms, address=address,
                                       sort=SortOrder.DESC),
            max_workers=self.fanout_workers,
        )

        points = replay_balance_history(live, swaps, build_price_map(pools), now)

        week_start = now - 7 * DAY_MS
        this_week = [entry for entry in swaps if entry.created_at >= week_start]
        swapped = sum((extract_bch_volume(entry) for entry in this_week), Decimal(0))

        self.log_debug("Balance history replayed", address=address, entry_count=len(swaps))
        return BalanceHistory(points=points, swaps_this_week=len(this_week), swapped_this_week_bch=swapped)
