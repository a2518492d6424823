# dexmetrics/services/volume_service.py

from decimal import Decimal
import math
from typing import Callable, Iterable, List

from .cache import AggregateCache
from .pricing import PricingService, tvl_of
from .transaction_queries import TransactionQueries
from ..core.logging import LoggingMixin
from ..types.config import AggregationConfig
from ..types.model import (
    StoredTransaction,
    TransactionType,
    TvlConvention,
    TvlVolumeHistory,
    TvlVolumePoint,
    VolumeStats,
    WindowVolumes,
)
from ..utils.amounts import is_finite_positive
from ..utils.concurrency import fan_out
from ..utils.time import DAY_MS, TVL_HISTORY_RANGES, floor_to_second, now_ms, resolve_range


def extract_bch_volume(entry: StoredTransaction) -> Decimal:
    """BCH side of a trade: the first finite positive of bch_in, bch_out"""
    amounts = entry.amounts
    if amounts is None:
        return Decimal(0)
    for candidate in (amounts.bch_in, amounts.bch_out):
        if is_finite_positive(candidate):
            return candidate
    return Decimal(0)


def liquidity_delta(entry: StoredTransaction) -> Decimal:
    """Signed BCH change in pool reserves caused by a liquidity event"""
    amounts = entry.amounts
    if amounts is None:
        return Decimal(0)
    if entry.type in (TransactionType.CREATE_POOL, TransactionType.ADD_LIQUIDITY):
        return amounts.bch_in if is_finite_positive(amounts.bch_in) else Decimal(0)
    if entry.type is TransactionType.REMOVE_LIQUIDITY:
        return -amounts.bch_out if is_finite_positive(amounts.bch_out) else Decimal(0)
    return Decimal(0)


def bucket_window_volumes(entries: Iterable[StoredTransaction], now: int, window_ms: int) -> WindowVolumes:
    """Split volume into the last window [now-W, ...) and the one before it [now-2W, now-W)"""
    current_start = now - window_ms
    previous_start = now - 2 * window_ms

    current = Decimal(0)
    previous = Decimal(0)
    for entry in entries:
        volume = extract_bch_volume(entry)
        if not volume:
            continue
        if entry.created_at >= current_start:
            current += volume
        elif entry.created_at >= previous_start:
            previous += volume

    return WindowVolumes(current=current, previous=previous)


class VolumeService(LoggingMixin):
    def __init__(self, queries: TransactionQueries, pricing: PricingService, cache: AggregateCache,
                 aggregation: AggregationConfig, clock: Callable[[], int] = now_ms):
        self.queries = queries
        self.pricing = pricing
        self.cache = cache
        self.fanout_workers = aggregation.fanout_workers
        self.clock = clock

    def volume_stats(self, force: bool = False) -> VolumeStats:
        return self.cache.get_or_set(("volume_stats",), lambda: self._volume_stats(force), force=force)

    def _volume_stats(self, force: bool) -> VolumeStats:
        now = self.clock()
        swaps, pools = fan_out(
            lambda: self.queries.swaps(created_from=now - 60 * DAY_MS),
            lambda: self.pricing.all_pools(force=force),
            max_workers=self.fanout_workers,
        )

        day = bucket_window_volumes(swaps, now, DAY_MS)
        month = bucket_window_volumes(swaps, now, 30 * DAY_MS)

        return VolumeStats(
            volume_24h_bch=day.current,
            prev_24h_bch=day.previous,
            volume_30d_bch=month.current,
            prev_30d_bch=month.previous,
            tvl_bch=tvl_of(pools, TvlConvention.BCH_SIDE),
        )

    def token_volume_windows(self, token_category: str, now: int):
        """24h and 30d windows of one category, as (day, month) WindowVolumes"""
        swaps = self.queries.swaps(created_from=now - 60 * DAY_MS, token_categories=[token_category])
        return (
            bucket_window_volumes(swaps, now, DAY_MS),
            bucket_window_volumes(swaps, now, 30 * DAY_MS),
        )

    def tvl_volume_history(self, range_name: str = "30d", force: bool = False) -> TvlVolumeHistory:
        resolved = resolve_range(range_name, TVL_HISTORY_RANGES)
        return self.cache.get_or_set(
            ("tvl_volume_history", resolved),
            lambda: self._tvl_volume_history(resolved, force),
            force=force,
        )

    def _tvl_volume_history(self, range_name: str, force: bool) -> TvlVolumeHistory:
        now = self.clock()
        start = now - TVL_HISTORY_RANGES[range_name]

        pools, swaps, liquidity = fan_out(
            lambda: self.pricing.all_pools(force=force),
            lambda: self.queries.swaps(created_from=start),
            lambda: self.queries.liquidity_events(created_from=start),
            max_workers=self.fanout_workers,
        )
        current_tvl = tvl_of(pools, TvlConvention.BOTH_SIDES)

        bucket_count = max(1, math.ceil((now - start) / DAY_MS))
        points: List[TvlVolumePoint] = []

        for i in range(bucket_count):
            bucket_start = start + i * DAY_MS
            bucket_end = start + (i + 1) * DAY_MS
            t = min(bucket_end, now)

            volume = sum(
                (extract_bch_volume(e) for e in swaps if bucket_start <= e.created_at < bucket_end),
                Decimal(0),
            )
            change_after = sum(
                (liquidity_delta(e) for e in liquidity if e.created_at > t),
                Decimal(0),
            )

            points.append(TvlVolumePoint(
                timestamp=floor_to_second(t),
                tvl_bch=max(Decimal(0), current_tvl - change_after),
                volume_bch=volume,
            ))

        self.log_debug("TVL/volume history built", range=range_name, entry_count=len(swaps))
        return TvlVolumeHistory(range=range_name, points=points)
