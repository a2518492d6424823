# dexmetrics/services/pricing.py
"""
Liquidity-weighted spot pricing over AMM pool snapshots.

A token can trade in several pools. Its spot price is the average of the
pools' quoted prices weighted by each pool's BCH reserve:

    price = sum(price_i * bch_reserve_i) / sum(bch_reserve_i)

The per-pool ``token_price_in_bch`` is taken as supplied by the chain
reader and never re-derived from reserves here.
"""

from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from .cache import AggregateCache
from ..clients.interfaces import PoolRegistryReader
from ..core.logging import LoggingMixin
from ..types.model import PoolSnapshot, TokenAggregate, TvlConvention
from ..utils.amounts import is_finite


def weighted_price(pools: Iterable[PoolSnapshot]) -> Optional[Decimal]:
    numerator = Decimal(0)
    denominator = Decimal(0)

    for pool in pools:
        if not (is_finite(pool.bch_reserve) and is_finite(pool.token_price_in_bch)):
            # one unusable pool makes the weighted sum undefined
            return None
        numerator += pool.token_price_in_bch * pool.bch_reserve
        denominator += pool.bch_reserve

    if denominator <= 0:
        return None
    return numerator / denominator


def tvl_of(pools: Iterable[PoolSnapshot], convention: TvlConvention) -> Decimal:
    bch_side = sum((pool.bch_reserve for pool in pools if is_finite(pool.bch_reserve)), Decimal(0))

    if convention is TvlConvention.BCH_SIDE:
        return bch_side
    elif convention is TvlConvention.BOTH_SIDES:
        return bch_side * 2
    else:
        raise ValueError(f"Unknown TVL convention: {convention!r}")


def aggregate_token(pools: List[PoolSnapshot], convention: TvlConvention) -> TokenAggregate:
    """Combine the pools of a single category. ``pools`` must not be empty."""
    if not pools:
        raise ValueError("aggregate_token needs at least one pool")

    aggregate = TokenAggregate(
        token_category=pools[0].token_category,
        tvl_bch=tvl_of(pools, convention),
        token_reserve_total=sum(
            (pool.token_reserve for pool in pools if is_finite(pool.token_reserve)), Decimal(0)
        ),
        pool_count=len(pools),
        price_bch=weighted_price(pools),
    )

    # first non-empty metadata wins
    for pool in pools:
        if not aggregate.symbol and pool.token_symbol:
            aggregate.symbol = pool.token_symbol
        if not aggregate.name and pool.token_name:
            aggregate.name = pool.token_name
        if not aggregate.icon_url and pool.token_icon_url:
            aggregate.icon_url = pool.token_icon_url

    return aggregate


def group_by_category(pools: Iterable[PoolSnapshot]) -> Dict[str, List[PoolSnapshot]]:
    grouped: Dict[str, List[PoolSnapshot]] = {}
    for pool in pools:
        grouped.setdefault(pool.token_category, []).append(pool)
    return grouped


def aggregate_by_category(pools: Iterable[PoolSnapshot],
                          convention: TvlConvention) -> Dict[str, TokenAggregate]:
    return {
        category: aggregate_token(category_pools, convention)
        for category, category_pools in group_by_category(pools).items()
    }


def build_price_map(pools: Iterable[PoolSnapshot]) -> Dict[str, Decimal]:
    """Weighted spot price per category; categories without a usable price are left out"""
    prices = {}
    for category, category_pools in group_by_category(pools).items():
        price = weighted_price(category_pools)
        if price is not None:
            prices[category] = price
    return prices


class PricingService(LoggingMixin):
    """Cached access to pool snapshots and the prices derived from them"""

    def __init__(self, pool_registry: PoolRegistryReader, cache: AggregateCache):
        self.pool_registry = pool_registry
        self.cache = cache

    def all_pools(self, force: bool = False) -> List[PoolSnapshot]:
        return self.cache.get_or_set(("pools",), self.pool_registry.list_pools, force=force)

    def pools_for_token(self, token_category: str, force: bool = False) -> List[PoolSnapshot]:
        category = token_category.strip().lower()
        return self.cache.get_or_set(
            ("pools", category),
            lambda: self.pool_registry.pools_for_token(category),
            force=force,
        )

    def price_map(self, force: bool = False) -> Dict[str, Decimal]:
        return build_price_map(self.all_pools(force=force))

    def aggregates(self, convention: TvlConvention, force: bool = False) -> Dict[str, TokenAggregate]:
        return aggregate_by_category(self.all_pools(force=force), convention)
