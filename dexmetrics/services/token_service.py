# dexmetrics/services/token_service.py

from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from .baseline import change_with_launch_fallback, percent_change
from .cache import AggregateCache
from .price_history_service import initial_price_points, trade_price_points
from .pricing import PricingService, aggregate_token, group_by_category, tvl_of, weighted_price
from .transaction_queries import TransactionQueries
from .volume_service import VolumeService, extract_bch_volume
from ..core.logging import LoggingMixin
from ..types.config import AggregationConfig
from ..types.errors import InvalidRequestError, NotFoundError, require_text
from ..types.model import (
    MarketPrice,
    PoolSnapshot,
    PoolsSummary,
    PricePoint,
    TokenDetail,
    TokenOverview,
    TokensOverview,
    TvlConvention,
)
from ..utils.amounts import round_bch
from ..utils.concurrency import fan_out
from ..utils.time import DAY_MS, now_ms


def _market_price_of(pools: List[PoolSnapshot]) -> MarketPrice:
    price = weighted_price(pools) if pools else None
    if price is None:
        return MarketPrice(has_market_pools=False)

    return MarketPrice(
        has_market_pools=True,
        market_price=round_bch(price),
        total_liquidity=tvl_of(pools, TvlConvention.BCH_SIDE),
        pool_count=len(pools),
    )


def filter_and_page(tokens: List[TokenOverview], q: Optional[str],
                    limit: Optional[int], offset: int) -> TokensOverview:
    """Case-insensitive search over "symbol name category", then an optional page"""
    needle = (q or "").strip().lower()
    if needle:
        tokens = [
            t for t in tokens
            if needle in f"{t.symbol or ''} {t.name or ''} {t.token_category}".lower()
        ]

    total = len(tokens)
    offset = offset if offset and offset > 0 else 0

    if limit is not None and limit > 0:
        tokens = tokens[offset:offset + limit]
    elif offset > 0:
        tokens = tokens[offset:]

    return TokensOverview(tokens=tokens, total=total)


class TokenService(LoggingMixin):
    """Per-token views: market price, the token list and a token's detail page"""

    def __init__(self, pricing: PricingService, queries: TransactionQueries, volume: VolumeService,
                 cache: AggregateCache, aggregation: AggregationConfig,
                 clock: Callable[[], int] = now_ms):
        self.pricing = pricing
        self.queries = queries
        self.volume = volume
        self.cache = cache
        self.fanout_workers = aggregation.fanout_workers
        self.clock = clock

    # === Market price ===

    def market_price(self, token_category: str, force: bool = False) -> MarketPrice:
        category = require_text(token_category, "tokenCategory").lower()
        return _market_price_of(self.pricing.pools_for_token(category, force=force))

    def market_prices(self, token_categories: Iterable[str], force: bool = False) -> Dict[str, MarketPrice]:
        unique: List[str] = []
        for raw in token_categories:
            category = (raw or "").strip()
            if category and category not in unique:
                unique.append(category)

        if not unique:
            raise InvalidRequestError("At least one tokenCategory is required")

        grouped = group_by_category(self.pricing.all_pools(force=force))
        return {category: _market_price_of(grouped.get(category.lower(), [])) for category in unique}

    def pools_summary(self, force: bool = False) -> PoolsSummary:
        pools = self.pricing.all_pools(force=force)
        return PoolsSummary(
            total_pools=len(pools),
            total_bch_liquidity=tvl_of(pools, TvlConvention.BCH_SIDE),
            token_counts={category: len(group) for category, group in group_by_category(pools).items()},
            pools=pools,
        )

    # === Token list ===

    def tokens_overview(self, q: Optional[str] = None, limit: Optional[int] = None,
                        offset: int = 0, force: bool = False) -> TokensOverview:
        tokens = self.cache.get_or_set(("tokens_overview",), lambda: self._all_tokens(force), force=force)
        return filter_and_page(tokens, q, limit, offset)

    def _all_tokens(self, force: bool) -> List[TokenOverview]:
        now = self.clock()
        aggregates, swaps, creations = fan_out(
            lambda: self.pricing.aggregates(TvlConvention.BOTH_SIDES, force=force),
            lambda: self.queries.swaps(created_from=now - 30 * DAY_MS),
            self.queries.pool_creations,
            max_workers=self.fanout_workers,
        )

        volumes: Dict[str, Decimal] = {}
        trade_points: Dict[str, List[PricePoint]] = {}
        for entry in swaps:
            if entry.token_category not in aggregates:
                continue
            volumes[entry.token_category] = volumes.get(entry.token_category, Decimal(0)) + extract_bch_volume(entry)
            trade_points.setdefault(entry.token_category, []).extend(trade_price_points([entry]))

        initial = initial_price_points(creations)

        tokens = []
        for category, aggregate in aggregates.items():
            launch = initial.get(category)
            points = list(trade_points.get(category, []))
            if launch is not None:
                points.append(launch)
            points.sort(key=lambda p: p.timestamp)

            launch_price = launch.price_bch if launch is not None else None
            tokens.append(TokenOverview(
                token_category=category,
                price_bch=aggregate.price_bch,
                tvl_bch=aggregate.tvl_bch,
                volume_30d_bch=volumes.get(category, Decimal(0)),
                change_1d_percent=change_with_launch_fallback(aggregate.price_bch, points, now - DAY_MS, launch_price),
                change_7d_percent=change_with_launch_fallback(aggregate.price_bch, points, now - 7 * DAY_MS, launch_price),
                symbol=aggregate.symbol,
                name=aggregate.name,
                icon_url=aggregate.icon_url,
            ))

        tokens.sort(key=lambda t: t.tvl_bch, reverse=True)
        self.log_debug("Tokens overview built", entry_count=len(tokens))
        return tokens

    # === Token detail ===

    def token_detail(self, token_category: str, force: bool = False) -> TokenDetail:
        category = require_text(token_category, "tokenCategory").lower()
        return self.cache.get_or_set(
            ("token_detail", category),
            lambda: self._token_detail(category, force),
            force=force,
        )

    def _token_detail(self, category: str, force: bool) -> TokenDetail:
        now = self.clock()
        pools, (day, month), creations = fan_out(
            lambda: self.pricing.pools_for_token(category, force=force),
            lambda: self.volume.token_volume_windows(category, now),
            lambda: self.queries.pool_creations([category]),
            max_workers=self.fanout_workers,
        )
        if not pools:
            raise NotFoundError("Token not found")

        aggregate = aggregate_token(pools, TvlConvention.BCH_SIDE)
        launch = initial_price_points(creations).get(category)
        since_launch = percent_change(aggregate.price_bch, launch.price_bch if launch else None)

        return TokenDetail(
            token_category=category,
            price_bch=aggregate.price_bch,
            tvl_bch=aggregate.tvl_bch,
            token_reserve_total=aggregate.token_reserve_total,
            volume_24h_bch=day.current,
            volume_30d_bch=month.current,
            prev_24h_bch=day.previous,
            prev_30d_bch=month.previous,
            change_1d_percent=since_launch,
            change_7d_percent=since_launch,
            symbol=aggregate.symbol,
            name=aggregate.name,
            icon_url=aggregate.icon_url,
        )
