# dexmetrics/services/__init__.py

from .cache import AggregateCache
from .transaction_queries import TransactionQueries, dedupe_by_txid
from .pricing import (
    PricingService,
    weighted_price,
    tvl_of,
    aggregate_token,
    aggregate_by_category,
    build_price_map,
)
from .volume_service import (
    VolumeService,
    extract_bch_volume,
    liquidity_delta,
    bucket_window_volumes,
)
from .price_history_service import (
    PriceHistoryService,
    extract_trade_price,
    extract_initial_price,
)
from .baseline import baseline_price_since, percent_change, change_with_launch_fallback
from .balance_history_service import BalanceHistoryService, replay_balance_history
from .invalidation import InvalidationGate, TransactionRecorder
from .token_service import TokenService
from .activity_service import ActivityService

__all__ = [
    'AggregateCache',
    'TransactionQueries',
    'dedupe_by_txid',
    'PricingService',
    'weighted_price',
    'tvl_of',
    'aggregate_token',
    'aggregate_by_category',
    'build_price_map',
    'VolumeService',
    'extract_bch_volume',
    'liquidity_delta',
    'bucket_window_volumes',
    'PriceHistoryService',
    'extract_trade_price',
    'extract_initial_price',
    'baseline_price_since',
    'percent_change',
    'change_with_launch_fallback',
    'BalanceHistoryService',
    'replay_balance_history',
    'InvalidationGate',
    'TransactionRecorder',
    'TokenService',
    'ActivityService',
]
