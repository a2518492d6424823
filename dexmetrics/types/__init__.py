# dexmetrics/types/__init__.py

from .model import (
    TransactionType,
    TradeDirection,
    SortOrder,
    TvlConvention,
    LIQUIDITY_TYPES,
    PoolSnapshot,
    TxAmounts,
    StoredTransaction,
    TokenBalance,
    LiveBalance,
    TransactionFilter,
    TokenAggregate,
    PricePoint,
    BalancePoint,
    WindowVolumes,
    VolumeStats,
    TvlVolumePoint,
    TvlVolumeHistory,
    PriceHistory,
    BalanceHistory,
    MarketPrice,
    TokenOverview,
    TokensOverview,
    TokenDetail,
    TokenMeta,
    PoolsSummary,
    ActivityPage,
    RecordTransactionRequest,
)
from .config import (
    DatabaseConfig,
    BalanceApiConfig,
    NotificationConfig,
    CacheConfig,
    AggregationConfig,
)
from .errors import (
    MetricsEngineError,
    InvalidRequestError,
    NotFoundError,
    require_text,
)

__all__ = [
    # Enums
    'TransactionType',
    'TradeDirection',
    'SortOrder',
    'TvlConvention',
    'LIQUIDITY_TYPES',

    # Source data
    'PoolSnapshot',
    'TxAmounts',
    'StoredTransaction',
    'TokenBalance',
    'LiveBalance',
    'TransactionFilter',

    # Derived views
    'TokenAggregate',
    'PricePoint',
    'BalancePoint',
    'WindowVolumes',
    'VolumeStats',
    'TvlVolumePoint',
    'TvlVolumeHistory',
    'PriceHistory',
    'BalanceHistory',
    'MarketPrice',
    'TokenOverview',
    'TokensOverview',
    'TokenDetail',
    'TokenMeta',
    'PoolsSummary',
    'ActivityPage',
    'RecordTransactionRequest',

    # Config
    'DatabaseConfig',
    'BalanceApiConfig',
    'NotificationConfig',
    'CacheConfig',
    'AggregationConfig',

    # Errors
    'MetricsEngineError',
    'InvalidRequestError',
    'NotFoundError',
    'require_text',
]
