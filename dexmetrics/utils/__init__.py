# dexmetrics/utils/__init__.py

from .amounts import (
    BCH_DECIMALS,
    to_decimal,
    is_finite,
    is_finite_positive,
    positive_or_zero,
    round_bch,
)
from .time import (
    SECOND_MS,
    HOUR_MS,
    DAY_MS,
    now_ms,
    floor_to_second,
    resolve_range,
    PRICE_HISTORY_RANGES,
    TVL_HISTORY_RANGES,
)
from .concurrency import fan_out

__all__ = [
    'BCH_DECIMALS',
    'to_decimal',
    'is_finite',
    'is_finite_positive',
    'positive_or_zero',
    'round_bch',
    'SECOND_MS',
    'HOUR_MS',
    'DAY_MS',
    'now_ms',
    'floor_to_second',
    'resolve_range',
    'PRICE_HISTORY_RANGES',
    'TVL_HISTORY_RANGES',
    'fan_out',
]
