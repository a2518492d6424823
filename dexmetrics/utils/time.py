# dexmetrics/utils/time.py
"""
Epoch-millisecond clock and named lookback ranges
"""

import time
from typing import Dict

SECOND_MS = 1000
HOUR_MS = 60 * 60 * SECOND_MS
DAY_MS = 24 * HOUR_MS


def now_ms() -> int:
    return int(time.time() * 1000)


def floor_to_second(timestamp_ms: int) -> int:
    return (timestamp_ms // SECOND_MS) * SECOND_MS


# Price history accepts a few aliases per range
PRICE_HISTORY_RANGES: Dict[str, int] = {
    "1h": HOUR_MS,
    "24h": DAY_MS,
    "1d": DAY_MS,
    "7d": 7 * DAY_MS,
    "1w": 7 * DAY_MS,
    "30d": 30 * DAY_MS,
    "1m": 30 * DAY_MS,
    "90d": 90 * DAY_MS,
    "max": 90 * DAY_MS,
}

TVL_HISTORY_RANGES: Dict[str, int] = {
    "7d": 7 * DAY_MS,
    "30d": 30 * DAY_MS,
    "90d": 90 * DAY_MS,
}

DEFAULT_RANGE = "30d"


def resolve_range(value, ranges: Dict[str, int]) -> str:
    """Normalize a range name, falling back to 30d for anything unknown"""
    if isinstance(value, str):
        key = value.strip().lower()
        if key in ranges:
            return key
    return DEFAULT_RANGE
