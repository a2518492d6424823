# dexmetrics/types/config.py

from typing import Optional

from msgspec import Struct


class DatabaseConfig(Struct):
    url: str
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30

class BalanceApiConfig(Struct):
    base_url: str
    timeout: float = 10.0

class NotificationConfig(Struct):
    url: Optional[str] = None
    channel: str = "transaction"
    timeout: float = 2.0
    enabled: bool = True

class CacheConfig(Struct):
    ttl_seconds: float = 15.0
    max_entries: int = 512

class AggregationConfig(Struct):
    balance_lookback_days: int = 90
    dedupe_txids: bool = True
    fanout_workers: int = 4
