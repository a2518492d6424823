# dexmetrics/core/config.py

from typing import Optional
import os
import logging

import msgspec
from msgspec import Struct

from ..types.config import (
    DatabaseConfig,
    BalanceApiConfig,
    NotificationConfig,
    CacheConfig,
    AggregationConfig,
)
from .logging import EngineLogger, log_with_context

ENV_PREFIX = "DEXMETRICS_"


class EngineConfig(Struct):
    database: DatabaseConfig
    balance_api: Optional[BalanceApiConfig] = None
    notifications: NotificationConfig = msgspec.field(default_factory=NotificationConfig)
    cache: CacheConfig = msgspec.field(default_factory=CacheConfig)
    aggregation: AggregationConfig = msgspec.field(default_factory=AggregationConfig)

    @classmethod
    def from_env(cls, env_vars: dict = None) -> 'EngineConfig':
        logger = EngineLogger.get_logger('core.config')

        from dotenv import load_dotenv
        load_dotenv()
        env = env_vars if env_vars is not None else os.environ

        config = cls(
            database=cls._create_database_config(env),
            balance_api=cls._create_balance_api_config(env),
            notifications=cls._create_notification_config(env),
            cache=cls._create_cache_config(env),
            aggregation=cls._create_aggregation_config(env),
        )

        log_with_context(logger, logging.INFO, "EngineConfig created successfully",
                         balance_api=config.balance_api is not None,
                         notifications=config.notifications.enabled and config.notifications.url is not None,
                         dedupe_txids=config.aggregation.dedupe_txids)

        return config

    @staticmethod
    def _create_database_config(env: dict) -> DatabaseConfig:
        url = env.get(f"{ENV_PREFIX}DB_URL")
        if not url:
            raise ValueError(f"{ENV_PREFIX}DB_URL environment variable required")

        return DatabaseConfig(
            url=url,
            pool_size=_env_int(env, "DB_POOL_SIZE", 5),
            max_overflow=_env_int(env, "DB_MAX_OVERFLOW", 10),
            pool_timeout=_env_int(env, "DB_POOL_TIMEOUT", 30),
        )

    @staticmethod
    def _create_balance_api_config(env: dict) -> Optional[BalanceApiConfig]:
        base_url = env.get(f"{ENV_PREFIX}BALANCE_API_URL")
        if not base_url:
            return None

        return BalanceApiConfig(
            base_url=base_url.rstrip('/'),
            timeout=_env_float(env, "BALANCE_API_TIMEOUT", 10.0),
        )

    @staticmethod
    def _create_notification_config(env: dict) -> NotificationConfig:
        return NotificationConfig(
            url=env.get(f"{ENV_PREFIX}NOTIFY_URL") or None,
            channel=env.get(f"{ENV_PREFIX}NOTIFY_CHANNEL", "transaction"),
            timeout=_env_float(env, "NOTIFY_TIMEOUT", 2.0),
            enabled=_env_bool(env, "NOTIFY_ENABLED", True),
        )

    @staticmethod
    def _create_cache_config(env: dict) -> CacheConfig:
        return CacheConfig(
            ttl_seconds=_env_float(env, "CACHE_TTL_SECONDS", 15.0),
            max_entries=_env_int(env, "CACHE_MAX_ENTRIES", 512),
        )

    @staticmethod
    def _create_aggregation_config(env: dict) -> AggregationConfig:
        return AggregationConfig(
            balance_lookback_days=_env_int(env, "BALANCE_LOOKBACK_DAYS", 90),
            dedupe_txids=_env_bool(env, "DEDUPE_TXIDS", True),
            fanout_workers=_env_int(env, "FANOUT_WORKERS", 4),
        )


def _env_int(env: dict, name: str, default: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}")


def _env_float(env: dict, name: str, default: float) -> float:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}")


def _env_bool(env: dict, name: str, default: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")
