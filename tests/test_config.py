# tests/test_config.py

import pytest

from dexmetrics.core.config import EngineConfig


def test_minimal_environment():
    config = EngineConfig.from_env({"DEXMETRICS_DB_URL": "sqlite://"})

    assert config.database.url == "sqlite://"
    assert config.database.pool_size == 5
    assert config.balance_api is None
    assert config.notifications.url is None
    assert config.notifications.channel == "transaction"
    assert config.notifications.enabled is True
    assert config.cache.ttl_seconds == 15.0
    assert config.aggregation.balance_lookback_days == 90
    assert config.aggregation.dedupe_txids is True


def test_full_environment():
    config = EngineConfig.from_env({
        "DEXMETRICS_DB_URL": "postgresql+psycopg://dex:secret@db:5432/dex",
        "DEXMETRICS_DB_POOL_SIZE": "12",
        "DEXMETRICS_BALANCE_API_URL": "http://wallet:3001/api/",
        "DEXMETRICS_BALANCE_API_TIMEOUT": "4.5",
        "DEXMETRICS_NOTIFY_URL": "http://socket:3002/emit",
        "DEXMETRICS_NOTIFY_CHANNEL": "dex-tx",
        "DEXMETRICS_NOTIFY_ENABLED": "no",
        "DEXMETRICS_CACHE_TTL_SECONDS": "30",
        "DEXMETRICS_CACHE_MAX_ENTRIES": "64",
        "DEXMETRICS_BALANCE_LOOKBACK_DAYS": "30",
        "DEXMETRICS_DEDUPE_TXIDS": "false",
        "DEXMETRICS_FANOUT_WORKERS": "8",
    })

    assert config.database.pool_size == 12
    assert config.balance_api.base_url == "http://wallet:3001/api"
    assert config.balance_api.timeout == 4.5
    assert config.notifications.url == "http://socket:3002/emit"
    assert config.notifications.channel == "dex-tx"
    assert config.notifications.enabled is False
    assert config.cache.ttl_seconds == 30.0
    assert config.cache.max_entries == 64
    assert config.aggregation.balance_lookback_days == 30
    assert config.aggregation.dedupe_txids is False
    assert config.aggregation.fanout_workers == 8


def test_database_url_is_required():
    with pytest.raises(ValueError, match="DEXMETRICS_DB_URL"):
        EngineConfig.from_env({})


def test_malformed_number_is_reported():
    with pytest.raises(ValueError, match="DEXMETRICS_CACHE_MAX_ENTRIES"):
        EngineConfig.from_env({"DEXMETRICS_DB_URL": "sqlite://", "DEXMETRICS_CACHE_MAX_ENTRIES": "lots"})
