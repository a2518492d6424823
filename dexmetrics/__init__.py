# dexmetrics/__init__.py

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Type

import msgspec

from .core.container import EngineContainer
from .core.config import EngineConfig
from .core.logging import EngineLogger, log_with_context
from .clients.interfaces import (
    BalanceReader,
    NotificationPublisher,
    PoolRegistryReader,
    TransactionLogStore,
)
from .clients.balance_client import HttpBalanceReader, UnconfiguredBalanceReader
from .clients.notification_publisher import HttpNotificationPublisher, NullNotificationPublisher
from .database.connection import DatabaseManager
from .database.repository_manager import RepositoryManager
from .database.readers import DatabasePoolRegistry, DatabaseTransactionLog
from .services.cache import AggregateCache
from .services.transaction_queries import TransactionQueries
from .services.pricing import PricingService
from .services.volume_service import VolumeService
from .services.price_history_service import PriceHistoryService
from .services.balance_history_service import BalanceHistoryService
from .services.invalidation import InvalidationGate, TransactionRecorder
from .services.token_service import TokenService
from .services.activity_service import ActivityService
from .types.config import AggregationConfig, NotificationConfig


def create_metrics_engine(env_vars: dict = None,
                          overrides: Optional[Dict[Type, Any]] = None) -> EngineContainer:
    """Build the engine's container from the environment.

    ``overrides`` maps an interface to a ready-made instance and replaces the
    default registration (in-memory collaborators in tests, for instance).
    """
    env = env_vars if env_vars is not None else os.environ
    _configure_logging_early(env)

    logger = EngineLogger.get_logger('core.init')
    logger.info("Creating metrics engine")

    config = EngineConfig.from_env(env)
    container = EngineContainer(config)

    _register_services(container, config)

    for interface, instance in (overrides or {}).items():
        log_with_context(logger, logging.DEBUG, "Overriding service", service=interface.__name__)
        container.register_instance(interface, instance)

    log_with_context(logger, logging.INFO, "Metrics engine created successfully")
    return container


def shutdown_metrics_engine(container: EngineContainer) -> None:
    if container.is_instantiated(InvalidationGate):
        container.get(InvalidationGate).shutdown()
    if container.is_instantiated(DatabaseManager):
        container.get(DatabaseManager).shutdown()


def _configure_logging_early(env: dict):
    log_dir_env = env.get("DEXMETRICS_LOG_DIR")
    log_dir = Path(log_dir_env) if log_dir_env else Path.cwd() / "logs"

    EngineLogger.configure(
        log_dir=log_dir,
        log_level=env.get("DEXMETRICS_LOG_LEVEL", "INFO"),
        console_enabled=env.get("DEXMETRICS_LOG_CONSOLE", "true").lower() == "true",
        file_enabled=env.get("DEXMETRICS_LOG_FILE", "false").lower() == "true",
        structured_format=env.get("DEXMETRICS_LOG_STRUCTURED", "true").lower() == "true",
    )


def _register_services(container: EngineContainer, config: EngineConfig):
    logger = EngineLogger.get_logger('core.services')
    logger.debug("Registering services in container")

    # Config sections injected by type
    aggregation = config.aggregation
    if config.database.url.startswith("sqlite"):
        # every session shares one sqlite connection; reads run one at a time
        aggregation = msgspec.structs.replace(aggregation, fanout_workers=1)
    container.register_instance(AggregationConfig, aggregation)
    container.register_instance(NotificationConfig, config.notifications)

    # Database
    container.register_factory(DatabaseManager, _create_database_manager)
    container.register_singleton(RepositoryManager, RepositoryManager)
    container.register_singleton(PoolRegistryReader, DatabasePoolRegistry)
    container.register_singleton(TransactionLogStore, DatabaseTransactionLog)

    # External collaborators
    container.register_factory(BalanceReader, _create_balance_reader)
    container.register_factory(NotificationPublisher, _create_notification_publisher)

    # Aggregators
    container.register_factory(AggregateCache, _create_cache)
    container.register_singleton(TransactionQueries, TransactionQueries)
    container.register_singleton(PricingService, PricingService)
    container.register_singleton(VolumeService, VolumeService)
    container.register_singleton(PriceHistoryService, PriceHistoryService)
    container.register_singleton(BalanceHistoryService, BalanceHistoryService)
    container.register_singleton(TokenService, TokenService)
    container.register_singleton(ActivityService, ActivityService)

    # Write side
    container.register_singleton(InvalidationGate, InvalidationGate)
    container.register_singleton(TransactionRecorder, TransactionRecorder)

    logger.debug("Service registration completed")


def _create_database_manager(container: EngineContainer) -> DatabaseManager:
    db_manager = DatabaseManager(container.config.database)
    db_manager.initialize()
    return db_manager


def _create_balance_reader(container: EngineContainer) -> BalanceReader:
    balance_api = container.config.balance_api
    if balance_api is None:
        EngineLogger.get_logger('core.factory').warning(
            "DEXMETRICS_BALANCE_API_URL not set; balance history is unavailable"
        )
        return UnconfiguredBalanceReader()
    return HttpBalanceReader(balance_api)


def _create_notification_publisher(container: EngineContainer) -> NotificationPublisher:
    notifications = container.config.notifications
    if not notifications.enabled or not notifications.url:
        return NullNotificationPublisher()
    return HttpNotificationPublisher(notifications)


def _create_cache(container: EngineContainer) -> AggregateCache:
    return AggregateCache(container.config.cache)


__all__ = [
    'create_metrics_engine',
    'shutdown_metrics_engine',
    'EngineContainer',
    'EngineConfig',
]
