# dexmetrics/clients/__init__.py

from .interfaces import (
    PoolRegistryReader,
    TransactionLogStore,
    BalanceReader,
    NotificationPublisher,
)
from .balance_client import HttpBalanceReader, UnconfiguredBalanceReader
from .notification_publisher import HttpNotificationPublisher, NullNotificationPublisher

__all__ = [
    'PoolRegistryReader',
    'TransactionLogStore',
    'BalanceReader',
    'NotificationPublisher',
    'HttpBalanceReader',
    'UnconfiguredBalanceReader',
    'HttpNotificationPublisher',
    'NullNotificationPublisher',
]
