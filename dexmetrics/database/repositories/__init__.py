# dexmetrics/database/repositories/__init__.py

from .transaction_log_repository import TransactionLogRepository
from .pool_registry_repository import PoolRegistryRepository

__all__ = [
    'TransactionLogRepository',
    'PoolRegistryRepository',
]
