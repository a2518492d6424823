# dexmetrics/database/__init__.py

from .base import Base
from .connection import DatabaseManager
from .tables import DBStoredTransaction, DBPoolSnapshot
from .repositories import TransactionLogRepository, PoolRegistryRepository
from .repository_manager import RepositoryManager
from .readers import DatabasePoolRegistry, DatabaseTransactionLog

__all__ = [
    'Base',
    'DatabaseManager',
    'DBStoredTransaction',
    'DBPoolSnapshot',
    'TransactionLogRepository',
    'PoolRegistryRepository',
    'RepositoryManager',
    'DatabasePoolRegistry',
    'DatabaseTransactionLog',
]
