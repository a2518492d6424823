# dexmetrics/database/tables/__init__.py

from .transaction import DBStoredTransaction
from .pool import DBPoolSnapshot


__all__ = [
    'DBStoredTransaction',
    'DBPoolSnapshot',
]
