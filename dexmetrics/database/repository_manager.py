# dexmetrics/database/repository_manager.py

from typing import Generator
from contextlib import contextmanager
import logging

from sqlalchemy.orm import Session

from .connection import DatabaseManager
from .repositories import TransactionLogRepository, PoolRegistryRepository
from ..core.logging import EngineLogger, log_with_context


class RepositoryManager:
    """Single access point for the engine's repositories.

    Both tables live in one database: the append-only transaction log and
    the pool snapshot registry maintained by the chain reader.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self.logger = EngineLogger.get_logger('database.repository_manager')

        self.transactions = TransactionLogRepository(db_manager)
        self.pools = PoolRegistryRepository(db_manager)

        log_with_context(self.logger, logging.DEBUG, "RepositoryManager initialized")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        with self.db_manager.get_session() as session:
            yield session

    @contextmanager
    def get_transaction(self) -> Generator[Session, None, None]:
        with self.db_manager.get_transaction() as session:
            yield session
