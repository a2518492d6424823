# dexmetrics/database/readers.py

from typing import List

from .repository_manager import RepositoryManager
from ..clients.interfaces import PoolRegistryReader, TransactionLogStore
from ..core.logging import LoggingMixin
from ..types.model import PoolSnapshot, StoredTransaction, TransactionFilter


class DatabasePoolRegistry(PoolRegistryReader, LoggingMixin):
    """Pool snapshots read from the pool_snapshots table, one session per call"""

    def __init__(self, repository_manager: RepositoryManager):
        self.repository_manager = repository_manager

    def list_pools(self) -> List[PoolSnapshot]:
        with self.repository_manager.get_session() as session:
            rows = self.repository_manager.pools.get_all(session)
            pools = [row.to_domain() for row in rows]

        self.log_debug("Pool snapshots loaded", pool_count=len(pools))
        return pools

    def pools_for_token(self, token_category: str) -> List[PoolSnapshot]:
        with self.repository_manager.get_session() as session:
            rows = self.repository_manager.pools.get_by_category(session, token_category)
            return [row.to_domain() for row in rows]


class DatabaseTransactionLog(TransactionLogStore, LoggingMixin):
    """Transaction log backed by the stored_transactions table"""

    def __init__(self, repository_manager: RepositoryManager):
        self.repository_manager = repository_manager

    def find(self, criteria: TransactionFilter) -> List[StoredTransaction]:
        with self.repository_manager.get_session() as session:
            rows = self.repository_manager.transactions.find(session, criteria)
            return [row.to_domain() for row in rows]

    def insert(self, entry: StoredTransaction) -> None:
        with self.repository_manager.get_transaction() as session:
            self.repository_manager.transactions.insert(session, entry)

        self.log_info("Transaction recorded", txid=entry.txid, address=entry.address)
