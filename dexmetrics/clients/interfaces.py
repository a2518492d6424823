"""
Collaborator interfaces for the metrics engine.

The engine reads from three sources and writes to one sink. Each is an
interface so the database, HTTP and in-memory implementations can be
swapped without touching the aggregators.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..types.model import (
    LiveBalance,
    PoolSnapshot,
    StoredTransaction,
    TransactionFilter,
)


class PoolRegistryReader(ABC):
    """Current AMM pool reserves."""

    @abstractmethod
    def list_pools(self) -> List[PoolSnapshot]:
        pass

    @abstractmethod
    def pools_for_token(self, token_category: str) -> List[PoolSnapshot]:
        pass


class TransactionLogStore(ABC):
    """Append-only log of client-reported transactions."""

    @abstractmethod
    def find(self, criteria: TransactionFilter) -> List[StoredTransaction]:
        """
        Query the log.

        Args:
            criteria: types, token categories and address match exactly;
                created_from is inclusive, created_to exclusive.

        Returns:
            Matching entries, ordered when criteria.sort is set
        """
        pass

    @abstractmethod
    def insert(self, entry: StoredTransaction) -> None:
        pass


class BalanceReader(ABC):
    """Live BCH and token holdings of an address."""

    @abstractmethod
    def balances_for(self, address: str) -> LiveBalance:
        pass


class NotificationPublisher(ABC):
    """Pub/sub relay towards connected clients."""

    @abstractmethod
    def publish(self, channel: str, payload: Dict[str, Any]) -> None:
        pass
