# dexmetrics/services/transaction_queries.py

from typing import Iterable, List, Optional

from ..clients.interfaces import TransactionLogStore
from ..core.logging import LoggingMixin
from ..types.config import AggregationConfig
from ..types.model import (
    LIQUIDITY_TYPES,
    SortOrder,
    StoredTransaction,
    TransactionFilter,
    TransactionType,
)


def dedupe_by_txid(entries: Iterable[StoredTransaction]) -> List[StoredTransaction]:
    """Keep one entry per txid, the earliest reported one. Order is preserved."""
    earliest = {}
    for index, entry in enumerate(entries):
        kept = earliest.get(entry.txid)
        if kept is None or entry.created_at < kept[1].created_at:
            earliest[entry.txid] = (index if kept is None else kept[0], entry)
    return [entry for _, entry in sorted(earliest.values(), key=lambda pair: pair[0])]


class TransactionQueries(LoggingMixin):
    """The log reads the aggregators need, with at-least-once duplicates removed"""

    def __init__(self, log_store: TransactionLogStore, aggregation: AggregationConfig):
        self.log_store = log_store
        self.dedupe = aggregation.dedupe_txids

    def find(self, criteria: TransactionFilter) -> List[StoredTransaction]:
        entries = self.log_store.find(criteria)
        if not self.dedupe:
            return entries

        unique = dedupe_by_txid(entries)
        if len(unique) != len(entries):
            self.log_debug("Dropped duplicate log entries",
                           entry_count=len(entries) - len(unique))
        return unique

    def swaps(self, created_from: Optional[int] = None,
              token_categories: Optional[List[str]] = None,
              address: Optional[str] = None,
              sort: Optional[SortOrder] = None,
              limit: Optional[int] = None) -> List[StoredTransaction]:
        return self.find(TransactionFilter(
            types=[TransactionType.SWAP],
            token_categories=token_categories,
            address=address,
            created_from=created_from,
            sort=sort,
            limit=limit,
        ))

    def liquidity_events(self, created_from: Optional[int] = None) -> List[StoredTransaction]:
        return self.find(TransactionFilter(
            types=list(LIQUIDITY_TYPES),
            created_from=created_from,
            sort=SortOrder.ASC,
        ))

    def pool_creations(self, token_categories: Optional[List[str]] = None) -> List[StoredTransaction]:
        """create_pool entries, oldest first; every category when none are given"""
        return self.find(TransactionFilter(
            types=[TransactionType.CREATE_POOL],
            token_categories=token_categories,
            sort=SortOrder.ASC,
        ))
