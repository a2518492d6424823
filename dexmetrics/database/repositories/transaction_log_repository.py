# dexmetrics/database/repositories/transaction_log_repository.py

from typing import List

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from ..base_repository import BaseRepository
from ..tables.transaction import DBStoredTransaction
from ...core.logging import log_with_context, DEBUG, ERROR
from ...types.model import StoredTransaction, TransactionFilter, SortOrder


class TransactionLogRepository(BaseRepository[DBStoredTransaction]):
    def __init__(self, db_manager):
        super().__init__(db_manager, DBStoredTransaction)

    def find(self, session: Session, criteria: TransactionFilter) -> List[DBStoredTransaction]:
        """Query the log. ``created_from`` is inclusive and ``created_to`` exclusive."""
        try:
            query = session.query(DBStoredTransaction)

            if criteria.types:
                query = query.filter(DBStoredTransaction.type.in_(criteria.types))
            if criteria.token_categories:
                categories = [c.strip().lower() for c in criteria.token_categories]
                query = query.filter(DBStoredTransaction.token_category.in_(categories))
            if criteria.address:
                query = query.filter(DBStoredTransaction.address == criteria.address)
            if criteria.created_from is not None:
                query = query.filter(DBStoredTransaction.created_at >= criteria.created_from)
            if criteria.created_to is not None:
                query = query.filter(DBStoredTransaction.created_at < criteria.created_to)

            if criteria.sort is SortOrder.DESC:
                query = query.order_by(desc(DBStoredTransaction.created_at), desc(DBStoredTransaction.id))
            elif criteria.sort is SortOrder.ASC:
                query = query.order_by(asc(DBStoredTransaction.created_at), asc(DBStoredTransaction.id))

            if criteria.limit is not None and criteria.limit > 0:
                query = query.limit(criteria.limit)

            rows = query.all()
            log_with_context(self.logger, DEBUG, "Transaction log query completed",
                             entry_count=len(rows),
                             address=criteria.address)
            return rows

        except Exception as e:
            log_with_context(self.logger, ERROR, "Error querying transaction log",
                             address=criteria.address,
                             error=str(e))
            raise

    def insert(self, session: Session, entry: StoredTransaction) -> DBStoredTransaction:
        return self.add(session, DBStoredTransaction.from_domain(entry))
