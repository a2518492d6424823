# dexmetrics/database/repositories/pool_registry_repository.py

from typing import List, Optional

from sqlalchemy.orm import Session

from ..base_repository import BaseRepository
from ..tables.pool import DBPoolSnapshot
from ...types.model import PoolSnapshot


class PoolRegistryRepository(BaseRepository[DBPoolSnapshot]):
    def __init__(self, db_manager):
        super().__init__(db_manager, DBPoolSnapshot)

    def get_all(self, session: Session) -> List[DBPoolSnapshot]:
        try:
            return session.query(DBPoolSnapshot).order_by(DBPoolSnapshot.pool_address).all()
        except Exception as e:
            self.logger.error(f"Error listing pool snapshots: {e}")
            raise

    def get_by_category(self, session: Session, token_category: str) -> List[DBPoolSnapshot]:
        try:
            return session.query(DBPoolSnapshot).filter(
                DBPoolSnapshot.token_category == token_category.strip().lower()
            ).order_by(DBPoolSnapshot.pool_address).all()
        except Exception as e:
            self.logger.error(f"Error getting pool snapshots for {token_category}: {e}")
            raise

    def get_by_address(self, session: Session, pool_address: str) -> Optional[DBPoolSnapshot]:
        return session.get(DBPoolSnapshot, pool_address)

    def upsert_snapshot(self, session: Session, snapshot: PoolSnapshot, updated_at: int) -> DBPoolSnapshot:
        """Insert or overwrite the snapshot of one pool (chain reader and tooling only)"""
        existing = self.get_by_address(session, snapshot.pool_address)
        if existing is None:
            return self.create(session, updated_at=updated_at, **_snapshot_columns(snapshot))

        for column, value in _snapshot_columns(snapshot).items():
            setattr(existing, column, value)
        existing.updated_at = updated_at
        session.flush()
        return existing


def _snapshot_columns(snapshot: PoolSnapshot) -> dict:
    return {
        'pool_address': snapshot.pool_address,
        'pool_owner_pkh': snapshot.pool_owner_pkh,
        'token_category': snapshot.token_category,
        'token_symbol': snapshot.token_symbol,
        'token_name': snapshot.token_name,
        'token_icon_url': snapshot.token_icon_url,
        'bch_reserve': snapshot.bch_reserve,
        'token_reserve': snapshot.token_reserve,
        'token_price_in_bch': snapshot.token_price_in_bch,
    }
