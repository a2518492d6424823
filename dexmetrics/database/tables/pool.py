# dexmetrics/database/tables/pool.py

from sqlalchemy import Column, BigInteger, String, Index

from ..base import DBBaseModel
from ..types import DecimalText, CategoryType
from ...types.model import PoolSnapshot


class DBPoolSnapshot(DBBaseModel):
    """Latest known reserves of one AMM pool, written by the chain reader"""
    __tablename__ = 'pool_snapshots'

    pool_address = Column(String(128), primary_key=True)
    pool_owner_pkh = Column(String(64), nullable=False)
    token_category = Column(CategoryType(), nullable=False)
    token_symbol = Column(String(32), nullable=True)
    token_name = Column(String(128), nullable=True)
    token_icon_url = Column(String(512), nullable=True)

    bch_reserve = Column(DecimalText(), nullable=False)
    token_reserve = Column(DecimalText(), nullable=False)
    token_price_in_bch = Column(DecimalText(), nullable=False)

    updated_at = Column(BigInteger, nullable=False)  # epoch ms

    __table_args__ = (
        Index('idx_pool_snapshots_category', 'token_category'),
    )

    def __repr__(self) -> str:
        return f"<PoolSnapshot(pool_address={self.pool_address}, category={self.token_category})>"

    def to_domain(self) -> PoolSnapshot:
        return PoolSnapshot(
            pool_address=self.pool_address,
            pool_owner_pkh=self.pool_owner_pkh,
            token_category=self.token_category,
            bch_reserve=self.bch_reserve,
            token_reserve=self.token_reserve,
            token_price_in_bch=self.token_price_in_bch,
            token_symbol=self.token_symbol,
            token_name=self.token_name,
            token_icon_url=self.token_icon_url,
        )
