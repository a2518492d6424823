# dexmetrics/database/tables/transaction.py

from sqlalchemy import Column, Integer, BigInteger, String, Enum, Index

from ..base import DBBaseModel
from ..types import DecimalText, CategoryType
from ...types.model import (
    StoredTransaction,
    TransactionType,
    TradeDirection,
    TxAmounts,
)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class DBStoredTransaction(DBBaseModel):
    """Append-only log of client-reported swaps and liquidity events.

    Rows are never updated. The same txid may appear more than once since
    clients report at least once.
    """
    __tablename__ = 'stored_transactions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    txid = Column(String(128), nullable=False, index=True)
    address = Column(String(128), nullable=False)
    type = Column(Enum(TransactionType, native_enum=False, length=32,
                       values_callable=_enum_values), nullable=False)
    direction = Column(Enum(TradeDirection, native_enum=False, length=32,
                            values_callable=_enum_values), nullable=True)
    token_category = Column(CategoryType(), nullable=True)

    bch_in = Column(DecimalText(), nullable=True)
    bch_out = Column(DecimalText(), nullable=True)
    token_in = Column(DecimalText(), nullable=True)
    token_out = Column(DecimalText(), nullable=True)

    created_at = Column(BigInteger, nullable=False)  # epoch ms

    __table_args__ = (
        Index('idx_stored_tx_type_created', 'type', 'created_at'),
        Index('idx_stored_tx_address_created', 'address', 'created_at'),
        Index('idx_stored_tx_category_created', 'token_category', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<StoredTransaction(txid={self.txid}, type={self.type})>"

    def to_domain(self) -> StoredTransaction:
        amounts = None
        if any(v is not None for v in (self.bch_in, self.bch_out, self.token_in, self.token_out)):
            amounts = TxAmounts(
                bch_in=self.bch_in,
                bch_out=self.bch_out,
                token_in=self.token_in,
                token_out=self.token_out,
            )

        return StoredTransaction(
            txid=self.txid,
            address=self.address,
            type=self.type,
            created_at=self.created_at,
            direction=self.direction,
            token_category=self.token_category,
            amounts=amounts,
        )

    @classmethod
    def from_domain(cls, entry: StoredTransaction) -> 'DBStoredTransaction':
        amounts = entry.amounts or TxAmounts()
        return cls(
            txid=entry.txid,
            address=entry.address,
            type=entry.type,
            direction=entry.direction,
            token_category=entry.token_category,
            bch_in=amounts.bch_in,
            bch_out=amounts.bch_out,
            token_in=amounts.token_in,
            token_out=amounts.token_out,
            created_at=entry.created_at,
        )
