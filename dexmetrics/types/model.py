# dexmetrics/types/model.py

from decimal import Decimal
from typing import Dict, List, Optional
import enum

import msgspec
from msgspec import Struct


class TransactionType(enum.Enum):
    SWAP = "swap"
    CREATE_POOL = "create_pool"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"

LIQUIDITY_TYPES = (
    TransactionType.CREATE_POOL,
    TransactionType.ADD_LIQUIDITY,
    TransactionType.REMOVE_LIQUIDITY,
)

class TradeDirection(enum.Enum):
    BCH_TO_TOKEN = "bch_to_token"
    TOKEN_TO_BCH = "token_to_bch"

class SortOrder(enum.Enum):
    ASC = "asc"
    DESC = "desc"

class TvlConvention(enum.Enum):
    BCH_SIDE = "bch_side"
    BOTH_SIDES = "both_sides"


# === Source data ===

class PoolSnapshot(Struct, rename="camel"):
    pool_address: str
    pool_owner_pkh: str
    token_category: str
    bch_reserve: Decimal
    token_reserve: Decimal
    token_price_in_bch: Decimal
    token_symbol: Optional[str] = None
    token_name: Optional[str] = None
    token_icon_url: Optional[str] = None

class TxAmounts(Struct, rename="camel"):
    bch_in: Optional[Decimal] = None
    bch_out: Optional[Decimal] = None
    token_in: Optional[Decimal] = None
    token_out: Optional[Decimal] = None

class StoredTransaction(Struct, rename="camel"):
    txid: str
    address: str
    type: TransactionType
    created_at: int
    direction: Optional[TradeDirection] = None
    token_category: Optional[str] = None
    amounts: Optional[TxAmounts] = None

    @property
    def is_swap(self) -> bool:
        return self.type is TransactionType.SWAP

class TokenBalance(Struct, rename="camel"):
    category: str
    amount: Decimal

class LiveBalance(Struct, rename="camel"):
    bch: Decimal
    tokens: List[TokenBalance] = msgspec.field(default_factory=list)

class TransactionFilter(Struct):
    types: Optional[List[TransactionType]] = None
    token_categories: Optional[List[str]] = None
    address: Optional[str] = None
    created_from: Optional[int] = None
    created_to: Optional[int] = None
    sort: Optional[SortOrder] = None
    limit: Optional[int] = None


# === Derived views ===

class TokenAggregate(Struct, rename="camel"):
    token_category: str
    tvl_bch: Decimal
    token_reserve_total: Decimal
    pool_count: int
    price_bch: Optional[Decimal] = None
    symbol: Optional[str] = None
    name: Optional[str] = None
    icon_url: Optional[str] = None

class PricePoint(Struct, rename="camel"):
    timestamp: int
    price_bch: Decimal
    volume: Optional[Decimal] = None

class BalancePoint(Struct, rename="camel"):
    timestamp: int
    value_bch: Decimal
    bch: Decimal
    tokens: Dict[str, Decimal] = msgspec.field(default_factory=dict)

class WindowVolumes(Struct, rename="camel"):
    current: Decimal
    previous: Decimal

class VolumeStats(Struct, rename="camel"):
    volume_24h_bch: Decimal
    prev_24h_bch: Decimal
    volume_30d_bch: Decimal
    prev_30d_bch: Decimal
    tvl_bch: Decimal

class TvlVolumePoint(Struct, rename="camel"):
    timestamp: int
    tvl_bch: Decimal
    volume_bch: Decimal

class TvlVolumeHistory(Struct, rename="camel"):
    range: str
    points: List[TvlVolumePoint]

class PriceHistory(Struct, rename="camel"):
    token_category: str
    range: str
    points: List[PricePoint]

class BalanceHistory(Struct, rename="camel"):
    points: List[BalancePoint]
    swaps_this_week: int
    swapped_this_week_bch: Decimal

class MarketPrice(Struct, rename="camel", omit_defaults=True):
    has_market_pools: bool
    market_price: Optional[Decimal] = None
    total_liquidity: Optional[Decimal] = None
    pool_count: Optional[int] = None

class TokenOverview(Struct, rename="camel"):
    token_category: str
    price_bch: Optional[Decimal]
    tvl_bch: Decimal
    volume_30d_bch: Decimal
    change_1d_percent: Optional[Decimal]
    change_7d_percent: Optional[Decimal]
    symbol: Optional[str] = None
    name: Optional[str] = None
    icon_url: Optional[str] = None

class TokensOverview(Struct, rename="camel"):
    tokens: List[TokenOverview]
    total: int

class TokenDetail(Struct, rename="camel"):
    token_category: str
    price_bch: Optional[Decimal]
    tvl_bch: Decimal
    token_reserve_total: Decimal
    volume_24h_bch: Decimal
    volume_30d_bch: Decimal
    prev_24h_bch: Decimal
    prev_30d_bch: Decimal
    change_1d_percent: Optional[Decimal]
    change_7d_percent: Optional[Decimal]
    symbol: Optional[str] = None
    name: Optional[str] = None
    icon_url: Optional[str] = None

class PoolsSummary(Struct, rename="camel"):
    total_pools: int
    total_bch_liquidity: Decimal
    token_counts: Dict[str, int]
    pools: List[PoolSnapshot]

class TokenMeta(Struct, rename="camel"):
    symbol: Optional[str] = None
    name: Optional[str] = None
    icon_url: Optional[str] = None

class ActivityPage(Struct, rename="camel"):
    transactions: List[StoredTransaction]
    total: int
    token_meta: Dict[str, TokenMeta] = msgspec.field(default_factory=dict)


# === Write side ===

class RecordTransactionRequest(Struct, rename="camel"):
    txid: Optional[str] = None
    address: Optional[str] = None
    type: Optional[str] = None
    direction: Optional[TradeDirection] = None
    token_category: Optional[str] = None
    amounts: Optional[TxAmounts] = None
