# tests/conftest.py

"""
Shared fixtures: in-memory collaborators, a fixed clock and builders for
pools and log entries.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

from dexmetrics.clients.interfaces import (
    BalanceReader,
    NotificationPublisher,
    PoolRegistryReader,
    TransactionLogStore,
)
from dexmetrics.services import (
    ActivityService,
    AggregateCache,
    BalanceHistoryService,
    InvalidationGate,
    PriceHistoryService,
    PricingService,
    TokenService,
    TransactionQueries,
    TransactionRecorder,
    VolumeService,
)
from dexmetrics.types.config import AggregationConfig, CacheConfig, NotificationConfig
from dexmetrics.types.model import (
    LiveBalance,
    PoolSnapshot,
    SortOrder,
    StoredTransaction,
    TokenBalance,
    TradeDirection,
    TransactionFilter,
    TransactionType,
    TxAmounts,
)
from dexmetrics.utils.time import DAY_MS, HOUR_MS

NOW = 1_700_000_000_000

TOKEN_A = "aa" * 32
TOKEN_B = "bb" * 32


def D(value) -> Decimal:
    return Decimal(str(value))


def make_pool(category: str = TOKEN_A, bch_reserve="100", price="0.01", token_reserve="10000",
              address: Optional[str] = None, symbol: Optional[str] = None,
              name: Optional[str] = None) -> PoolSnapshot:
    return PoolSnapshot(
        pool_address=address or f"pool-{category[:6]}-{bch_reserve}",
        pool_owner_pkh="00" * 20,
        token_category=category,
        bch_reserve=D(bch_reserve),
        token_reserve=D(token_reserve),
        token_price_in_bch=D(price),
        token_symbol=symbol,
        token_name=name,
    )


def make_swap(txid: str, created_at: int, direction: TradeDirection = TradeDirection.BCH_TO_TOKEN,
              category: str = TOKEN_A, address: str = "bitcoincash:qalice", bch_in=None,
              bch_out=None, token_in=None, token_out=None) -> StoredTransaction:
    return StoredTransaction(
        txid=txid,
        address=address,
        type=TransactionType.SWAP,
        created_at=created_at,
        direction=direction,
        token_category=category,
        amounts=TxAmounts(
            bch_in=None if bch_in is None else D(bch_in),
            bch_out=None if bch_out is None else D(bch_out),
            token_in=None if token_in is None else D(token_in),
            token_out=None if token_out is None else D(token_out),
        ),
    )


def make_liquidity(txid: str, created_at: int, tx_type: TransactionType, category: str = TOKEN_A,
                   bch_in=None, bch_out=None, token_in=None, token_out=None,
                   address: str = "bitcoincash:qpoolowner") -> StoredTransaction:
    return StoredTransaction(
        txid=txid,
        address=address,
        type=tx_type,
        created_at=created_at,
        token_category=category,
        amounts=TxAmounts(
            bch_in=None if bch_in is None else D(bch_in),
            bch_out=None if bch_out is None else D(bch_out),
            token_in=None if token_in is None else D(token_in),
            token_out=None if token_out is None else D(token_out),
        ),
    )


# === In-memory collaborators ===

class InMemoryPoolRegistry(PoolRegistryReader):
    def __init__(self, pools: Optional[List[PoolSnapshot]] = None):
        self.pools = list(pools or [])
        self.list_calls = 0
        self.fail_with: Optional[Exception] = None

    def list_pools(self) -> List[PoolSnapshot]:
        self.list_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.pools)

    def pools_for_token(self, token_category: str) -> List[PoolSnapshot]:
        if self.fail_with is not None:
            raise self.fail_with
        return [p for p in self.pools if p.token_category == token_category.strip().lower()]


class InMemoryTransactionLog(TransactionLogStore):
    """Mirrors the SQL repository's filter semantics"""

    def __init__(self, entries: Optional[List[StoredTransaction]] = None):
        self.entries = list(entries or [])

    def find(self, criteria: TransactionFilter) -> List[StoredTransaction]:
        result = []
        for entry in self.entries:
            if criteria.types and entry.type not in criteria.types:
                continue
            if criteria.token_categories and entry.token_category not in [
                c.strip().lower() for c in criteria.token_categories
            ]:
                continue
            if criteria.address and entry.address != criteria.address:
                continue
            if criteria.created_from is not None and entry.created_at < criteria.created_from:
                continue
            if criteria.created_to is not None and entry.created_at >= criteria.created_to:
                continue
            result.append(entry)

        if criteria.sort is SortOrder.ASC:
            result.sort(key=lambda e: e.created_at)
        elif criteria.sort is SortOrder.DESC:
            result.sort(key=lambda e: e.created_at, reverse=True)

        if criteria.limit is not None and criteria.limit > 0:
            result = result[:criteria.limit]
        return result

    def insert(self, entry: StoredTransaction) -> None:
        self.entries.append(entry)


class StaticBalanceReader(BalanceReader):
    def __init__(self, balance: Optional[LiveBalance] = None):
        self.balance = balance or LiveBalance(bch=Decimal(0))
        self.calls: List[str] = []

    def balances_for(self, address: str) -> LiveBalance:
        self.calls.append(address)
        return self.balance


class RecordingPublisher(NotificationPublisher):
    def __init__(self, fail_with: Optional[Exception] = None):
        self.published: List[tuple] = []
        self.fail_with = fail_with

    def publish(self, channel: str, payload: Dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.published.append((channel, payload))


def live_balance(bch, **tokens) -> LiveBalance:
    return LiveBalance(
        bch=D(bch),
        tokens=[TokenBalance(category=category, amount=D(amount)) for category, amount in tokens.items()],
    )


# === Fixtures ===

@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def cache():
    return AggregateCache(CacheConfig(ttl_seconds=60, max_entries=128))


@pytest.fixture
def registry():
    return InMemoryPoolRegistry()


@pytest.fixture
def tx_log():
    return InMemoryTransactionLog()


@pytest.fixture
def balance_reader():
    return StaticBalanceReader()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def aggregation():
    return AggregationConfig(balance_lookback_days=90, dedupe_txids=True, fanout_workers=2)


@pytest.fixture
def queries(tx_log, aggregation):
    return TransactionQueries(tx_log, aggregation)


@pytest.fixture
def pricing(registry, cache):
    return PricingService(registry, cache)


@pytest.fixture
def volume_service(queries, pricing, cache, aggregation, clock):
    return VolumeService(queries, pricing, cache, aggregation, clock=clock)


@pytest.fixture
def price_history_service(queries, pricing, cache, clock):
    return PriceHistoryService(queries, pricing, cache, clock=clock)


@pytest.fixture
def token_service(pricing, queries, volume_service, cache, aggregation, clock):
    return TokenService(pricing, queries, volume_service, cache, aggregation, clock=clock)


@pytest.fixture
def balance_history_service(queries, registry, balance_reader, cache, aggregation, clock):
    return BalanceHistoryService(queries, registry, balance_reader, cache, aggregation, clock=clock)


@pytest.fixture
def activity_service(queries, pricing):
    return ActivityService(queries, pricing)


@pytest.fixture
def gate(cache, publisher, clock):
    gate = InvalidationGate(cache, publisher, NotificationConfig(channel="transaction"), clock=clock)
    yield gate
    gate.shutdown()


@pytest.fixture
def recorder(tx_log, gate, clock):
    return TransactionRecorder(tx_log, gate, clock=clock)
