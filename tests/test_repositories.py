# tests/test_repositories.py

import pytest

from dexmetrics.database import DatabaseManager, RepositoryManager
from dexmetrics.database.readers import DatabasePoolRegistry, DatabaseTransactionLog
from dexmetrics.types.config import DatabaseConfig
from dexmetrics.types.model import (
    SortOrder,
    StoredTransaction,
    TradeDirection,
    TransactionFilter,
    TransactionType,
)

from conftest import NOW, TOKEN_A, TOKEN_B, D, make_liquidity, make_pool, make_swap


@pytest.fixture
def db_manager():
    manager = DatabaseManager(DatabaseConfig(url="sqlite://"))
    manager.initialize()
    manager.create_tables()
    yield manager
    manager.shutdown()


@pytest.fixture
def repository_manager(db_manager):
    return RepositoryManager(db_manager)


@pytest.fixture
def db_log(repository_manager):
    return DatabaseTransactionLog(repository_manager)


@pytest.fixture
def db_registry(repository_manager):
    return DatabasePoolRegistry(repository_manager)


def test_transaction_round_trip_keeps_exact_amounts(db_log):
    entry = make_swap("t1", NOW, TradeDirection.TOKEN_TO_BCH, token_in="123456789.123456789",
                      bch_out="0.00000001")
    db_log.insert(entry)

    [stored] = db_log.find(TransactionFilter())

    assert stored == entry
    assert str(stored.amounts.bch_out) == "0.00000001"
    assert stored.type is TransactionType.SWAP
    assert stored.direction is TradeDirection.TOKEN_TO_BCH


def test_entry_without_amounts(db_log):
    db_log.insert(StoredTransaction(txid="bare", address="a", type=TransactionType.CREATE_POOL,
                                    created_at=NOW))

    [stored] = db_log.find(TransactionFilter())
    assert stored.amounts is None
    assert stored.direction is None
    assert stored.token_category is None


def test_find_filters(db_log):
    db_log.insert(make_swap("a-old", NOW - 100, bch_in="1"))
    db_log.insert(make_swap("a-new", NOW, bch_in="1"))
    db_log.insert(make_swap("b", NOW - 50, category=TOKEN_B, address="bitcoincash:qbob", bch_in="1"))
    db_log.insert(make_liquidity("liq", NOW - 10, TransactionType.ADD_LIQUIDITY, bch_in="5"))

    def txids(**criteria):
        return [e.txid for e in db_log.find(TransactionFilter(sort=SortOrder.ASC, **criteria))]

    assert txids(types=[TransactionType.SWAP]) == ["a-old", "b", "a-new"]
    assert txids(types=[TransactionType.ADD_LIQUIDITY, TransactionType.REMOVE_LIQUIDITY]) == ["liq"]
    assert txids(token_categories=[TOKEN_B.upper()]) == ["b"]
    assert txids(address="bitcoincash:qbob") == ["b"]
    assert txids(created_from=NOW - 50) == ["b", "liq", "a-new"]
    assert txids(created_to=NOW - 50) == ["a-old"]


def test_find_sort_and_limit(db_log):
    db_log.insert(make_swap("first", NOW, bch_in="1"))
    db_log.insert(make_swap("second", NOW, bch_in="1"))
    db_log.insert(make_swap("older", NOW - 1, bch_in="1"))

    newest = db_log.find(TransactionFilter(sort=SortOrder.DESC, limit=2))
    assert [e.txid for e in newest] == ["second", "first"]

    oldest = db_log.find(TransactionFilter(sort=SortOrder.ASC))
    assert [e.txid for e in oldest] == ["older", "first", "second"]


def test_duplicate_txids_are_stored(db_log, repository_manager):
    db_log.insert(make_swap("dup", NOW, bch_in="1"))
    db_log.insert(make_swap("dup", NOW + 1, bch_in="1"))

    with repository_manager.get_session() as session:
        assert repository_manager.transactions.count(session) == 2


def test_pool_snapshots(repository_manager, db_registry):
    with repository_manager.get_transaction() as session:
        repository_manager.pools.upsert_snapshot(session, make_pool(TOKEN_A, address="a1", symbol="FURU"), NOW)
        repository_manager.pools.upsert_snapshot(session, make_pool(TOKEN_B, address="b1"), NOW)

    assert [p.pool_address for p in db_registry.list_pools()] == ["a1", "b1"]

    [pool] = db_registry.pools_for_token(TOKEN_A.upper())
    assert pool.token_symbol == "FURU"
    assert pool.bch_reserve == D("100")


def test_pool_snapshot_upsert_overwrites(repository_manager, db_registry):
    with repository_manager.get_transaction() as session:
        repository_manager.pools.upsert_snapshot(session, make_pool(address="a1", bch_reserve="100"), NOW)
    with repository_manager.get_transaction() as session:
        repository_manager.pools.upsert_snapshot(session, make_pool(address="a1", bch_reserve="150.5"), NOW + 1)

    [pool] = db_registry.list_pools()
    assert pool.bch_reserve == D("150.5")

    with repository_manager.get_session() as session:
        assert repository_manager.pools.get_by_address(session, "a1").updated_at == NOW + 1
