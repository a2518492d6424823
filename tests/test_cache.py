# tests/test_cache.py

from dexmetrics.services import AggregateCache, TransactionQueries
from dexmetrics.services.transaction_queries import dedupe_by_txid
from dexmetrics.types.config import AggregationConfig, CacheConfig

from conftest import NOW, make_swap


class ManualClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = ManualClock()
    cache = AggregateCache(CacheConfig(ttl_seconds=10), clock=clock)

    cache.set("k", 1)
    clock.now = 9.9
    assert cache.get("k") == 1

    clock.now = 10.0
    assert cache.get("k") is None


def test_get_or_set_computes_once_until_forced():
    cache = AggregateCache(CacheConfig(ttl_seconds=60))
    calls = []

    def compute():
        calls.append(1)
        return len(calls)

    assert cache.get_or_set("k", compute) == 1
    assert cache.get_or_set("k", compute) == 1
    assert cache.get_or_set("k", compute, force=True) == 2
    assert cache.get_or_set("k", compute) == 2


def test_value_computed_across_invalidation_is_not_stored():
    cache = AggregateCache(CacheConfig(ttl_seconds=60))

    def compute():
        cache.invalidate_all()
        return "computed-before-write"

    assert cache.get_or_set("k", compute) == "computed-before-write"
    assert cache.get("k") is None


def test_oldest_entry_is_evicted_at_capacity():
    cache = AggregateCache(CacheConfig(ttl_seconds=60, max_entries=2))

    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)

    assert len(cache) == 2
    assert cache.get("a") is None
    assert cache.get("c") == 3


def test_zero_capacity_disables_caching():
    cache = AggregateCache(CacheConfig(max_entries=0))
    cache.set("a", 1)
    assert len(cache) == 0


def test_dedupe_keeps_earliest_report_in_original_order():
    entries = [
        make_swap("x", NOW - 10, bch_in="1"),
        make_swap("y", NOW - 50, bch_in="2"),
        make_swap("x", NOW - 20, bch_in="3"),
        make_swap("z", NOW - 5, bch_in="4"),
    ]

    unique = dedupe_by_txid(entries)

    assert [(e.txid, e.created_at) for e in unique] == [("x", NOW - 20), ("y", NOW - 50), ("z", NOW - 5)]


def test_queries_can_keep_duplicates(tx_log):
    tx_log.entries = [make_swap("x", NOW - 10, bch_in="1"), make_swap("x", NOW - 20, bch_in="1")]

    assert len(TransactionQueries(tx_log, AggregationConfig(dedupe_txids=False)).swaps()) == 2
    assert len(TransactionQueries(tx_log, AggregationConfig()).swaps()) == 1
