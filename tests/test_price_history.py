# tests/test_price_history.py

import pytest

from dexmetrics.services.price_history_service import (
    extract_initial_price,
    extract_trade_price,
    initial_price_points,
    trade_volume,
)
from dexmetrics.types.errors import InvalidRequestError
from dexmetrics.types.model import StoredTransaction, TradeDirection, TransactionType

from conftest import NOW, TOKEN_A, TOKEN_B, DAY_MS, HOUR_MS, D, make_liquidity, make_pool, make_swap

BUY = TradeDirection.BCH_TO_TOKEN
SELL = TradeDirection.TOKEN_TO_BCH


def test_trade_price_follows_direction():
    assert extract_trade_price(make_swap("b", NOW, BUY, bch_in="2", token_out="400")) == D("0.005")
    assert extract_trade_price(make_swap("s", NOW, SELL, bch_out="3", token_in="100")) == D("0.03")


def test_trade_price_needs_both_legs():
    assert extract_trade_price(make_swap("b", NOW, BUY, bch_in="2", token_out="0")) is None
    assert extract_trade_price(make_swap("s", NOW, SELL, bch_out="3")) is None
    # the BCH leg of the other direction is ignored
    assert extract_trade_price(make_swap("x", NOW, SELL, bch_in="3", token_in="100")) is None

    no_direction = StoredTransaction(txid="n", address="a", type=TransactionType.SWAP, created_at=NOW)
    assert extract_trade_price(no_direction) is None


def test_trade_volume_adds_bch_legs():
    assert trade_volume(make_swap("b", NOW, BUY, bch_in="2", token_out="400")) == D(2)
    assert trade_volume(make_swap("s", NOW, SELL, bch_in="NaN", bch_out="3")) == 0


def test_initial_price_from_earliest_creation():
    creations = [
        make_liquidity("c1", NOW - 8 * DAY_MS, TransactionType.CREATE_POOL, bch_in="5", token_in="1000"),
        make_liquidity("c2", NOW - 7 * DAY_MS, TransactionType.CREATE_POOL, bch_in="5", token_in="10"),
        make_liquidity("c3", NOW - 6 * DAY_MS, TransactionType.CREATE_POOL, TOKEN_B, bch_in="1", token_in="4"),
    ]

    initial = initial_price_points(creations)

    assert initial[TOKEN_A].price_bch == D("0.005")
    assert initial[TOKEN_A].timestamp == NOW - 8 * DAY_MS
    assert initial[TOKEN_B].price_bch == D("0.25")


def test_unusable_first_creation_leaves_no_launch_price():
    creations = [
        make_liquidity("c0", NOW - 9 * DAY_MS, TransactionType.CREATE_POOL, bch_in="1"),
        make_liquidity("c1", NOW - 8 * DAY_MS, TransactionType.CREATE_POOL, bch_in="5", token_in="1000"),
    ]

    assert extract_initial_price(creations[0]) is None
    assert initial_price_points(creations) == {}


def test_price_history_merges_trades_and_launch(tx_log, registry, price_history_service):
    registry.pools = [make_pool(price="0.02")]
    tx_log.entries = [
        make_swap("s1", NOW - 2 * HOUR_MS, BUY, bch_in="1", token_out="100"),
        make_swap("s0", NOW - 30 * HOUR_MS, BUY, bch_in="1", token_out="50"),
        make_swap("other", NOW - HOUR_MS, BUY, TOKEN_B, bch_in="1", token_out="1"),
        make_liquidity("c", NOW - 10 * HOUR_MS, TransactionType.CREATE_POOL, bch_in="5", token_in="1000"),
    ]

    history = price_history_service.price_history(TOKEN_A, "24h")

    assert history.token_category == TOKEN_A
    assert history.range == "24h"
    assert [(p.timestamp, p.price_bch) for p in history.points] == [
        (NOW - 10 * HOUR_MS, D("0.005")),
        (NOW - 2 * HOUR_MS, D("0.01")),
    ]


def test_price_history_live_appends_spot_point(tx_log, registry, price_history_service):
    registry.pools = [make_pool(price="0.02")]
    tx_log.entries = [make_swap("s1", NOW - 2 * HOUR_MS, BUY, bch_in="1", token_out="100")]

    history = price_history_service.price_history(TOKEN_A, "1h", live=True)

    assert [(p.timestamp, p.price_bch) for p in history.points] == [(NOW, D("0.02"))]


def test_price_history_drops_launch_before_range(tx_log, price_history_service):
    tx_log.entries = [
        make_liquidity("c", NOW - 40 * DAY_MS, TransactionType.CREATE_POOL, bch_in="5", token_in="1000"),
    ]

    assert price_history_service.price_history(TOKEN_A, "7d").points == []
    assert len(price_history_service.price_history(TOKEN_A, "max").points) == 1


def test_price_history_range_aliases(price_history_service):
    assert price_history_service.price_history(TOKEN_A, "1W").range == "1w"
    assert price_history_service.price_history(TOKEN_A, "forever").range == "30d"


def test_price_history_requires_category(price_history_service):
    with pytest.raises(InvalidRequestError):
        price_history_service.price_history("  ")
