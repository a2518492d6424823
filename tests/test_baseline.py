# tests/test_baseline.py

from decimal import Decimal

import pytest

from dexmetrics.services.baseline import (
    baseline_price_since,
    change_with_launch_fallback,
    percent_change,
)
from dexmetrics.types.model import PricePoint

from conftest import D

POINTS = [
    PricePoint(timestamp=100, price_bch=D(1)),
    PricePoint(timestamp=200, price_bch=D(2)),
    PricePoint(timestamp=300, price_bch=D(3)),
]


def test_baseline_is_last_price_at_or_before_cutoff():
    assert baseline_price_since(POINTS, 250) == D(2)
    assert baseline_price_since(POINTS, 200) == D(2)
    assert baseline_price_since(POINTS, 1000) == D(3)


def test_baseline_falls_forward_when_nothing_precedes():
    assert baseline_price_since(POINTS, 50) == D(1)


def test_baseline_of_empty_series():
    assert baseline_price_since([], 50) is None


def test_percent_change():
    assert percent_change(D("1.5"), D("1")) == D("50")
    assert percent_change(D("0.5"), D("1")) == D("-50")


@pytest.mark.parametrize("baseline", [Decimal(0), None, Decimal("NaN"), Decimal("Infinity")])
def test_percent_change_never_divides_by_unusable_baseline(baseline):
    assert percent_change(D("1"), baseline) is None


@pytest.mark.parametrize("current", [None, Decimal("NaN"), Decimal("-Infinity")])
def test_percent_change_needs_a_current_price(current):
    assert percent_change(current, D("1")) is None


def test_price_that_fell_to_zero_is_a_full_loss():
    assert percent_change(Decimal(0), D(2)) == D(-100)
    assert percent_change(Decimal(0), D(-2)) == D(100)
    # the windowed figure still needs a live price
    assert change_with_launch_fallback(Decimal(0), [], 250, initial_price=D(2)) is None


def test_windowed_change_uses_baseline_at_cutoff():
    assert change_with_launch_fallback(D(4), POINTS, 250, initial_price=D("0.5")) == D("100")


def test_windowed_change_falls_back_to_launch_price():
    points = [PricePoint(timestamp=100, price_bch=D(0))]
    assert change_with_launch_fallback(D(3), points, 250, initial_price=D(2)) == D("50")
    assert change_with_launch_fallback(D(3), [], 250, initial_price=D(2)) == D("50")


def test_windowed_change_without_any_reference():
    assert change_with_launch_fallback(D(3), [], 250, initial_price=None) is None
    assert change_with_launch_fallback(None, POINTS, 250, initial_price=D(1)) is None
