# dexmetrics/services/baseline.py
"""
Reference prices and percent-change figures.

Missing or unusable inputs never raise: every function answers None and
the caller shows "no data".
"""

from decimal import Decimal
from typing import Optional, Sequence

from ..types.model import PricePoint
from ..utils.amounts import is_finite


def baseline_price_since(points: Sequence[PricePoint], cutoff: int) -> Optional[Decimal]:
    """Price at or just before ``cutoff``; the first later price when none precedes it.

    ``points`` must be sorted by timestamp ascending.
    """
    if not points:
        return None

    candidate = None
    for point in points:
        if point.timestamp <= cutoff:
            candidate = point.price_bch
        else:
            break

    if candidate is not None:
        return candidate

    for point in points:
        if point.timestamp > cutoff:
            return point.price_bch
    return None


def _usable(value: Optional[Decimal]) -> bool:
    return is_finite(value) and value != 0


def percent_change(current: Optional[Decimal], baseline: Optional[Decimal]) -> Optional[Decimal]:
    if not (_usable(baseline) and is_finite(current)):
        return None
    return (current - baseline) / abs(baseline) * 100


def change_with_launch_fallback(current: Optional[Decimal], points: Sequence[PricePoint], cutoff: int,
                                initial_price: Optional[Decimal]) -> Optional[Decimal]:
    """Windowed change against the baseline at ``cutoff``, else change since launch.

    No figure at all is produced unless the current price is usable.
    """
    if not _usable(current):
        return None

    baseline = baseline_price_since(points, cutoff)
    if _usable(baseline):
        return percent_change(current, baseline)
    return percent_change(current, initial_price)
