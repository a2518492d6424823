# dexmetrics/utils/amounts.py
"""
Utility functions for handling BCH and token amounts
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

BCH_DECIMALS = 8

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Convert a raw amount to Decimal; None and unparseable input become None"""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str) and value.strip() == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def is_finite(value: Optional[Decimal]) -> bool:
    return value is not None and value.is_finite()


def is_finite_positive(value: Optional[Decimal]) -> bool:
    return is_finite(value) and value > 0


def positive_or_zero(value: Optional[Decimal]) -> Decimal:
    """The amount itself when finite and positive, otherwise zero"""
    return value if is_finite_positive(value) else Decimal(0)


def round_bch(value: Decimal) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-BCH_DECIMALS), rounding=ROUND_HALF_UP)
