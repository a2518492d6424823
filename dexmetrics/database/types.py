# dexmetrics/database/types.py

from decimal import Decimal
from typing import Optional

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from ..utils.amounts import to_decimal


class DecimalText(TypeDecorator):
    """Exact decimal amounts stored as text so every backend keeps full precision"""

    impl = String(80)
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(to_decimal(value))

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        return to_decimal(value)


class CategoryType(TypeDecorator):
    """CashToken category ids are hex; normalize to lowercase"""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value: Optional[str], dialect) -> Optional[str]:
        return value.strip().lower() if value else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[str]:
        return value if value else None
