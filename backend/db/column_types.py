"""Column types for unsigned integers wider than 64 bits."""

from __future__ import annotations

from decimal import Decimal
import logging
from typing import Any, Optional

from sqlalchemy import Numeric, String
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator, TypeEngine

logger = logging.getLogger(__name__)

UINT256_DIGITS = 78


class BigUnsigned(TypeDecorator[int]):
    """Exact 256-bit unsigned integer.

    Stored as NUMERIC(78,0) on PostgreSQL and as decimal text on dialects
    without arbitrary-precision numerics.
    """

    impl = Numeric(UINT256_DIGITS, 0)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(Numeric(UINT256_DIGITS, 0))
        return dialect.type_descriptor(String(UINT256_DIGITS))

    def process_bind_param(self, value: Optional[int], dialect: Dialect) -> Any:
        if value is None:
            return None
        if value < 0:
            raise ValueError(f"BigUnsigned cannot store negative value {value}")
        if dialect.name == "postgresql":
            return Decimal(value)
        return format(value, "d")

    def process_result_value(self, value: Any, dialect: Dialect) -> Optional[int]:
        if value is None:
            return None
        return int(value)
