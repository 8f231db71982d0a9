"""Fixed-width unsigned integer types with checked arithmetic."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class UIntWidth:
    """Unsigned integer domain of a fixed bit width."""

    bits: int

    def __post_init__(self) -> None:
        if self.bits <= 0:
            raise ValueError(f"Width must be positive, got {self.bits}.")

    @property
    def max_value(self) -> int:
        return (1 << self.bits) - 1

    def fits(self, value: Any) -> bool:
        """Return True when value is an integer representable in this width."""
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        return 0 <= value <= self.max_value

    def checked_add(self, left: int, right: int) -> Optional[int]:
        """Add two values, returning None instead of wrapping on overflow."""
        result = left + right
        if not self.fits(result):
            return None
        return result

    def checked_sub(self, left: int, right: int) -> Optional[int]:
        """Subtract two values, returning None on underflow."""
        result = left - right
        if not self.fits(result):
            return None
        return result
