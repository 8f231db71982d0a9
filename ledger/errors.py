"""Classified ledger rejection errors."""

from __future__ import annotations

import enum


class LedgerErrorCode(str, enum.Enum):
    """Reason codes for rejected ledger operations."""

    ZERO_RECIPIENT = "ZERO_RECIPIENT"
    LENGTH_MISMATCH = "LENGTH_MISMATCH"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    NEW_BALANCE_OVERFLOW = "NEW_BALANCE_OVERFLOW"
    BALANCE_OVERFLOW = "BALANCE_OVERFLOW"
    TIME_OVERFLOW = "TIME_OVERFLOW"
    MATURITY_ORDER = "MATURITY_ORDER"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN_ID = "INVALID_TOKEN_ID"


class LedgerError(RuntimeError):
    """Raised when a ledger operation is rejected; no state was changed."""

    def __init__(self, code: LedgerErrorCode, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        message = code.value if not detail else f"{code.value}: {detail}"
        super().__init__(message)
