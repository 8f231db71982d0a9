"""Model module imports for SQLAlchemy metadata registration."""

from __future__ import annotations

import logging

from backend.db.models.ledger import LedgerEventRecord, LedgerPosition, TokenSupply

logger = logging.getLogger(__name__)

__all__ = [
    "LedgerEventRecord",
    "LedgerPosition",
    "TokenSupply",
]
