"""Ledger position, supply and event journal model definitions."""

from __future__ import annotations

import logging

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Index,
    Integer,
    PrimaryKeyConstraint,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from backend.db.base import Base
from backend.db.enums import ledger_event_kind_enum
from backend.db.column_types import BigUnsigned

logger = logging.getLogger(__name__)


class LedgerPosition(Base):
    """Balance and maturity of one (account, token id) position."""

    __tablename__ = "ledger_position"
    __table_args__ = (
        PrimaryKeyConstraint("account", "token_id", name="pk_ledger_position"),
        CheckConstraint(
            "maturity >= 0",
            name="ck_ledger_position_maturity_nonneg",
        ),
        Index("idx_ledger_position_token_id", "token_id"),
    )

    account: Mapped[str] = mapped_column(Text, nullable=False)
    token_id: Mapped[int] = mapped_column(BigUnsigned, nullable=False)
    balance: Mapped[int] = mapped_column(BigUnsigned, nullable=False)
    maturity: Mapped[int] = mapped_column(BigInteger, nullable=False)


class TokenSupply(Base):
    """Running total supply per token id."""

    __tablename__ = "token_supply"
    __table_args__ = (PrimaryKeyConstraint("token_id", name="pk_token_supply"),)

    token_id: Mapped[int] = mapped_column(BigUnsigned, nullable=False)
    total_supply: Mapped[int] = mapped_column(BigUnsigned, nullable=False)


class LedgerEventRecord(Base):
    """Append-only journal of committed transfer notifications."""

    __tablename__ = "ledger_event"
    __table_args__ = (
        PrimaryKeyConstraint("event_seq", name="pk_ledger_event"),
        UniqueConstraint("event_hash", name="uq_ledger_event_hash"),
        CheckConstraint(
            "event_seq >= 1",
            name="ck_ledger_event_seq_positive",
        ),
        CheckConstraint(
            "(event_seq = 1 AND prev_event_hash IS NULL) OR (event_seq > 1 AND prev_event_hash IS NOT NULL)",
            name="ck_ledger_event_prev_hash_presence",
        ),
    )

    event_seq: Mapped[int] = mapped_column(Integer, nullable=False, autoincrement=False)
    event_kind: Mapped[str] = mapped_column(ledger_event_kind_enum, nullable=False)
    operator: Mapped[str] = mapped_column(Text, nullable=False)
    from_account: Mapped[str] = mapped_column(Text, nullable=False)
    to_account: Mapped[str] = mapped_column(Text, nullable=False)
    token_ids: Mapped[str] = mapped_column(Text, nullable=False)
    amounts: Mapped[str] = mapped_column(Text, nullable=False)
    prev_event_hash: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_hash: Mapped[str] = mapped_column(Text, nullable=False)
