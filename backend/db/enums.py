"""Enum contracts for the ledger snapshot schema."""

from __future__ import annotations

import enum
import logging

from sqlalchemy import Enum

logger = logging.getLogger(__name__)


class LedgerEventKind(str, enum.Enum):
    """Shape of a journaled transfer notification."""

    TRANSFER_SINGLE = "TRANSFER_SINGLE"
    TRANSFER_BATCH = "TRANSFER_BATCH"


ledger_event_kind_enum = Enum(
    LedgerEventKind,
    name="ledger_event_kind_enum",
    values_callable=lambda members: [member.value for member in members],
)
