"""Maturity-aware multi-token balance ledger."""

from ledger.capabilities import SUPPORTED_INTERFACES, supports_interface
from ledger.collaborators import (
    InMemoryApprovalRegistry,
    ManualClock,
    SystemClock,
    TemplateUriProvider,
)
from ledger.config import LedgerConfig, load_ledger_config
from ledger.core import MaturityLedger
from ledger.engine import TransitionResult, apply_operation, merge_maturity
from ledger.errors import LedgerError, LedgerErrorCode
from ledger.events import EventJournal, JournalEntry, TransferBatch, TransferSingle
from ledger.operations import BatchBurn, BatchMint, BatchTransfer, Burn, Mint, Transfer
from ledger.state import NULL_ACCOUNT, LedgerState, Position

__all__ = [
    "BatchBurn",
    "BatchMint",
    "BatchTransfer",
    "Burn",
    "EventJournal",
    "InMemoryApprovalRegistry",
    "JournalEntry",
    "LedgerConfig",
    "LedgerError",
    "LedgerErrorCode",
    "LedgerState",
    "ManualClock",
    "MaturityLedger",
    "Mint",
    "NULL_ACCOUNT",
    "Position",
    "SUPPORTED_INTERFACES",
    "SystemClock",
    "TemplateUriProvider",
    "Transfer",
    "TransferBatch",
    "TransferSingle",
    "TransitionResult",
    "apply_operation",
    "load_ledger_config",
    "merge_maturity",
    "supports_interface",
]
