"""Transfer notifications and the hash-chained event journal."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Protocol, Union

from ledger.hashing import stable_hash

logger = logging.getLogger(__name__)

TRANSFER_SINGLE = "TRANSFER_SINGLE"
TRANSFER_BATCH = "TRANSFER_BATCH"


@dataclass(frozen=True)
class TransferSingle:
    """Notification for a committed single-id mutation."""

    operator: str
    from_account: str
    to_account: str
    token_id: int
    amount: int

    @property
    def kind(self) -> str:
        return TRANSFER_SINGLE

    @property
    def token_ids(self) -> tuple[int, ...]:
        return (self.token_id,)

    @property
    def amounts(self) -> tuple[int, ...]:
        return (self.amount,)


@dataclass(frozen=True)
class TransferBatch:
    """Notification for a committed batch mutation."""

    operator: str
    from_account: str
    to_account: str
    token_ids: tuple[int, ...]
    amounts: tuple[int, ...]

    @property
    def kind(self) -> str:
        return TRANSFER_BATCH


LedgerEvent = Union[TransferSingle, TransferBatch]


class NotificationChannel(Protocol):
    """Observer of committed ledger mutations."""

    def publish(self, event: LedgerEvent) -> None:
        """Receive one committed event."""


@dataclass(frozen=True)
class JournalEntry:
    """Committed event with its sequence number and chained hash."""

    event_seq: int
    event: LedgerEvent
    prev_event_hash: Optional[str]
    event_hash: str


def compute_event_hash(event_seq: int, event: LedgerEvent, prev_event_hash: Optional[str]) -> str:
    return stable_hash(
        (
            "ledger_event_v1",
            event_seq,
            event.kind,
            event.operator,
            event.from_account,
            event.to_account,
            event.token_ids,
            event.amounts,
            prev_event_hash,
        )
    )


class EventJournal:
    """Append-only notification channel keeping a hash chain over events."""

    def __init__(self, entries: tuple[JournalEntry, ...] = ()) -> None:
        self._entries: list[JournalEntry] = list(entries)

    @property
    def entries(self) -> tuple[JournalEntry, ...]:
        return tuple(self._entries)

    @property
    def events(self) -> tuple[LedgerEvent, ...]:
        return tuple(entry.event for entry in self._entries)

    @property
    def head_hash(self) -> Optional[str]:
        return self._entries[-1].event_hash if self._entries else None

    def publish(self, event: LedgerEvent) -> None:
        event_seq = len(self._entries) + 1
        prev_hash = self.head_hash
        entry = JournalEntry(
            event_seq=event_seq,
            event=event,
            prev_event_hash=prev_hash,
            event_hash=compute_event_hash(event_seq, event, prev_hash),
        )
        self._entries.append(entry)
        logger.debug("Journaled %s seq=%d hash=%s", event.kind, event_seq, entry.event_hash)

    def verify_chain(self) -> bool:
        """Recompute every hash link and report whether the chain is intact."""
        prev_hash: Optional[str] = None
        for index, entry in enumerate(self._entries, start=1):
            if entry.event_seq != index or entry.prev_event_hash != prev_hash:
                return False
            if entry.event_hash != compute_event_hash(entry.event_seq, entry.event, prev_hash):
                return False
            prev_hash = entry.event_hash
        return True
