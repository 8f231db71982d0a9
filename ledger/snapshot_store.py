"""SQLAlchemy persistence for ledger state snapshots and the event journal."""

from __future__ import annotations

import json
import logging
from typing import Optional, Sequence

from sqlalchemy import Engine, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.db.base import Base
from backend.db.enums import LedgerEventKind
from backend.db.models import LedgerEventRecord, LedgerPosition, TokenSupply
from ledger.events import (
    JournalEntry,
    LedgerEvent,
    TransferBatch,
    TransferSingle,
    compute_event_hash,
)
from ledger.state import LedgerState, Position

logger = logging.getLogger(__name__)


class SnapshotIntegrityError(RuntimeError):
    """Raised when stored journal rows disagree with the in-memory chain."""


def _event_to_record(entry: JournalEntry) -> LedgerEventRecord:
    event = entry.event
    return LedgerEventRecord(
        event_seq=entry.event_seq,
        event_kind=LedgerEventKind(event.kind),
        operator=event.operator,
        from_account=event.from_account,
        to_account=event.to_account,
        token_ids=json.dumps(list(event.token_ids)),
        amounts=json.dumps(list(event.amounts)),
        prev_event_hash=entry.prev_event_hash,
        event_hash=entry.event_hash,
    )


def _record_to_entry(record: LedgerEventRecord) -> JournalEntry:
    token_ids = tuple(int(value) for value in json.loads(record.token_ids))
    amounts = tuple(int(value) for value in json.loads(record.amounts))
    event: LedgerEvent
    if LedgerEventKind(record.event_kind) is LedgerEventKind.TRANSFER_SINGLE:
        event = TransferSingle(
            operator=record.operator,
            from_account=record.from_account,
            to_account=record.to_account,
            token_id=token_ids[0],
            amount=amounts[0],
        )
    else:
        event = TransferBatch(
            operator=record.operator,
            from_account=record.from_account,
            to_account=record.to_account,
            token_ids=token_ids,
            amounts=amounts,
        )
    expected_hash = compute_event_hash(record.event_seq, event, record.prev_event_hash)
    if expected_hash != record.event_hash:
        raise SnapshotIntegrityError(f"ledger_event hash mismatch for event_seq={record.event_seq}.")
    return JournalEntry(
        event_seq=record.event_seq,
        event=event,
        prev_event_hash=record.prev_event_hash,
        event_hash=record.event_hash,
    )


class SnapshotStore:
    """Save and restore the logical ledger state through SQLAlchemy."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "SnapshotStore":
        return cls(create_engine(database_url))

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def save_state(self, state: LedgerState) -> None:
        """Replace the stored snapshot with state."""
        try:
            with Session(self.engine) as session, session.begin():
                session.execute(delete(LedgerPosition))
                session.execute(delete(TokenSupply))
                session.add_all(
                    LedgerPosition(
                        account=account,
                        token_id=token_id,
                        balance=position.balance,
                        maturity=position.maturity,
                    )
                    for account, token_id, position in state.iter_positions()
                )
                session.add_all(
                    TokenSupply(token_id=token_id, total_supply=supply)
                    for token_id, supply in sorted(state.total_supply.items())
                )
        except SQLAlchemyError:
            logger.exception("Ledger snapshot save failed.")
            raise
        logger.info("Saved ledger snapshot with %d positions.", len(state.positions))

    def load_state(self) -> LedgerState:
        """Rebuild the ledger state from the stored snapshot."""
        with Session(self.engine) as session:
            positions = {
                (row.account, row.token_id): Position(balance=row.balance, maturity=row.maturity)
                for row in session.scalars(select(LedgerPosition))
            }
            supply = {row.token_id: row.total_supply for row in session.scalars(select(TokenSupply))}
        logger.info("Loaded ledger snapshot with %d positions.", len(positions))
        return LedgerState(positions=positions, total_supply=supply)

    def append_events(self, entries: Sequence[JournalEntry]) -> int:
        """Persist journal entries not yet stored; return how many were inserted."""
        stored = {entry.event_seq: entry.event_hash for entry in self.load_events()}
        pending: list[JournalEntry] = []
        for entry in entries:
            stored_hash = stored.get(entry.event_seq)
            if stored_hash is None:
                pending.append(entry)
            elif stored_hash != entry.event_hash:
                raise SnapshotIntegrityError(f"ledger_event hash mismatch for event_seq={entry.event_seq}.")
        if not pending:
            return 0
        try:
            with Session(self.engine) as session, session.begin():
                session.add_all(_event_to_record(entry) for entry in pending)
        except SQLAlchemyError:
            logger.exception("Ledger event journal append failed.")
            raise
        logger.info("Appended %d ledger events.", len(pending))
        return len(pending)

    def load_events(self, after_seq: Optional[int] = None) -> tuple[JournalEntry, ...]:
        """Read journal entries in sequence order, verifying each stored hash."""
        statement = select(LedgerEventRecord).order_by(LedgerEventRecord.event_seq)
        if after_seq is not None:
            statement = statement.where(LedgerEventRecord.event_seq > after_seq)
        with Session(self.engine) as session:
            return tuple(_record_to_entry(record) for record in session.scalars(statement))
