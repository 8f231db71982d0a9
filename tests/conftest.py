"""Pytest fixtures shared across ledger unit tests."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from ledger.collaborators import InMemoryApprovalRegistry, ManualClock, TemplateUriProvider
from ledger.core import MaturityLedger
from ledger.events import EventJournal
from ledger.snapshot_store import SnapshotStore
from tests.utils.ledger_accounts import GENESIS_TS, INITIAL_URI


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(GENESIS_TS)


@pytest.fixture
def journal() -> EventJournal:
    return EventJournal()


@pytest.fixture
def approvals() -> InMemoryApprovalRegistry:
    return InMemoryApprovalRegistry()


@pytest.fixture
def ledger(clock: ManualClock, journal: EventJournal, approvals: InMemoryApprovalRegistry) -> MaturityLedger:
    """Ledger with a manual clock, in-memory approvals and a recording journal."""
    return MaturityLedger(
        clock=clock,
        approvals=approvals,
        uri_provider=TemplateUriProvider(INITIAL_URI),
        channels=(journal,),
    )


@pytest.fixture
def sqlite_engine() -> Any:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def snapshot_store(sqlite_engine: Any) -> SnapshotStore:
    store = SnapshotStore(sqlite_engine)
    store.create_schema()
    return store
