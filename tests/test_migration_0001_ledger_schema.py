"""Unit tests for the ledger Alembic migration."""

from __future__ import annotations

import importlib.util
from pathlib import Path
import sys
import types
from typing import Any

import pytest


MIGRATION_PATH = (
    Path(__file__).resolve().parents[1]
    / "backend"
    / "db"
    / "migrations"
    / "versions"
    / "0001_ledger_schema.py"
)


class _RecordingOp:
    def __init__(self) -> None:
        self.statements: list[str] = []

    def execute(self, statement: str) -> None:
        self.statements.append(" ".join(statement.split()))


def _load_migration(op: _RecordingOp, monkeypatch: pytest.MonkeyPatch) -> Any:
    monkeypatch.setitem(sys.modules, "alembic", types.SimpleNamespace(op=op))
    spec = importlib.util.spec_from_file_location("migration_0001_ledger_schema", MIGRATION_PATH)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_revision_is_the_schema_root(monkeypatch: pytest.MonkeyPatch) -> None:
    module = _load_migration(_RecordingOp(), monkeypatch)
    assert module.revision == "0001_ledger_schema"
    assert module.down_revision is None


def test_upgrade_creates_ledger_tables_before_append_only_trigger(monkeypatch: pytest.MonkeyPatch) -> None:
    op = _RecordingOp()
    _load_migration(op, monkeypatch).upgrade()

    creates = [statement.split("(")[0] for statement in op.statements if statement.startswith("CREATE")]
    assert creates[:4] == [
        "CREATE TYPE ledger_event_kind_enum AS ENUM ",
        "CREATE TABLE ledger_position ",
        "CREATE TABLE token_supply ",
        "CREATE TABLE ledger_event ",
    ]
    assert op.statements[-1].startswith(
        "CREATE TRIGGER trg_ledger_event_append_only BEFORE UPDATE OR DELETE ON ledger_event"
    )
    position_ddl = next(s for s in op.statements if s.startswith("CREATE TABLE ledger_position"))
    assert "NUMERIC(78,0)" in position_ddl


def test_downgrade_drops_trigger_first_and_enum_last(monkeypatch: pytest.MonkeyPatch) -> None:
    op = _RecordingOp()
    _load_migration(op, monkeypatch).downgrade()

    assert op.statements[0].startswith("DROP TRIGGER IF EXISTS trg_ledger_event_append_only")
    assert "DROP TABLE IF EXISTS ledger_position;" in op.statements
    assert op.statements[-1] == "DROP TYPE IF EXISTS ledger_event_kind_enum;"


def test_failed_statement_propagates(monkeypatch: pytest.MonkeyPatch) -> None:
    op = _RecordingOp()
    module = _load_migration(op, monkeypatch)

    def _reject(statement: str) -> None:
        if "token_supply" in statement:
            raise RuntimeError("relation already exists")
        op.statements.append(statement)

    monkeypatch.setattr(op, "execute", _reject)
    with pytest.raises(RuntimeError, match="already exists"):
        module.upgrade()
    assert not any("ledger_event (" in statement for statement in op.statements)
