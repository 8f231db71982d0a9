"""Initial schema for the maturity ledger snapshot store."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from alembic import op

logger = logging.getLogger(__name__)

# revision identifiers, used by Alembic.
revision: str = "0001_ledger_schema"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


ENUM_DDL: tuple[str, ...] = (
    "CREATE TYPE ledger_event_kind_enum AS ENUM ('TRANSFER_SINGLE', 'TRANSFER_BATCH');",
)

TABLE_DDL: tuple[str, ...] = (
    """
    CREATE TABLE ledger_position (
        account TEXT NOT NULL,
        token_id NUMERIC(78,0) NOT NULL,
        balance NUMERIC(78,0) NOT NULL,
        maturity BIGINT NOT NULL,
        CONSTRAINT pk_ledger_position PRIMARY KEY (account, token_id),
        CONSTRAINT ck_ledger_position_maturity_nonneg CHECK (maturity >= 0)
    );
    """,
    """
    CREATE TABLE token_supply (
        token_id NUMERIC(78,0) NOT NULL,
        total_supply NUMERIC(78,0) NOT NULL,
        CONSTRAINT pk_token_supply PRIMARY KEY (token_id)
    );
    """,
    """
    CREATE TABLE ledger_event (
        event_seq INTEGER NOT NULL,
        event_kind ledger_event_kind_enum NOT NULL,
        operator TEXT NOT NULL,
        from_account TEXT NOT NULL,
        to_account TEXT NOT NULL,
        token_ids TEXT NOT NULL,
        amounts TEXT NOT NULL,
        prev_event_hash TEXT,
        event_hash TEXT NOT NULL,
        CONSTRAINT pk_ledger_event PRIMARY KEY (event_seq),
        CONSTRAINT uq_ledger_event_hash UNIQUE (event_hash),
        CONSTRAINT ck_ledger_event_seq_positive CHECK (event_seq >= 1),
        CONSTRAINT ck_ledger_event_prev_hash_presence CHECK (
            (event_seq = 1 AND prev_event_hash IS NULL)
            OR (event_seq > 1 AND prev_event_hash IS NOT NULL)
        )
    );
    """,
)

INDEX_DDL: tuple[str, ...] = (
    "CREATE INDEX idx_ledger_position_token_id ON ledger_position (token_id);",
)

APPEND_ONLY_DDL: tuple[str, ...] = (
    """
    CREATE OR REPLACE FUNCTION fn_enforce_append_only()
    RETURNS trigger
    LANGUAGE plpgsql
    AS $$
    BEGIN
        RAISE EXCEPTION 'append-only violation on table %, operation % is not allowed', TG_TABLE_NAME, TG_OP;
    END;
    $$;
    """,
    """
    CREATE TRIGGER trg_ledger_event_append_only
    BEFORE UPDATE OR DELETE ON ledger_event
    FOR EACH ROW EXECUTE FUNCTION fn_enforce_append_only();
    """,
)


def _execute_all(statements: Sequence[str]) -> None:
    """Execute an ordered sequence of SQL statements."""

    for statement in statements:
        try:
            op.execute(statement)
        except Exception:
            logger.exception("Migration statement failed.")
            raise


def upgrade() -> None:
    """Apply the ledger schema migration."""

    logger.info("Starting ledger schema migration upgrade.")
    _execute_all(ENUM_DDL)
    _execute_all(TABLE_DDL)
    _execute_all(INDEX_DDL)
    _execute_all(APPEND_ONLY_DDL)
    logger.info("Completed ledger schema migration upgrade.")


def downgrade() -> None:
    """Revert the ledger schema migration."""

    logger.info("Starting ledger schema migration downgrade.")
    _execute_all(
        (
            "DROP TRIGGER IF EXISTS trg_ledger_event_append_only ON ledger_event;",
            "DROP FUNCTION IF EXISTS fn_enforce_append_only();",
            "DROP TABLE IF EXISTS ledger_event;",
            "DROP TABLE IF EXISTS token_supply;",
            "DROP TABLE IF EXISTS ledger_position;",
            "DROP TYPE IF EXISTS ledger_event_kind_enum;",
        )
    )
    logger.info("Completed ledger schema migration downgrade.")
