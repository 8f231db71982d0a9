"""Unit tests for the pure transition function and maturity merge rule."""

from __future__ import annotations

import pytest

from ledger.collaborators import InMemoryApprovalRegistry
from ledger.engine import apply_operation, merge_maturity
from ledger.errors import LedgerError, LedgerErrorCode
from ledger.events import TransferSingle
from ledger.operations import BatchMint, Burn, Mint, Transfer
from ledger.state import NULL_ACCOUNT, LedgerState, Position
from tests.utils.ledger_accounts import GENESIS_TS, HOLDER_A, HOLDER_B, OPERATOR


class _UnknownOperation:
    pass


def test_apply_operation_never_mutates_input_state() -> None:
    base = LedgerState()
    result = apply_operation(base, Mint(OPERATOR, HOLDER_A, 1, 50, 0), now=GENESIS_TS)

    assert base.positions == {}
    assert base.total_supply == {}
    assert result.state.position(HOLDER_A, 1) == Position(balance=50, maturity=0)
    assert result.state.supply(1) == 50
    assert result.events == (TransferSingle(OPERATOR, NULL_ACCOUNT, HOLDER_A, 1, 50),)


def test_apply_operation_is_deterministic() -> None:
    base = LedgerState()
    operation = BatchMint(OPERATOR, HOLDER_A, (1, 2), (5, 6), GENESIS_TS + 10)

    first = apply_operation(base, operation, now=GENESIS_TS)
    second = apply_operation(base, operation, now=GENESIS_TS)

    assert first == second
    assert first.state.digest() == second.state.digest()


def test_rejected_operation_leaves_state_object_untouched() -> None:
    base = apply_operation(LedgerState(), Mint(OPERATOR, HOLDER_A, 1, 50, 0), now=GENESIS_TS).state
    digest = base.digest()

    with pytest.raises(LedgerError):
        apply_operation(base, Burn(OPERATOR, HOLDER_A, 1, 51), now=GENESIS_TS)
    assert base.digest() == digest


def test_transfer_without_approval_authority_is_owner_only() -> None:
    base = apply_operation(LedgerState(), Mint(OPERATOR, HOLDER_A, 1, 50, 0), now=GENESIS_TS).state

    with pytest.raises(LedgerError) as exc_info:
        apply_operation(base, Transfer(OPERATOR, HOLDER_A, HOLDER_B, 1, 5), now=GENESIS_TS)
    assert exc_info.value.code is LedgerErrorCode.UNAUTHORIZED

    approvals = InMemoryApprovalRegistry()
    approvals.set_approval_for_all(HOLDER_A, OPERATOR, True)
    result = apply_operation(
        base,
        Transfer(OPERATOR, HOLDER_A, HOLDER_B, 1, 5),
        now=GENESIS_TS,
        approvals=approvals,
    )
    assert result.state.position(HOLDER_B, 1).balance == 5


def test_zero_amount_transfer_does_not_create_destination_position() -> None:
    base = apply_operation(LedgerState(), Mint(OPERATOR, HOLDER_A, 1, 50, GENESIS_TS + 99), now=GENESIS_TS).state

    result = apply_operation(base, Transfer(HOLDER_A, HOLDER_A, HOLDER_B, 1, 0), now=GENESIS_TS)
    assert (HOLDER_B, 1) not in result.state.positions


def test_apply_operation_rejects_unknown_payload() -> None:
    with pytest.raises(TypeError, match="Unsupported ledger operation"):
        apply_operation(LedgerState(), _UnknownOperation(), now=GENESIS_TS)  # type: ignore[arg-type]


def test_merge_into_empty_position_takes_incoming_maturity() -> None:
    drained = Position(balance=0, maturity=GENESIS_TS + 500)
    assert merge_maturity(drained, GENESIS_TS + 1, now=GENESIS_TS) == GENESIS_TS + 1


def test_merge_is_commutative_for_funded_positions() -> None:
    funded_early = Position(balance=1, maturity=10)
    funded_late = Position(balance=1, maturity=30)
    assert merge_maturity(funded_early, 30, now=0) == merge_maturity(funded_late, 10, now=0) == 30


def test_strict_merge_allows_later_lock_into_matured_position() -> None:
    matured = Position(balance=1, maturity=GENESIS_TS - 1)
    assert merge_maturity(matured, GENESIS_TS + 60, now=GENESIS_TS, strict=True) == GENESIS_TS + 60

    maturing = Position(balance=1, maturity=GENESIS_TS + 1)
    with pytest.raises(LedgerError) as exc_info:
        merge_maturity(maturing, GENESIS_TS + 60, now=GENESIS_TS, strict=True)
    assert exc_info.value.code is LedgerErrorCode.MATURITY_ORDER
