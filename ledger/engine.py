"""Pure state-transition engine for the maturity ledger.

``apply_operation`` validates an operation against a ledger state and returns
either a new state plus the notifications to publish, or raises
``LedgerError``. The input state is never mutated: every touched position is
staged in a copy-on-write overlay and only folded into a fresh ``LedgerState``
after the whole operation (every batch member included) has passed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence

from ledger.collaborators import ApprovalAuthority, DenyAllApprovals
from ledger.config import LedgerConfig
from ledger.errors import LedgerError, LedgerErrorCode
from ledger.events import LedgerEvent, TransferBatch, TransferSingle
from ledger.operations import (
    BatchBurn,
    BatchMint,
    BatchTransfer,
    Burn,
    LedgerOperation,
    Mint,
    Transfer,
)
from ledger.state import (
    NULL_ACCOUNT,
    LedgerState,
    Position,
    PositionKey,
    canonical_account,
    is_null_account,
)

DEFAULT_CONFIG = LedgerConfig()
_ACCOUNT_FIELDS = ("operator", "from_account", "to_account")


@dataclass(frozen=True)
class TransitionResult:
    """Committed state and the events produced by one operation."""

    state: LedgerState
    events: tuple[LedgerEvent, ...]


class _Overlay:
    """Staged position and supply writes over an immutable base state."""

    def __init__(self, base: LedgerState) -> None:
        self._base = base
        self.positions: dict[PositionKey, Position] = {}
        self.supply: dict[int, int] = {}

    def position(self, account: str, token_id: int) -> Position:
        staged = self.positions.get((account, token_id))
        if staged is not None:
            return staged
        return self._base.position(account, token_id)

    def supply_of(self, token_id: int) -> int:
        if token_id in self.supply:
            return self.supply[token_id]
        return self._base.supply(token_id)

    def commit(self) -> LedgerState:
        return self._base.with_changes(self.positions, self.supply)


def _require_same_length(token_ids: Sequence[int], amounts: Sequence[int]) -> None:
    if len(token_ids) != len(amounts):
        raise LedgerError(
            LedgerErrorCode.LENGTH_MISMATCH,
            f"ids length {len(token_ids)} != amounts length {len(amounts)}",
        )


def _require_recipient(to_account: str) -> None:
    if is_null_account(to_account):
        raise LedgerError(LedgerErrorCode.ZERO_RECIPIENT, "destination is the null account")


def _require_token_ids(token_ids: Sequence[int], config: LedgerConfig) -> None:
    for token_id in token_ids:
        if not config.token_id_width.fits(token_id):
            raise LedgerError(
                LedgerErrorCode.INVALID_TOKEN_ID,
                f"token_id={token_id!r} is outside {config.token_id_bits} bits",
            )


def _require_amount(amount: int, config: LedgerConfig) -> None:
    if not config.balance_width.fits(amount):
        raise LedgerError(LedgerErrorCode.BALANCE_OVERFLOW, f"amount {amount} is outside the balance width")


def merge_maturity(
    current: Position,
    incoming_maturity: int,
    *,
    now: int,
    strict: bool = False,
) -> int:
    """Maturity of a holding after an incoming contribution lands on it."""
    if not current.is_funded:
        return incoming_maturity
    if strict and incoming_maturity > current.maturity and current.maturity > now:
        raise LedgerError(
            LedgerErrorCode.MATURITY_ORDER,
            "cannot merge a later maturity into a position that is still maturing",
        )
    return max(current.maturity, incoming_maturity)


def _credit(
    overlay: _Overlay,
    account: str,
    token_id: int,
    amount: int,
    incoming_maturity: int,
    *,
    now: int,
    config: LedgerConfig,
    mint: bool,
) -> None:
    if amount == 0:
        return
    current = overlay.position(account, token_id)
    new_balance = config.balance_width.checked_add(current.balance, amount)
    if new_balance is None:
        raise LedgerError(
            LedgerErrorCode.NEW_BALANCE_OVERFLOW,
            f"balance of {account} for token_id={token_id} would exceed {config.balance_bits} bits",
        )
    new_supply: Optional[int] = None
    if mint:
        new_supply = config.supply_width.checked_add(overlay.supply_of(token_id), amount)
        if new_supply is None:
            raise LedgerError(
                LedgerErrorCode.BALANCE_OVERFLOW,
                f"total supply for token_id={token_id} would exceed {config.supply_bits} bits",
            )
    maturity = merge_maturity(
        current,
        incoming_maturity,
        now=now,
        strict=config.strict_merge_ordering,
    )
    overlay.positions[(account, token_id)] = Position(balance=new_balance, maturity=maturity)
    if new_supply is not None:
        overlay.supply[token_id] = new_supply


def _debit(
    overlay: _Overlay,
    account: str,
    token_id: int,
    amount: int,
    *,
    now: int,
    config: LedgerConfig,
    burn: bool,
) -> Position:
    """Remove amount from a position and return the position as it was."""
    _require_amount(amount, config)
    current = overlay.position(account, token_id)
    remaining = config.balance_width.checked_sub(current.balance, amount)
    if remaining is None:
        raise LedgerError(
            LedgerErrorCode.INSUFFICIENT_BALANCE,
            f"{account} holds {current.balance} of token_id={token_id}, needs {amount}",
        )
    if amount == 0:
        return current
    if current.maturity > now:
        if not burn:
            raise LedgerError(
                LedgerErrorCode.MATURITY_ORDER,
                f"token_id={token_id} held by {account} matures at {current.maturity}",
            )
        if config.burn_requires_maturity:
            raise LedgerError(
                LedgerErrorCode.INSUFFICIENT_BALANCE,
                f"token_id={token_id} held by {account} is locked until {current.maturity}",
            )
    overlay.positions[(account, token_id)] = Position(
        balance=remaining,
        maturity=current.maturity,
    )
    if burn:
        overlay.supply[token_id] = overlay.supply_of(token_id) - amount
    return current


def _mint_into(
    overlay: _Overlay,
    to_account: str,
    token_ids: Sequence[int],
    amounts: Sequence[int],
    lock_time: int,
    *,
    now: int,
    config: LedgerConfig,
) -> None:
    _require_recipient(to_account)
    if not config.maturity_width.fits(lock_time):
        raise LedgerError(
            LedgerErrorCode.TIME_OVERFLOW,
            f"lock time {lock_time} exceeds {config.maturity_bits} bits",
        )
    _require_token_ids(token_ids, config)
    for token_id, amount in zip(token_ids, amounts):
        _require_amount(amount, config)
        _credit(overlay, to_account, token_id, amount, lock_time, now=now, config=config, mint=True)


def _burn_from(
    overlay: _Overlay,
    from_account: str,
    token_ids: Sequence[int],
    amounts: Sequence[int],
    *,
    now: int,
    config: LedgerConfig,
) -> None:
    _require_token_ids(token_ids, config)
    for token_id, amount in zip(token_ids, amounts):
        _debit(overlay, from_account, token_id, amount, now=now, config=config, burn=True)


def _transfer_between(
    overlay: _Overlay,
    operator: str,
    from_account: str,
    to_account: str,
    token_ids: Sequence[int],
    amounts: Sequence[int],
    *,
    now: int,
    config: LedgerConfig,
    approvals: ApprovalAuthority,
) -> None:
    _require_recipient(to_account)
    if operator != from_account and not approvals.is_approved_for_all(from_account, operator):
        raise LedgerError(
            LedgerErrorCode.UNAUTHORIZED,
            f"{operator} is not approved to move tokens of {from_account}",
        )
    _require_token_ids(token_ids, config)
    for token_id, amount in zip(token_ids, amounts):
        source = _debit(overlay, from_account, token_id, amount, now=now, config=config, burn=False)
        _credit(
            overlay,
            to_account,
            token_id,
            amount,
            source.maturity,
            now=now,
            config=config,
            mint=False,
        )


def _with_canonical_accounts(operation: LedgerOperation) -> LedgerOperation:
    changes = {
        name: canonical_account(getattr(operation, name))
        for name in _ACCOUNT_FIELDS
        if isinstance(getattr(operation, name, None), str)
    }
    return replace(operation, **changes)


def apply_operation(
    state: LedgerState,
    operation: LedgerOperation,
    *,
    now: int,
    config: Optional[LedgerConfig] = None,
    approvals: Optional[ApprovalAuthority] = None,
) -> TransitionResult:
    """Apply one operation atomically; raise LedgerError without side effects on rejection."""
    config = config or DEFAULT_CONFIG
    approvals = approvals or DenyAllApprovals()
    overlay = _Overlay(state)
    if isinstance(operation, (Mint, BatchMint, Burn, BatchBurn, Transfer, BatchTransfer)):
        operation = _with_canonical_accounts(operation)

    if isinstance(operation, Mint):
        _mint_into(
            overlay,
            operation.to_account,
            (operation.token_id,),
            (operation.amount,),
            operation.lock_time,
            now=now,
            config=config,
        )
        event: LedgerEvent = TransferSingle(
            operator=operation.operator,
            from_account=NULL_ACCOUNT,
            to_account=operation.to_account,
            token_id=operation.token_id,
            amount=operation.amount,
        )
    elif isinstance(operation, BatchMint):
        _require_same_length(operation.token_ids, operation.amounts)
        _mint_into(
            overlay,
            operation.to_account,
            operation.token_ids,
            operation.amounts,
            operation.lock_time,
            now=now,
            config=config,
        )
        event = TransferBatch(
            operator=operation.operator,
            from_account=NULL_ACCOUNT,
            to_account=operation.to_account,
            token_ids=tuple(operation.token_ids),
            amounts=tuple(operation.amounts),
        )
    elif isinstance(operation, Burn):
        _burn_from(
            overlay,
            operation.from_account,
            (operation.token_id,),
            (operation.amount,),
            now=now,
            config=config,
        )
        event = TransferSingle(
            operator=operation.operator,
            from_account=operation.from_account,
            to_account=NULL_ACCOUNT,
            token_id=operation.token_id,
            amount=operation.amount,
        )
    elif isinstance(operation, BatchBurn):
        _require_same_length(operation.token_ids, operation.amounts)
        _burn_from(
            overlay,
            operation.from_account,
            operation.token_ids,
            operation.amounts,
            now=now,
            config=config,
        )
        event = TransferBatch(
            operator=operation.operator,
            from_account=operation.from_account,
            to_account=NULL_ACCOUNT,
            token_ids=tuple(operation.token_ids),
            amounts=tuple(operation.amounts),
        )
    elif isinstance(operation, Transfer):
        _transfer_between(
            overlay,
            operation.operator,
            operation.from_account,
            operation.to_account,
            (operation.token_id,),
            (operation.amount,),
            now=now,
            config=config,
            approvals=approvals,
        )
        event = TransferSingle(
            operator=operation.operator,
            from_account=operation.from_account,
            to_account=operation.to_account,
            token_id=operation.token_id,
            amount=operation.amount,
        )
    elif isinstance(operation, BatchTransfer):
        _require_same_length(operation.token_ids, operation.amounts)
        _transfer_between(
            overlay,
            operation.operator,
            operation.from_account,
            operation.to_account,
            operation.token_ids,
            operation.amounts,
            now=now,
            config=config,
            approvals=approvals,
        )
        event = TransferBatch(
            operator=operation.operator,
            from_account=operation.from_account,
            to_account=operation.to_account,
            token_ids=tuple(operation.token_ids),
            amounts=tuple(operation.amounts),
        )
    else:
        raise TypeError(f"Unsupported ledger operation: {type(operation).__name__}")

    return TransitionResult(state=overlay.commit(), events=(event,))


def balance_of(state: LedgerState, account: str, token_id: int) -> int:
    return state.position(account, token_id).balance


def balance_of_batch(
    state: LedgerState,
    accounts: Sequence[str],
    token_ids: Sequence[int],
) -> tuple[int, ...]:
    if len(accounts) != len(token_ids):
        raise LedgerError(
            LedgerErrorCode.LENGTH_MISMATCH,
            f"accounts length {len(accounts)} != ids length {len(token_ids)}",
        )
    return tuple(balance_of(state, account, token_id) for account, token_id in zip(accounts, token_ids))


def maturity_of(state: LedgerState, account: str, token_id: int) -> int:
    return state.position(account, token_id).maturity


def maturity_of_batch(
    state: LedgerState,
    accounts: Sequence[str],
    token_ids: Sequence[int],
) -> tuple[int, ...]:
    if len(accounts) != len(token_ids):
        raise LedgerError(
            LedgerErrorCode.LENGTH_MISMATCH,
            f"accounts length {len(accounts)} != ids length {len(token_ids)}",
        )
    return tuple(maturity_of(state, account, token_id) for account, token_id in zip(accounts, token_ids))


def total_supply(state: LedgerState, token_id: int) -> int:
    return state.supply(token_id)


def exists(state: LedgerState, token_id: int) -> bool:
    """True when any units of token_id are in circulation."""
    return state.supply(token_id) > 0
