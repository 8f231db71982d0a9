"""Ledger state: positions keyed by (account, token id) and total supply."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from ledger.hashing import stable_hash

NULL_ACCOUNT = "0x" + "0" * 40

PositionKey = tuple[str, int]


def canonical_account(account: str) -> str:
    """Hex addresses compare case-insensitively; positions are keyed by the lower-case form."""
    return account.lower()


def is_null_account(account: Optional[str]) -> bool:
    """Return True for the null/sentinel account."""
    return account is None or account == "" or canonical_account(account) == NULL_ACCOUNT


@dataclass(frozen=True)
class Position:
    """Balance and maturity recorded for one account and one token id."""

    balance: int = 0
    maturity: int = 0

    @property
    def is_funded(self) -> bool:
        return self.balance > 0


EMPTY_POSITION = Position()


@dataclass(frozen=True)
class LedgerState:
    """Immutable snapshot of every position and per-id total supply."""

    positions: Mapping[PositionKey, Position] = field(default_factory=dict)
    total_supply: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        positions = {
            (canonical_account(account), token_id): position
            for (account, token_id), position in self.positions.items()
        }
        object.__setattr__(self, "positions", MappingProxyType(positions))
        object.__setattr__(self, "total_supply", MappingProxyType(dict(self.total_supply)))

    def position(self, account: str, token_id: int) -> Position:
        return self.positions.get((canonical_account(account), token_id), EMPTY_POSITION)

    def supply(self, token_id: int) -> int:
        return self.total_supply.get(token_id, 0)

    def iter_positions(self) -> Iterator[tuple[str, int, Position]]:
        """Yield positions in deterministic (account, token id) order."""
        for account, token_id in sorted(self.positions):
            yield account, token_id, self.positions[(account, token_id)]

    def with_changes(
        self,
        positions: Mapping[PositionKey, Position],
        total_supply: Mapping[int, int],
    ) -> "LedgerState":
        """Return a new state with the given entries replaced."""
        if not positions and not total_supply:
            return self
        merged_positions = dict(self.positions)
        merged_positions.update(positions)
        merged_supply = dict(self.total_supply)
        merged_supply.update(total_supply)
        return LedgerState(positions=merged_positions, total_supply=merged_supply)

    def digest(self) -> str:
        """Stable SHA256 over the canonical state serialization."""
        tokens: list[object] = ["ledger_state_v1"]
        for account, token_id, position in self.iter_positions():
            tokens.extend(("P", account, token_id, position.balance, position.maturity))
        for token_id in sorted(self.total_supply):
            tokens.extend(("S", token_id, self.total_supply[token_id]))
        return stable_hash(tokens)
