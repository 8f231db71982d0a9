"""Immutable ledger operation payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

EMPTY_DATA = b""


@dataclass(frozen=True)
class Mint:
    operator: str
    to_account: str
    token_id: int
    amount: int
    lock_time: int
    data: bytes = EMPTY_DATA


@dataclass(frozen=True)
class BatchMint:
    operator: str
    to_account: str
    token_ids: tuple[int, ...]
    amounts: tuple[int, ...]
    lock_time: int
    data: bytes = EMPTY_DATA


@dataclass(frozen=True)
class Burn:
    operator: str
    from_account: str
    token_id: int
    amount: int


@dataclass(frozen=True)
class BatchBurn:
    operator: str
    from_account: str
    token_ids: tuple[int, ...]
    amounts: tuple[int, ...]


@dataclass(frozen=True)
class Transfer:
    operator: str
    from_account: str
    to_account: str
    token_id: int
    amount: int
    data: bytes = EMPTY_DATA


@dataclass(frozen=True)
class BatchTransfer:
    operator: str
    from_account: str
    to_account: str
    token_ids: tuple[int, ...]
    amounts: tuple[int, ...]
    data: bytes = EMPTY_DATA


LedgerOperation = Union[Mint, BatchMint, Burn, BatchBurn, Transfer, BatchTransfer]
