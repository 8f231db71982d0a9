"""Narrow interfaces to the ledger's external collaborators."""

from __future__ import annotations

import time
from typing import Protocol

from ledger.state import canonical_account


class UriProvider(Protocol):
    """Display URI source for token ids."""

    def get_uri(self, token_id: int) -> str:
        """Return the metadata URI for a token id."""


class ApprovalAuthority(Protocol):
    """Decides whether an operator may move tokens for an owner."""

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        """Return True when operator is approved for all of owner's tokens."""


class Clock(Protocol):
    """Source of the current ledger time in whole seconds."""

    def now(self) -> int:
        """Return the current timestamp."""


class TemplateUriProvider:
    """Global URI template shared by every token id.

    Clients substitute the ``{id}`` placeholder themselves. Replacing the
    template is a configuration change and emits no notification.
    """

    def __init__(self, template: str) -> None:
        self._template = template

    def get_uri(self, token_id: int) -> str:
        return self._template

    def set_uri(self, template: str) -> None:
        self._template = template


class InMemoryApprovalRegistry:
    """Minimal operator approval table keyed by (owner, operator)."""

    def __init__(self) -> None:
        self._approvals: set[tuple[str, str]] = set()

    def set_approval_for_all(self, owner: str, operator: str, approved: bool) -> None:
        key = (canonical_account(owner), canonical_account(operator))
        if approved:
            self._approvals.add(key)
        else:
            self._approvals.discard(key)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return (canonical_account(owner), canonical_account(operator)) in self._approvals


class DenyAllApprovals:
    """Approval authority that never delegates transfer rights."""

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return False


class SystemClock:
    """Wall-clock time in UTC epoch seconds."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Deterministic clock advanced by hand."""

    def __init__(self, start: int = 0) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        self._now += seconds
        return self._now
