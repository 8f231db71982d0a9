"""Stateful facade over the pure ledger engine."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from ledger import engine
from ledger.capabilities import supports_interface
from ledger.collaborators import (
    ApprovalAuthority,
    Clock,
    DenyAllApprovals,
    SystemClock,
    TemplateUriProvider,
    UriProvider,
)
from ledger.config import LedgerConfig
from ledger.errors import LedgerError
from ledger.events import LedgerEvent, NotificationChannel
from ledger.operations import (
    EMPTY_DATA,
    BatchBurn,
    BatchMint,
    BatchTransfer,
    Burn,
    LedgerOperation,
    Mint,
    Transfer,
)
from ledger.state import LedgerState

logger = logging.getLogger(__name__)


class MaturityLedger:
    """Owns the current ledger state and publishes committed transitions.

    The state reference is replaced only after ``engine.apply_operation``
    succeeds, so a rejected operation leaves every balance, maturity and
    supply exactly as it was. Events reach the channels after the swap.
    """

    def __init__(
        self,
        *,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Clock] = None,
        approvals: Optional[ApprovalAuthority] = None,
        uri_provider: Optional[UriProvider] = None,
        channels: Sequence[NotificationChannel] = (),
        state: Optional[LedgerState] = None,
    ) -> None:
        self.config = config or LedgerConfig()
        self.clock = clock or SystemClock()
        self.approvals = approvals or DenyAllApprovals()
        self.uri_provider = uri_provider or TemplateUriProvider(self.config.default_uri)
        self._channels: list[NotificationChannel] = list(channels)
        self._state = state or LedgerState()

    @property
    def state(self) -> LedgerState:
        return self._state

    def subscribe(self, channel: NotificationChannel) -> None:
        self._channels.append(channel)

    def execute(self, operation: LedgerOperation) -> tuple[LedgerEvent, ...]:
        """Apply one operation against the current state and publish its events."""
        try:
            result = engine.apply_operation(
                self._state,
                operation,
                now=self.clock.now(),
                config=self.config,
                approvals=self.approvals,
            )
        except LedgerError as exc:
            logger.info("Rejected %s: %s", type(operation).__name__, exc.code.value)
            raise
        self._state = result.state
        for event in result.events:
            for channel in self._channels:
                channel.publish(event)
        return result.events

    def mint(
        self,
        to_account: str,
        token_id: int,
        amount: int,
        lock_time: int,
        data: bytes = EMPTY_DATA,
        *,
        operator: str,
    ) -> tuple[LedgerEvent, ...]:
        return self.execute(Mint(operator, to_account, token_id, amount, lock_time, data))

    def mint_batch(
        self,
        to_account: str,
        token_ids: Sequence[int],
        amounts: Sequence[int],
        lock_time: int,
        data: bytes = EMPTY_DATA,
        *,
        operator: str,
    ) -> tuple[LedgerEvent, ...]:
        return self.execute(
            BatchMint(operator, to_account, tuple(token_ids), tuple(amounts), lock_time, data)
        )

    def burn(self, from_account: str, token_id: int, amount: int, *, operator: str) -> tuple[LedgerEvent, ...]:
        return self.execute(Burn(operator, from_account, token_id, amount))

    def burn_batch(
        self,
        from_account: str,
        token_ids: Sequence[int],
        amounts: Sequence[int],
        *,
        operator: str,
    ) -> tuple[LedgerEvent, ...]:
        return self.execute(BatchBurn(operator, from_account, tuple(token_ids), tuple(amounts)))

    def safe_transfer_from(
        self,
        from_account: str,
        to_account: str,
        token_id: int,
        amount: int,
        data: bytes = EMPTY_DATA,
        *,
        operator: str,
    ) -> tuple[LedgerEvent, ...]:
        return self.execute(Transfer(operator, from_account, to_account, token_id, amount, data))

    def safe_batch_transfer_from(
        self,
        from_account: str,
        to_account: str,
        token_ids: Sequence[int],
        amounts: Sequence[int],
        data: bytes = EMPTY_DATA,
        *,
        operator: str,
    ) -> tuple[LedgerEvent, ...]:
        return self.execute(
            BatchTransfer(operator, from_account, to_account, tuple(token_ids), tuple(amounts), data)
        )

    def balance_of(self, account: str, token_id: int) -> int:
        return engine.balance_of(self._state, account, token_id)

    def balance_of_batch(self, accounts: Sequence[str], token_ids: Sequence[int]) -> tuple[int, ...]:
        return engine.balance_of_batch(self._state, accounts, token_ids)

    def maturity_of(self, account: str, token_id: int) -> int:
        return engine.maturity_of(self._state, account, token_id)

    def maturity_of_batch(self, accounts: Sequence[str], token_ids: Sequence[int]) -> tuple[int, ...]:
        return engine.maturity_of_batch(self._state, accounts, token_ids)

    def total_supply(self, token_id: int) -> int:
        return engine.total_supply(self._state, token_id)

    def exists(self, token_id: int) -> bool:
        return engine.exists(self._state, token_id)

    def uri(self, token_id: int) -> str:
        return self.uri_provider.get_uri(token_id)

    def supports_interface(self, interface_id: Union[int, str, bytes]) -> bool:
        return supports_interface(interface_id)

    def state_digest(self) -> str:
        return self._state.digest()
