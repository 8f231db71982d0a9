"""Environment-backed configuration for the maturity ledger."""

from __future__ import annotations

from dataclasses import dataclass
import os

from ledger.widths import UIntWidth

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"


@dataclass(frozen=True)
class LedgerConfig:
    """Canonical configuration surface for ledger widths and policies."""

    balance_bits: int = 224
    maturity_bits: int = 32
    supply_bits: int = 256
    token_id_bits: int = 256
    burn_requires_maturity: bool = True
    strict_merge_ordering: bool = False
    default_uri: str = ""
    database_url: str = DEFAULT_DATABASE_URL

    def __post_init__(self) -> None:
        for name in ("balance_bits", "maturity_bits", "supply_bits", "token_id_bits"):
            bits = getattr(self, name)
            if bits <= 0 or bits > 256 or bits % 8 != 0:
                raise RuntimeError(f"{name} must be a positive multiple of 8 no larger than 256, got {bits}")
        if self.balance_bits > self.supply_bits:
            raise RuntimeError("balance_bits must not exceed supply_bits")

    @property
    def balance_width(self) -> UIntWidth:
        return UIntWidth(self.balance_bits)

    @property
    def maturity_width(self) -> UIntWidth:
        return UIntWidth(self.maturity_bits)

    @property
    def supply_width(self) -> UIntWidth:
        return UIntWidth(self.supply_bits)

    @property
    def token_id_width(self) -> UIntWidth:
        return UIntWidth(self.token_id_bits)


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}: {raw}")


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer value for {name}: {raw}") from exc
    return value


def _read_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip()


def load_ledger_config() -> LedgerConfig:
    """Load and validate ledger configuration from environment."""
    return LedgerConfig(
        balance_bits=_read_int("LEDGER_BALANCE_BITS", 224),
        maturity_bits=_read_int("LEDGER_MATURITY_BITS", 32),
        supply_bits=_read_int("LEDGER_SUPPLY_BITS", 256),
        token_id_bits=_read_int("LEDGER_TOKEN_ID_BITS", 256),
        burn_requires_maturity=_read_bool("LEDGER_BURN_REQUIRES_MATURITY", True),
        strict_merge_ordering=_read_bool("LEDGER_STRICT_MERGE_ORDERING", False),
        default_uri=_read_str("LEDGER_DEFAULT_URI", ""),
        database_url=_read_str("LEDGER_DATABASE_URL", DEFAULT_DATABASE_URL) or DEFAULT_DATABASE_URL,
    )
