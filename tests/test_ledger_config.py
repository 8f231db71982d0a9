from __future__ import annotations

import pytest

from ledger.config import DEFAULT_DATABASE_URL, LedgerConfig, load_ledger_config

_LEDGER_ENV = (
    "LEDGER_BALANCE_BITS",
    "LEDGER_MATURITY_BITS",
    "LEDGER_SUPPLY_BITS",
    "LEDGER_TOKEN_ID_BITS",
    "LEDGER_BURN_REQUIRES_MATURITY",
    "LEDGER_STRICT_MERGE_ORDERING",
    "LEDGER_DEFAULT_URI",
    "LEDGER_DATABASE_URL",
)


@pytest.fixture(autouse=True)
def _clear_ledger_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _LEDGER_ENV:
        monkeypatch.delenv(key, raising=False)


def test_load_ledger_config_defaults() -> None:
    cfg = load_ledger_config()
    assert cfg == LedgerConfig()
    assert cfg.balance_width.max_value == 2**224 - 1
    assert cfg.maturity_width.max_value == 2**32 - 1
    assert cfg.supply_width.max_value == 2**256 - 1
    assert cfg.token_id_width.max_value == 2**256 - 1
    assert cfg.burn_requires_maturity is True
    assert cfg.strict_merge_ordering is False
    assert cfg.database_url == DEFAULT_DATABASE_URL


def test_load_ledger_config_happy_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDGER_BALANCE_BITS", "128")
    monkeypatch.setenv("LEDGER_MATURITY_BITS", "64")
    monkeypatch.setenv("LEDGER_SUPPLY_BITS", "128")
    monkeypatch.setenv("LEDGER_TOKEN_ID_BITS", "64")
    monkeypatch.setenv("LEDGER_BURN_REQUIRES_MATURITY", "off")
    monkeypatch.setenv("LEDGER_STRICT_MERGE_ORDERING", "yes")
    monkeypatch.setenv("LEDGER_DEFAULT_URI", " https://token-cdn-domain/{id}.json ")
    monkeypatch.setenv("LEDGER_DATABASE_URL", "postgresql+psycopg://ledger@localhost/ledger")

    cfg = load_ledger_config()
    assert cfg.balance_bits == 128
    assert cfg.maturity_bits == 64
    assert cfg.supply_bits == 128
    assert cfg.token_id_bits == 64
    assert cfg.burn_requires_maturity is False
    assert cfg.strict_merge_ordering is True
    assert cfg.default_uri == "https://token-cdn-domain/{id}.json"
    assert cfg.database_url == "postgresql+psycopg://ledger@localhost/ledger"


def test_load_ledger_config_invalid_bool(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDGER_STRICT_MERGE_ORDERING", "maybe")
    with pytest.raises(RuntimeError, match="Invalid boolean"):
        load_ledger_config()


def test_load_ledger_config_invalid_int(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDGER_BALANCE_BITS", "wide")
    with pytest.raises(RuntimeError, match="Invalid integer"):
        load_ledger_config()


def test_ledger_config_rejects_bad_widths() -> None:
    with pytest.raises(RuntimeError, match="maturity_bits"):
        LedgerConfig(maturity_bits=12)
    with pytest.raises(RuntimeError, match="supply_bits"):
        LedgerConfig(supply_bits=512)
    with pytest.raises(RuntimeError, match="token_id_bits"):
        LedgerConfig(token_id_bits=0)
    with pytest.raises(RuntimeError, match="must not exceed"):
        LedgerConfig(balance_bits=256, supply_bits=224)
