"""Canonical serialization and stable hashing for ledger state and events."""

from __future__ import annotations

from hashlib import sha256
from typing import Any, Iterable

NULL_TOKEN = ""


def normalize_token(value: Any) -> str:
    """Serialize primitive values deterministically for hashing."""
    if value is None:
        return NULL_TOKEN
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return format(value, "d")
    if isinstance(value, (tuple, list)):
        return "[" + ",".join(normalize_token(item) for item in value) + "]"
    return str(value)


def stable_hash(tokens: Iterable[Any]) -> str:
    """Compute a stable SHA256 hash over canonical token serialization."""
    preimage = "|".join(normalize_token(token) for token in tokens)
    return sha256(preimage.encode("utf-8")).hexdigest()
