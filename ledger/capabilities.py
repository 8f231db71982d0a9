"""Static capability identifiers exposed for interface discovery."""

from __future__ import annotations

from typing import Union

ERC165_INTERFACE_ID = 0x01FFC9A7
ERC1155_INTERFACE_ID = 0xD9B67A26
ERC1155_METADATA_URI_INTERFACE_ID = 0x0E89341C
INVALID_INTERFACE_ID = 0xFFFFFFFF

SUPPORTED_INTERFACES: frozenset[int] = frozenset(
    {
        ERC165_INTERFACE_ID,
        ERC1155_INTERFACE_ID,
        ERC1155_METADATA_URI_INTERFACE_ID,
    }
)


def _as_interface_id(value: Union[int, str, bytes]) -> int:
    if isinstance(value, bytes):
        return int.from_bytes(value, "big")
    if isinstance(value, str):
        return int(value, 16)
    return value


def supports_interface(interface_id: Union[int, str, bytes]) -> bool:
    """Membership test against the fixed capability set."""
    return _as_interface_id(interface_id) in SUPPORTED_INTERFACES
