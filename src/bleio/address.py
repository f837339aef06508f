"""Bluetooth MAC address conversion."""

from __future__ import annotations

import re

from .exceptions import AddressParseError

ADDRESS_OCTETS = 6
_OCTET_RE = re.compile(r"[0-9A-Fa-f]{2}")


def pack_address(octets: bytes) -> int:
    """Pack 6 address bytes, most significant first, into a 48-bit integer."""
    if len(octets) != ADDRESS_OCTETS:
        raise AddressParseError(
            f"Address must be {ADDRESS_OCTETS} bytes, got {len(octets)}"
        )
    address = 0
    for i, octet in enumerate(octets):
        address |= octet << (8 * (ADDRESS_OCTETS - 1 - i))
    return address


def parse_mac_address(text: str) -> int:
    """Parse "aa:bb:cc:dd:ee:ff" into a 48-bit integer.

    Raises:
        AddressParseError: If text is not six colon-separated hex octets
    """
    parts = text.strip().split(":")
    if len(parts) != ADDRESS_OCTETS:
        raise AddressParseError(
            f"Invalid MAC address: {text!r} (expected aa:bb:cc:dd:ee:ff)"
        )
    for part in parts:
        if not _OCTET_RE.fullmatch(part):
            raise AddressParseError(f"Invalid MAC address: {text!r} (bad octet {part!r})")
    return pack_address(bytes(int(part, 16) for part in parts))


def format_mac_address(address: int) -> str:
    """Format a 48-bit integer as "AA:BB:CC:DD:EE:FF"."""
    if not 0 <= address < 1 << 48:
        raise AddressParseError(f"Address out of range: 0x{address:x}")
    return ":".join(
        f"{(address >> (8 * (ADDRESS_OCTETS - 1 - i))) & 0xFF:02X}"
        for i in range(ADDRESS_OCTETS)
    )
