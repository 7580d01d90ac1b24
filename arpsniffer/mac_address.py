"""
ARP Sniffer - Hardware Address Helpers
Normalizes MAC addresses into the canonical 6-byte form used by the OUI
registry and the ARP classifier.

Accepted input forms:
  - raw bytes / bytearray of length 6
  - 00:1D:9C:AB:CD:EF, 00-1D-9C-AB-CD-EF, 001D.9CAB.CDEF, 001D9CABCDEF
"""

import re
from typing import Union

MAC_LENGTH = 6

EMPTY_MAC = bytes(MAC_LENGTH)
BROADCAST_MAC = b"\xff" * MAC_LENGTH

MacLike = Union[bytes, bytearray, memoryview, str]

_HEX12 = re.compile(r"^[0-9A-F]{12}$")


def parse_mac(value: MacLike) -> bytes:
    """
    Convert a MAC address in any common format to 6 raw bytes.

    Raises:
        ValueError: if the value is not a 6-byte hardware address.
        TypeError: if the value is neither bytes-like nor a string.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        if len(raw) != MAC_LENGTH:
            raise ValueError(f"Hardware address must be {MAC_LENGTH} bytes, got {len(raw)}")
        return raw

    if not isinstance(value, str):
        raise TypeError(f"Unsupported hardware address type: {type(value).__name__}")

    # Normalize: remove separators, uppercase
    clean = value.strip().upper().replace(":", "").replace("-", "").replace(".", "")
    if not _HEX12.match(clean):
        raise ValueError(f"Not a hardware address: {value!r}")
    return bytes.fromhex(clean)


def mac_to_hex(mac: bytes) -> str:
    """Canonical rendering: 12 uppercase hex characters, no separators."""
    return mac.hex().upper()


def mac_to_colon(mac: bytes) -> str:
    """Colon-separated rendering for display (e.g. 00:1D:9C:AB:CD:EF)."""
    return ":".join(f"{b:02X}" for b in mac)


def oui_prefix(mac: bytes) -> str:
    """First 3 octets as 6 uppercase hex characters."""
    return mac_to_hex(mac[:3])


def is_empty(mac: bytes) -> bool:
    return mac == EMPTY_MAC


def is_broadcast(mac: bytes) -> bool:
    return mac == BROADCAST_MAC
