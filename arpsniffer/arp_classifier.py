"""
ARP Sniffer - ARP Semantics Classifier
Decides what an ARP message is trying to do: announce a mapping, probe for
a duplicate address, or neither.

Tags (emitted in this order when several apply):
  Announcement  gratuitous Request asserting the sender's own mapping
  Gratuitous    sender IP == target IP, sent to the broadcast address
  Probe         Request from 0.0.0.0 (duplicate address detection)

The classifier has no idea how vendor names are produced. It receives a
``vendor_of`` callable and only relies on it returning "<broadcast>" for the
all-ones hardware address.
"""

import ipaddress
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from arpsniffer.mac_address import MacLike, parse_mac
from arpsniffer.oui_registry import VENDOR_BROADCAST

IPv4Like = Union[str, ipaddress.IPv4Address]

UNSPECIFIED_IPV4 = ipaddress.IPv4Address("0.0.0.0")


class ArpOperation:
    REQUEST = 1
    REPLY = 2

    NAMES = {REQUEST: "Request", REPLY: "Reply"}

    @classmethod
    def name_of(cls, opcode: int) -> str:
        return cls.NAMES.get(opcode, f"Opcode-{opcode}")


class ArpTag:
    ANNOUNCEMENT = "Announcement"
    GRATUITOUS = "Gratuitous"
    PROBE = "Probe"


class ArpContractError(ValueError):
    """The decoded ARP message does not satisfy the classifier's input contract."""


# ── Message view ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ArpMessage:
    """Fields of one decoded ARP packet plus its Ethernet destination."""
    opcode: int                          # 1=request, 2=reply
    sender_hw: Optional[MacLike]         # ARP sender hardware address
    sender_ip: Optional[IPv4Like]        # ARP sender protocol address
    target_hw: Optional[MacLike]         # ARP target hardware address
    target_ip: Optional[IPv4Like]        # ARP target protocol address
    eth_dst: Optional[MacLike]           # Destination of the enclosing frame
    eth_src: Optional[MacLike] = None
    timestamp: float = 0.0               # Epoch seconds, informational
    frame_number: int = 0

    @property
    def is_request(self) -> bool:
        return self.opcode == ArpOperation.REQUEST

    @property
    def is_reply(self) -> bool:
        return self.opcode == ArpOperation.REPLY


def _protocol_address(value: Optional[IPv4Like], field_name: str) -> ipaddress.IPv4Address:
    if value is None or value == "":
        raise ArpContractError(f"ARP {field_name} is missing")
    try:
        return ipaddress.IPv4Address(value)
    except ValueError as e:
        raise ArpContractError(f"ARP {field_name} is not an IPv4 address: {value!r}") from e


def _check_frame_destination(value: Optional[MacLike]):
    # Absent is allowed; vendor_of reports it as "<null>"
    if value is None:
        return
    try:
        parse_mac(value)
    except (ValueError, TypeError) as e:
        raise ArpContractError(f"Frame destination is not a hardware address: {value!r}") from e


def classify(msg: ArpMessage, vendor_of: Callable[[Optional[MacLike]], str]) -> List[str]:
    """
    Return the semantic tags for one ARP message.

    Args:
        msg: decoded ARP message
        vendor_of: hardware address -> vendor display string

    Returns:
        Ordered list of ArpTag values; empty for ordinary traffic.

    Raises:
        ArpContractError: unknown opcode, missing/invalid protocol address, or
            a frame destination that is not a hardware address.
    """
    if msg.opcode not in ArpOperation.NAMES:
        raise ArpContractError(f"Unsupported ARP opcode: {msg.opcode!r}")
    sender_ip = _protocol_address(msg.sender_ip, "sender protocol address")
    target_ip = _protocol_address(msg.target_ip, "target protocol address")
    _check_frame_destination(msg.eth_dst)

    tags: List[str] = []

    if sender_ip == target_ip and vendor_of(msg.eth_dst) == VENDOR_BROADCAST:
        # Announcement is only recognised as a gratuitous Request
        if msg.is_request:
            tags.append(ArpTag.ANNOUNCEMENT)
        tags.append(ArpTag.GRATUITOUS)

    if msg.is_request and sender_ip == UNSPECIFIED_IPV4:
        tags.append(ArpTag.PROBE)

    return tags
