"""
ARP Sniffer - ARP Frame Decoder
Turns what the capture layer hands us into ArpMessage views.

Two input shapes are supported:
  1. Raw Ethernet II frames (bytes), optionally carrying one 802.1Q tag.
  2. tshark "-T fields" rows, tab separated, in TSHARK_ARP_FIELDS order.

Only decoding lives here; opening interfaces and running tshark belong to
the caller.
"""

import ipaddress
import struct
from typing import Optional

from arpsniffer.arp_classifier import ArpMessage
from arpsniffer.mac_address import parse_mac


class FrameDecodeError(ValueError):
    """A frame claimed to be ARP but could not be decoded."""


# ── Wire constants ───────────────────────────────────────────────────────────

ETHERTYPE_ARP = 0x0806
ETHERTYPE_IPV4 = 0x0800
ETHERTYPE_VLAN = 0x8100

ARP_HTYPE_ETHERNET = 1

_ETH_HEADER = struct.Struct("!6s6sH")
_VLAN_TAG = struct.Struct("!HH")          # TCI, inner ethertype
_ARP_IPV4 = struct.Struct("!HHBBH6s4s6s4s")


# ── Raw frames ───────────────────────────────────────────────────────────────

def decode_ethernet_frame(data: bytes, timestamp: float = 0.0,
                          frame_number: int = 0) -> Optional[ArpMessage]:
    """
    Decode one Ethernet frame.

    Returns:
        ArpMessage for ARP frames, None for any other ethertype.

    Raises:
        FrameDecodeError: truncated frame, or ARP that is not IPv4 over Ethernet.
    """
    if len(data) < _ETH_HEADER.size:
        raise FrameDecodeError(f"Frame too short for Ethernet header ({len(data)} bytes)")

    eth_dst, eth_src, eth_type = _ETH_HEADER.unpack_from(data, 0)
    offset = _ETH_HEADER.size

    if eth_type == ETHERTYPE_VLAN:
        if len(data) < offset + _VLAN_TAG.size:
            raise FrameDecodeError("Frame too short for 802.1Q tag")
        _tci, eth_type = _VLAN_TAG.unpack_from(data, offset)
        offset += _VLAN_TAG.size

    if eth_type != ETHERTYPE_ARP:
        return None

    if len(data) < offset + _ARP_IPV4.size:
        raise FrameDecodeError(
            f"Truncated ARP payload: {len(data) - offset} of {_ARP_IPV4.size} bytes")

    (htype, ptype, hlen, plen, opcode,
     sha, spa, tha, tpa) = _ARP_IPV4.unpack_from(data, offset)

    if htype != ARP_HTYPE_ETHERNET or ptype != ETHERTYPE_IPV4 or hlen != 6 or plen != 4:
        raise FrameDecodeError(
            f"Unsupported ARP format: htype={htype} ptype=0x{ptype:04x} "
            f"hlen={hlen} plen={plen}")

    return ArpMessage(
        opcode=opcode,
        sender_hw=sha,
        sender_ip=ipaddress.IPv4Address(spa),
        target_hw=tha,
        target_ip=ipaddress.IPv4Address(tpa),
        eth_dst=eth_dst,
        eth_src=eth_src,
        timestamp=timestamp,
        frame_number=frame_number,
    )


# ── tshark field rows ────────────────────────────────────────────────────────

TSHARK_ARP_FIELDS = [
    "frame.number", "frame.time_epoch",
    "eth.src", "eth.dst",
    "arp.opcode", "arp.src.hw_mac", "arp.src.proto_ipv4",
    "arp.dst.hw_mac", "arp.dst.proto_ipv4",
]


def _optional_mac(s: str) -> Optional[bytes]:
    s = s.strip()
    if not s:
        return None
    try:
        return parse_mac(s)
    except ValueError as e:
        raise FrameDecodeError(f"Bad hardware address field: {s!r}") from e


def _optional_ipv4(s: str) -> Optional[ipaddress.IPv4Address]:
    s = s.strip()
    if not s:
        return None
    try:
        return ipaddress.IPv4Address(s)
    except ValueError as e:
        raise FrameDecodeError(f"Bad protocol address field: {s!r}") from e


def decode_tshark_row(line: str) -> Optional[ArpMessage]:
    """
    Decode one tab-separated tshark row.

    Returns None for rows that carry no ARP opcode (non-ARP frames).
    Empty protocol address fields decode to None; the classifier rejects those.
    """
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) < len(TSHARK_ARP_FIELDS):
        fields += [""] * (len(TSHARK_ARP_FIELDS) - len(fields))

    opcode_text = fields[4].strip()
    if not opcode_text:
        return None
    try:
        opcode = int(opcode_text, 0)
        frame_number = int(fields[0]) if fields[0].strip() else 0
        timestamp = float(fields[1]) if fields[1].strip() else 0.0
    except ValueError as e:
        raise FrameDecodeError(f"Bad numeric field in tshark row: {e}") from e

    return ArpMessage(
        opcode=opcode,
        sender_hw=_optional_mac(fields[5]),
        sender_ip=_optional_ipv4(fields[6]),
        target_hw=_optional_mac(fields[7]),
        target_ip=_optional_ipv4(fields[8]),
        eth_dst=_optional_mac(fields[3]),
        eth_src=_optional_mac(fields[2]),
        timestamp=timestamp,
        frame_number=frame_number,
    )
