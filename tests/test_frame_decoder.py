"""Tests for arpsniffer.frame_decoder."""

import ipaddress
import struct

import pytest

from arpsniffer.arp_classifier import ArpMessage
from arpsniffer.frame_decoder import (
    TSHARK_ARP_FIELDS,
    FrameDecodeError,
    decode_ethernet_frame,
    decode_tshark_row,
)


class TestDecodeEthernetFrame:
    def test_request(self, arp_frame):
        data = arp_frame(1, "001d9c000001", "192.168.1.10",
                         "000000000000", "192.168.1.20", "ffffffffffff")
        msg = decode_ethernet_frame(data, timestamp=12.5, frame_number=7)
        assert msg == ArpMessage(
            opcode=1,
            sender_hw=bytes.fromhex("001d9c000001"),
            sender_ip=ipaddress.IPv4Address("192.168.1.10"),
            target_hw=bytes(6),
            target_ip=ipaddress.IPv4Address("192.168.1.20"),
            eth_dst=b"\xff" * 6,
            eth_src=bytes.fromhex("001d9c000001"),
            timestamp=12.5,
            frame_number=7,
        )

    def test_vlan_tagged(self, arp_frame):
        data = arp_frame(2, "080006000002", "10.0.0.2",
                         "001d9c000001", "10.0.0.1", "001d9c000001", vlan=100)
        msg = decode_ethernet_frame(data)
        assert msg.opcode == 2
        assert msg.sender_ip == ipaddress.IPv4Address("10.0.0.2")
        assert msg.eth_dst == bytes.fromhex("001d9c000001")

    def test_padding_is_ignored(self, arp_frame):
        data = arp_frame(1, "001d9c000001", "10.0.0.1",
                         "000000000000", "10.0.0.1", "ffffffffffff") + bytes(18)
        assert decode_ethernet_frame(data).target_ip == ipaddress.IPv4Address("10.0.0.1")

    def test_non_arp_frame(self):
        data = b"\xff" * 6 + bytes.fromhex("001d9c000001") + struct.pack("!H", 0x0800) + bytes(40)
        assert decode_ethernet_frame(data) is None

    def test_truncated_header(self):
        with pytest.raises(FrameDecodeError):
            decode_ethernet_frame(b"\x00" * 10)

    def test_truncated_arp(self, arp_frame):
        data = arp_frame(1, "001d9c000001", "10.0.0.1",
                         "000000000000", "10.0.0.2", "ffffffffffff")
        with pytest.raises(FrameDecodeError, match="Truncated"):
            decode_ethernet_frame(data[:30])

    def test_non_ipv4_arp(self, arp_frame):
        data = bytearray(arp_frame(1, "001d9c000001", "10.0.0.1",
                                   "000000000000", "10.0.0.2", "ffffffffffff"))
        # ptype lives right after htype in the ARP header
        struct.pack_into("!H", data, 16, 0x86DD)
        with pytest.raises(FrameDecodeError, match="Unsupported"):
            decode_ethernet_frame(bytes(data))


class TestDecodeTsharkRow:
    def row(self, **overrides):
        values = {
            "frame.number": "3",
            "frame.time_epoch": "1700000000.250",
            "eth.src": "00:1d:9c:00:00:01",
            "eth.dst": "ff:ff:ff:ff:ff:ff",
            "arp.opcode": "1",
            "arp.src.hw_mac": "00:1d:9c:00:00:01",
            "arp.src.proto_ipv4": "192.168.1.10",
            "arp.dst.hw_mac": "00:00:00:00:00:00",
            "arp.dst.proto_ipv4": "192.168.1.20",
        }
        values.update(overrides)
        return "\t".join(values[f] for f in TSHARK_ARP_FIELDS) + "\n"

    def test_request_row(self):
        msg = decode_tshark_row(self.row())
        assert msg.opcode == 1
        assert msg.frame_number == 3
        assert msg.timestamp == pytest.approx(1700000000.25)
        assert msg.sender_hw == bytes.fromhex("001d9c000001")
        assert msg.eth_dst == b"\xff" * 6
        assert msg.sender_ip == ipaddress.IPv4Address("192.168.1.10")
        assert msg.target_ip == ipaddress.IPv4Address("192.168.1.20")

    def test_matches_raw_frame_decoding(self, arp_frame):
        row_msg = decode_tshark_row(self.row(**{"arp.dst.proto_ipv4": "192.168.1.10"}))
        raw_msg = decode_ethernet_frame(
            arp_frame(1, "001d9c000001", "192.168.1.10",
                      "000000000000", "192.168.1.10", "ffffffffffff"),
            timestamp=1700000000.25, frame_number=3)
        assert row_msg == raw_msg
        assert hash(row_msg) == hash(raw_msg)

    def test_non_arp_row(self):
        assert decode_tshark_row(self.row(**{"arp.opcode": ""})) is None

    def test_short_row_is_padded(self):
        assert decode_tshark_row("1\t0.0\taa:bb:cc:dd:ee:ff") is None

    def test_missing_fields_become_none(self):
        msg = decode_tshark_row(self.row(**{"eth.dst": "", "arp.src.proto_ipv4": ""}))
        assert msg.eth_dst is None
        assert msg.sender_ip is None

    def test_bad_mac(self):
        with pytest.raises(FrameDecodeError):
            decode_tshark_row(self.row(**{"eth.dst": "zz:zz"}))

    def test_bad_protocol_address(self):
        with pytest.raises(FrameDecodeError, match="protocol address"):
            decode_tshark_row(self.row(**{"arp.src.proto_ipv4": "192.168.1.300"}))

    def test_bad_opcode(self):
        with pytest.raises(FrameDecodeError):
            decode_tshark_row(self.row(**{"arp.opcode": "request"}))
