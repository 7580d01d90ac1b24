import struct

import pytest

from arpsniffer import settings_manager
from arpsniffer.oui_registry import OuiRegistry

REGISTRY_TEXT = (
    "OUI/MA-L                                                    Organization                                 \n"
    "company_id                                                  Organization                                 \n"
    "                                                            Address                                      \n"
    "\n"
    "00-00-0C   (hex)\t\tCisco Systems, Inc\n"
    "00000C     (base 16)\t\tCisco Systems, Inc\n"
    "\t\t\t\t170 WEST TASMAN DRIVE\n"
    "\t\t\t\tSAN JOSE  CA  95134\n"
    "\t\t\t\tUS\n"
    "\n"
    "00-1D-9C   (hex)\t\tRockwell Automation\n"
    "001D9C     (base 16)\t\tRockwell Automation\n"
    "\n"
    "08-00-06   (hex)\t\tSiemens AG\n"
    "080006     (base 16)\t\tSiemens AG\n"
    "080006     (base 16)\t\tSiemens Nixdorf\n"
)


@pytest.fixture
def registry_lines():
    return REGISTRY_TEXT.splitlines(keepends=True)


@pytest.fixture
def registry(registry_lines):
    return OuiRegistry.build(registry_lines)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings singleton at a throwaway file for every test."""
    monkeypatch.setenv(settings_manager.SETTINGS_ENV_VAR, str(tmp_path / "settings.json"))
    settings_manager.reset_settings()
    yield
    settings_manager.reset_settings()


def make_arp_frame(opcode, sender_hw, sender_ip, target_hw, target_ip,
                   eth_dst, eth_src=None, vlan=None):
    """Build an Ethernet II + ARP frame from hex MAC strings and dotted IPs."""
    def mac(s):
        return bytes.fromhex(s.replace(":", ""))

    def ip(s):
        return bytes(int(part) for part in s.split("."))

    header = mac(eth_dst) + mac(eth_src or sender_hw)
    if vlan is not None:
        header += struct.pack("!HH", 0x8100, vlan)
    header += struct.pack("!H", 0x0806)
    payload = struct.pack("!HHBBH", 1, 0x0800, 6, 4, opcode)
    payload += mac(sender_hw) + ip(sender_ip) + mac(target_hw) + ip(target_ip)
    return header + payload


@pytest.fixture
def arp_frame():
    return make_arp_frame
