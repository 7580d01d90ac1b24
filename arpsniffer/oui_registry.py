"""
ARP Sniffer - OUI Registry Index
Turns the IEEE OUI registry text dump (oui.txt) into an immutable
prefix -> organization lookup table and resolves hardware addresses to
vendor display strings.

The registry file itself is obtained by the caller; this module only reads
a file that is already on disk.

Registry lines of interest look like:
    00000C     (base 16)\t\tCisco Systems, Inc
Everything else in the file is prose and is skipped.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from arpsniffer.mac_address import MacLike, is_broadcast, is_empty, oui_prefix, parse_mac

logger = logging.getLogger(__name__)

# ── Registry format ──────────────────────────────────────────────────────────

OUI_LINE_MARKER = "     (base 16)\t\t"
ORG_SEPARATOR = "\t\t"
ALSO_SEPARATOR = ", also "

# ── Display-string contract ──────────────────────────────────────────────────
# Downstream code (the ARP classifier) compares against these verbatim.

VENDOR_NULL = "<null>"
VENDOR_EMPTY = "<empty>"
VENDOR_BROADCAST = "<broadcast>"
VENDOR_UNKNOWN = "<Unknown_Vendor>"


def parse_registry_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Extract (prefix, organization) from one registry line.

    Returns None for lines that do not carry the base-16 marker.
    """
    if OUI_LINE_MARKER not in line:
        return None
    # Leading whitespace before the prefix is tolerated; IEEE lines start at column 0
    tokens = line.split(None, 1)
    if not tokens:
        return None
    prefix = tokens[0]
    # Organization is the field between the first and second double tab
    org = line.split(ORG_SEPARATOR)[1].rstrip("\r\n")
    return prefix, org


class OuiRegistry:
    """
    Read-only OUI index.

    Built once from registry lines, then frozen: the backing dict is only
    reachable through a MappingProxyType, so lookups can run from any number
    of threads without locking.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, str]):
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def build(cls, lines: Iterable[str]) -> "OuiRegistry":
        """Parse registry lines. Repeated prefixes accumulate in file order."""
        acc: Dict[str, str] = {}
        for line in lines:
            parsed = parse_registry_line(line)
            if parsed is None:
                continue
            prefix, org = parsed
            if prefix in acc:
                acc[prefix] = acc[prefix] + ALSO_SEPARATOR + org
            else:
                acc[prefix] = org
        return cls(acc)

    # ── Queries ───────────────────────────────────────────────────────────

    def lookup(self, addr: Optional[MacLike]) -> str:
        """
        Resolve a hardware address to a vendor display string.

        Sentinels are checked before the table, so an all-zero address is
        "<empty>" even if the registry lists prefix 000000.
        """
        if addr is None:
            return VENDOR_NULL
        mac = parse_mac(addr)
        if is_empty(mac):
            return VENDOR_EMPTY
        if is_broadcast(mac):
            return VENDOR_BROADCAST
        return self._entries.get(oui_prefix(mac), VENDOR_UNKNOWN)

    def __call__(self, addr: Optional[MacLike]) -> str:
        return self.lookup(addr)

    def get(self, prefix: str, default: Optional[str] = None) -> Optional[str]:
        return self._entries.get(prefix, default)

    @property
    def entries(self) -> Mapping[str, str]:
        return self._entries

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self):
        return f"OuiRegistry({len(self._entries)} prefixes)"


def build_registry(lines: Iterable[str]) -> OuiRegistry:
    """Convenience wrapper around OuiRegistry.build."""
    return OuiRegistry.build(lines)


def load_registry(path: Optional[str] = None) -> OuiRegistry:
    """
    Build the index from a registry file already on disk.

    Args:
        path: oui.txt location; defaults to the ``oui_file`` setting.

    Raises:
        FileNotFoundError: if the file does not exist. Fetching it is the
            caller's job.
    """
    if path is None:
        from arpsniffer.settings_manager import get_settings
        path = get_settings().oui_file

    # newline="" keeps the raw terminators; parse_registry_line strips them
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        registry = OuiRegistry.build(f)

    logger.info(f"Loaded {len(registry)} OUI prefixes from {path}")
    return registry
