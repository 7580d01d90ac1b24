"""
ARP Sniffer - Frame Annotator
Combines the OUI registry and the ARP classifier: every ARP frame gets its
semantic tags plus the vendor names of the sender and target hardware
addresses, and the running request/reply/tag counters are updated.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from arpsniffer.arp_classifier import ArpContractError, ArpMessage, ArpOperation, ArpTag, classify
from arpsniffer.frame_decoder import FrameDecodeError, decode_ethernet_frame, decode_tshark_row
from arpsniffer.mac_address import mac_to_colon, parse_mac
from arpsniffer.oui_registry import VENDOR_NULL, OuiRegistry

logger = logging.getLogger(__name__)


# ── Results ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ArpAnnotation:
    """One classified ARP frame with vendor names resolved."""
    message: ArpMessage
    tags: Tuple[str, ...]
    sender_vendor: str
    target_vendor: str

    @property
    def opcode_name(self) -> str:
        return ArpOperation.name_of(self.message.opcode)

    @property
    def tag_label(self) -> str:
        """Tags as "[Announcement][Gratuitous]", or "" when none apply."""
        return "".join(f"[{tag}]" for tag in self.tags)

    def summary(self) -> str:
        """Single-line description suitable for a log record."""
        src = _display_mac(self.message.sender_hw)
        dst = _display_mac(self.message.target_hw)
        label = f" {self.tag_label}" if self.tags else ""
        return (f"[{self.opcode_name}] {src} -> {dst}{label} "
                f"({self.sender_vendor} -> {self.target_vendor})")


@dataclass
class ArpStats:
    """Running counters for one annotation session."""
    total: int = 0
    requests: int = 0
    replies: int = 0
    gratuitous: int = 0
    announcements: int = 0
    probes: int = 0
    skipped: int = 0

    def record(self, annotation: ArpAnnotation):
        self.total += 1
        if annotation.message.is_request:
            self.requests += 1
        elif annotation.message.is_reply:
            self.replies += 1
        if ArpTag.GRATUITOUS in annotation.tags:
            self.gratuitous += 1
        if ArpTag.ANNOUNCEMENT in annotation.tags:
            self.announcements += 1
        if ArpTag.PROBE in annotation.tags:
            self.probes += 1


def _display_mac(addr) -> str:
    if addr is None:
        return VENDOR_NULL
    return mac_to_colon(parse_mac(addr))


# ── Annotator ────────────────────────────────────────────────────────────────

class ArpAnnotator:
    """
    Annotates decoded ARP messages against one OUI registry.

    The registry is shared read-only; the stats counters belong to this
    annotator, so use one annotator per capture session / thread.
    """

    def __init__(self, registry: OuiRegistry):
        self.registry = registry
        self.stats = ArpStats()

    def annotate(self, msg: ArpMessage) -> ArpAnnotation:
        """
        Classify one message and resolve its vendors.

        Raises:
            ArpContractError: if the message violates the classifier's contract.
        """
        tags = classify(msg, self.registry.lookup)
        annotation = ArpAnnotation(
            message=msg,
            tags=tuple(tags),
            sender_vendor=self.registry.lookup(msg.sender_hw),
            target_vendor=self.registry.lookup(msg.target_hw),
        )
        self.stats.record(annotation)
        if tags:
            logger.debug(annotation.summary())
        return annotation

    def annotate_frame(self, data: bytes, timestamp: float = 0.0,
                       frame_number: int = 0) -> Optional[ArpAnnotation]:
        """Decode a raw Ethernet frame and annotate it; None for non-ARP frames."""
        msg = decode_ethernet_frame(data, timestamp=timestamp, frame_number=frame_number)
        if msg is None:
            return None
        return self.annotate(msg)

    def annotate_frames(self, frames: Iterable[bytes]) -> List[ArpAnnotation]:
        """
        Annotate a batch of raw frames.

        Non-ARP frames are ignored. Frames that fail to decode or classify
        are logged, counted in ``stats.skipped`` and left out of the result.
        """
        results = []
        for number, data in enumerate(frames, start=1):
            try:
                annotation = self.annotate_frame(data, frame_number=number)
            except (FrameDecodeError, ArpContractError) as e:
                self.stats.skipped += 1
                logger.warning(f"Skipping frame {number}: {e}")
                continue
            if annotation is not None:
                results.append(annotation)
        return results

    def annotate_tshark(self, lines: Iterable[str]) -> List[ArpAnnotation]:
        """Annotate tshark field rows; same skipping rules as annotate_frames."""
        results = []
        for line_no, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                msg = decode_tshark_row(line)
                if msg is None:
                    continue
                results.append(self.annotate(msg))
            except (FrameDecodeError, ArpContractError) as e:
                self.stats.skipped += 1
                logger.warning(f"Skipping tshark row {line_no}: {e}")
        logger.info(f"Annotated {len(results)} ARP rows "
                    f"({self.stats.skipped} skipped so far)")
        return results
