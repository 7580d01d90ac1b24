"""
ARP Sniffer core: OUI vendor resolution and ARP message classification.
"""

from arpsniffer.annotator import ArpAnnotation, ArpAnnotator, ArpStats
from arpsniffer.arp_classifier import ArpContractError, ArpMessage, ArpOperation, ArpTag, classify
from arpsniffer.oui_registry import OuiRegistry, build_registry, load_registry

__all__ = [
    "ArpAnnotation", "ArpAnnotator", "ArpStats",
    "ArpContractError", "ArpMessage", "ArpOperation", "ArpTag", "classify",
    "OuiRegistry", "build_registry", "load_registry",
]
__version__ = "1.0.0"
