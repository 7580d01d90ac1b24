"""
ARP Sniffer - Logging Setup
Configures the root logger with file and console handlers.
"""

import logging
import os
import sys
from typing import Optional

from arpsniffer.settings_manager import get_settings


def setup_logging(log_dir: Optional[str] = None, level: Optional[str] = None) -> str:
    """
    Configure logging with file and console handlers.

    Args:
        log_dir: directory for arpsniffer.log; defaults to the ``log_dir`` setting.
        level: logging level name; defaults to the ``log_level`` setting.

    Returns:
        Path of the log file.
    """
    settings = get_settings()
    log_dir = log_dir or settings.log_dir
    level_name = (level or settings.log_level).upper()

    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "arpsniffer.log")

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)-25s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logger = logging.getLogger("arpsniffer")
    logger.info(f"Log file: {log_file}")
    return log_file
