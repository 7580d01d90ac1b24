"""
ARP Sniffer - Settings Manager
Persists user settings to a JSON file in the user's config folder.

Handles:
  - Location of the IEEE OUI registry file (oui.txt)
  - Log level and log directory
"""

import json
import logging
import os
import platform
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "ARPSNIFFER_SETTINGS"


def _settings_dir() -> str:
    """Get the platform-appropriate settings directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
        return os.path.join(base, "ARP Sniffer")
    elif platform.system() == "Darwin":
        return os.path.expanduser("~/Library/Application Support/ARP Sniffer")
    else:
        return os.path.expanduser("~/.config/arpsniffer")


def _settings_path() -> str:
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return override
    return os.path.join(_settings_dir(), "settings.json")


# Default settings
_DEFAULTS: Dict[str, Any] = {
    "oui_file": os.path.join(_settings_dir(), "oui.txt"),
    "log_level": "INFO",               # Any logging level name
    "log_dir": os.path.join(os.path.expanduser("~"), ".arpsniffer"),
}


class SettingsManager:
    """Settings manager with JSON persistence."""

    def __init__(self, path: Optional[str] = None):
        self._data: Dict[str, Any] = dict(_DEFAULTS)
        self._path = path or _settings_path()
        self._load()

    @property
    def path(self) -> str:
        return self._path

    # ── Core I/O ──────────────────────────────────────────────────────────

    def _load(self):
        """Load settings from disk, falling back to defaults."""
        try:
            if os.path.exists(self._path):
                with open(self._path, "r", encoding="utf-8") as f:
                    stored = json.load(f)
                # Merge with defaults (so new keys get default values)
                for key, default in _DEFAULTS.items():
                    self._data[key] = stored.get(key, default)
                logger.info(f"Settings loaded from {self._path}")
            else:
                logger.info("No settings file found, using defaults")
        except Exception as e:
            logger.warning(f"Failed to load settings: {e}")

    def save(self):
        """Persist current settings to disk."""
        try:
            os.makedirs(os.path.dirname(self._path) or ".", exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            logger.info(f"Settings saved to {self._path}")
        except Exception as e:
            logger.warning(f"Failed to save settings: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value

    # ── Registry ──────────────────────────────────────────────────────────

    @property
    def oui_file(self) -> str:
        return self._data.get("oui_file", _DEFAULTS["oui_file"])

    @oui_file.setter
    def oui_file(self, value: str):
        self._data["oui_file"] = value

    # ── Logging ───────────────────────────────────────────────────────────

    @property
    def log_level(self) -> str:
        return str(self._data.get("log_level", "INFO")).upper()

    @log_level.setter
    def log_level(self, value: str):
        self._data["log_level"] = value

    @property
    def log_dir(self) -> str:
        return self._data.get("log_dir", _DEFAULTS["log_dir"])

    @log_dir.setter
    def log_dir(self, value: str):
        self._data["log_dir"] = value


# Module-level singleton
_instance: Optional[SettingsManager] = None


def get_settings() -> SettingsManager:
    """Get the global settings manager instance."""
    global _instance
    if _instance is None:
        _instance = SettingsManager()
    return _instance


def reset_settings():
    """Drop the cached instance so the next get_settings() re-reads the file."""
    global _instance
    _instance = None
