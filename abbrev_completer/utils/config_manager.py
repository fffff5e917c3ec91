# config_manager.py - JSON settings manager

import json
import os
from typing import Any, Dict, List, Tuple

DEFAULT_CONFIG_PATH = "abbrev_config.json"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Settings file unreadable, not a JSON object, or an option with a bad value."""


class Config:
    def __init__(self, path=DEFAULT_CONFIG_PATH):
        self.path = path
        self.data: Dict[str, Any] = {
            "keymap_path": "keymap.json",
            "trigger": "\\",  # starts an abbreviation
            "marker": ">>",  # keymap key listing the expansions
            "log_path": os.path.join("logs", "abbrev_completer.log"),
            "log_level": "INFO",
        }
        self._load()

    def _load(self):
        # no file means defaults; it's only written by save()
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"cannot load settings {self.path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"settings {self.path} must be a JSON object")
        for key, val in loaded.items():
            _check(key, val)
        self.data.update(loaded)

    def __getitem__(self, key):
        return self.data[key]

    def get(self, key, default=None):
        return self.data.get(key, default)

    def save(self):
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2, ensure_ascii=False)

    def show(self) -> List[Tuple[str, Any]]:
        return list(self.data.items())

    def set(self, key, val):
        if key not in self.data:
            raise ConfigError(f"No such option: {key}")
        val = type(self.data[key])(val)
        if key == "log_level":
            val = val.upper()
        _check(key, val)
        self.data[key] = val
        self.save()


def _check(key, val):
    """Reject values that would break the server later on."""
    if key in ("keymap_path", "log_path") and not isinstance(val, str):
        raise ConfigError(f"{key} must be a string, got {val!r}")
    if key == "trigger" and not (isinstance(val, str) and len(val) == 1):
        raise ConfigError(f"trigger must be a single character, got {val!r}")
    if key == "marker" and not (isinstance(val, str) and val):
        raise ConfigError(f"marker must be a non-empty string, got {val!r}")
    if key == "log_level" and not (isinstance(val, str) and val.upper() in LOG_LEVELS):
        raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {val!r}")
