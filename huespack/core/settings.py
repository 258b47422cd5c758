"""
User settings for huespack.

Settings live in ~/.huespack/settings.json (or the file named by the
HUESPACK_SETTINGS environment variable). Values in the file are merged over
the defaults category by category, so new settings pick up their defaults.
"""
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from huespack.core import constants

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "HUESPACK_SETTINGS"

DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    "pack": {
        "songs_dir": constants.SONGS_DIR,
        "images_dir": constants.IMAGES_DIR,
        "songs_file": constants.SONGS_FILE,
        "images_file": constants.IMAGES_FILE,
        "info_file": constants.INFO_FILE,
    },
    "media": {
        "audio_extensions": list(constants.AUDIO_EXTENSIONS),
        "image_extensions": list(constants.IMAGE_EXTENSIONS),
        "force_rgba": True,
    },
    "logging": {
        "level": "INFO",
    },
}


def default_settings_path() -> Path:
    """Settings file location, honoring HUESPACK_SETTINGS."""
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".huespack" / "settings.json"


class Settings:
    """Category/key settings store backed by a JSON file."""

    def __init__(self, values: Optional[Dict[str, Dict[str, Any]]] = None,
                 path: Optional[Path] = None):
        """
        Args:
            values: Settings by category; missing entries take defaults
            path: File the settings were loaded from (None = in-memory)
        """
        self._values = copy.deepcopy(DEFAULT_SETTINGS)
        for category, entries in (values or {}).items():
            if isinstance(entries, dict):
                self._values.setdefault(category, {}).update(entries)
        self.path = path

    @classmethod
    def defaults(cls) -> "Settings":
        """In-memory settings with every default, no file I/O."""
        return cls()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        """
        Load settings from a JSON file.

        A missing file is created with the defaults. An unreadable file is
        logged and the defaults are used.

        Args:
            path: Settings file (default: default_settings_path())

        Returns:
            Loaded settings
        """
        config_path = Path(path) if path else default_settings_path()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Failed to load settings from %s: %s", config_path, e)
                return cls(path=config_path)

            if not isinstance(loaded, dict):
                logger.warning("Ignoring settings file %s: top level must be an object", config_path)
                return cls(path=config_path)
            return cls(loaded, path=config_path)

        settings = cls(path=config_path)
        try:
            settings.save()
            logger.info("Created new settings file with defaults at %s", config_path)
        except OSError as e:
            logger.warning("Failed to save default settings: %s", e)
        return settings

    def save(self, path: Optional[Path] = None):
        """Write settings as JSON, creating parent directories."""
        config_path = Path(path) if path else self.path
        if config_path is None:
            raise ValueError("No settings path to save to")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2)
        self.path = config_path

    def get(self, category: str, key: str, default: Any = None) -> Any:
        return self._values.get(category, {}).get(key, default)

    def set(self, category: str, key: str, value: Any):
        self._values.setdefault(category, {})[key] = value

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        """Deep copy of all settings."""
        return copy.deepcopy(self._values)
