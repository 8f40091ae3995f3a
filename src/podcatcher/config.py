"""
Loading of the user config file stored in the podcast root.
"""

import logging
from typing import Any

import yaml

from .errors import ConfigError
from .models import Config
from .storage import Storage

CONFIG_FILE = ".config"
DEFAULT_CONFIG_TEXT = "auto_download_limit: 1"


def _int_value(doc: dict[str, Any], key: str, default: int) -> int:
    """Return doc[key] if it is an integer, otherwise the default."""
    value = doc.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


class ConfigStore:
    """Reads the download/delete limits from ``<root>/.config``."""

    def __init__(self, storage: Storage):
        """Initialize with storage instance."""
        self.storage = storage
        self.logger = logging.getLogger(__name__)

    @property
    def path(self) -> str:
        """Location of the config file."""
        return self.storage.root_path(CONFIG_FILE)

    def load(self) -> Config:
        """Load the config, creating a default file if none exists.

        Missing or malformed keys fall back to the built-in defaults.
        Raises ConfigError only if the file exists but cannot be read.
        """
        defaults = Config()
        path = self.path

        try:
            text = self.storage.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Could not read {path}: {e}") from e

        if text is None:
            self.logger.info("Creating default config at %s", path)
            self.storage.write_text(path, DEFAULT_CONFIG_TEXT)
            return defaults

        try:
            doc = yaml.safe_load(text)
        except yaml.YAMLError as e:
            self.logger.warning("Ignoring malformed config %s: %s", path, e)
            return defaults

        if not isinstance(doc, dict):
            return defaults

        return Config(
            auto_download_limit=_int_value(
                doc, "auto_download_limit", defaults.auto_download_limit
            ),
            auto_delete_limit=_int_value(
                doc, "auto_delete_limit", defaults.auto_delete_limit
            ),
        )
