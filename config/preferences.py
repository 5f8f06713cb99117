"""
Persisted client preferences.

A small JSON key/value file holding cached memory search results
(`memory-<messageId>`) and feature toggles (`memory-enabled`,
`web-search-enabled`). Toggles are stored as the strings "true"/"false" so
the file stays readable by the browser client that shares the format.
"""

import json
import logging
from pathlib import Path
from typing import Any

from .defaults import CONFIG_DIR_NAME, PREFERENCES_FILENAME

logger = logging.getLogger(__name__)

MEMORY_KEY_PREFIX = "memory-"
MEMORY_ENABLED_KEY = "memory-enabled"
WEB_SEARCH_ENABLED_KEY = "web-search-enabled"


def memory_cache_key(message_id: str) -> str:
    return f"{MEMORY_KEY_PREFIX}{message_id}"


def default_preferences_path() -> Path:
    return Path.home() / CONFIG_DIR_NAME / PREFERENCES_FILENAME


class PreferenceStore:
    """
    String key/value store backed by a JSON file.

    With no path the store lives in memory only. Every write is flushed to
    disk immediately.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, str] = {}
        if path is not None:
            self._data = self._read(path)

    @staticmethod
    def _read(path: Path) -> dict[str, str]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to load preferences from %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: not an object", path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2))

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()

    def keys(self) -> list[str]:
        return list(self._data)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._data.get(key)
        if value is None:
            return default
        return value == "true"

    def set_bool(self, key: str, value: bool) -> None:
        self.set(key, "true" if value else "false")

    def get_json(self, key: str) -> Any:
        """Decode a JSON value, or None if missing or unreadable."""
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable preference %s", key)
            return None

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value))
