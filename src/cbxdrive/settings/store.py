"""String-valued key-value stores backing every persisted drive slice."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator, Optional, Protocol

from ..config import APP_DIR_NAME, STORE_FILE_NAME
from ..errors import StoreError
from ..utils.jsonio import read_json, write_json
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


def default_store_path() -> Path:
    """Return the default store location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / APP_DIR_NAME / STORE_FILE_NAME
        return Path.home() / "AppData" / "Roaming" / APP_DIR_NAME / STORE_FILE_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME / STORE_FILE_NAME
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_DIR_NAME / STORE_FILE_NAME
    return Path.home() / ".config" / APP_DIR_NAME / STORE_FILE_NAME


class KeyValueStore(Protocol):
    """Synchronous, string-valued store that survives restarts."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def keys(self) -> Iterator[str]:
        ...


class MemoryStore:
    """In-process store; used by tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


class JsonFileStore:
    """Store persisted as one JSON object on disk, written through on every change."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_store_path()
        self._data: dict[str, str] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._write()

    def remove_item(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            payload = read_json(self._path)
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable store %s: %s", self._path, exc)
            return
        if not isinstance(payload, dict):
            LOGGER.warning("Ignoring store %s: top-level value is not an object", self._path)
            return
        self._data = {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _write(self) -> None:
        try:
            write_json(self._path, self._data)
        except OSError as exc:
            raise StoreError(f"Could not write store {self._path}: {exc}") from exc


__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore", "default_store_path"]
