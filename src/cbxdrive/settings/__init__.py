"""Persistent store and validated drive slices."""

from .manager import PersistedState
from .store import JsonFileStore, KeyValueStore, MemoryStore, default_store_path

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PersistedState",
    "default_store_path",
]
