"""Addressable location (URL-like query parameters) abstraction."""

from __future__ import annotations

from typing import Mapping, Optional, Protocol

from cbxdrive.gui.viewmodels.signal import Signal


class Location(Protocol):
    """The application's address bar.

    ``changed`` emits a parameter snapshot whenever the location changes,
    including changes made through :meth:`replace`.
    """

    changed: Signal

    def params(self) -> dict[str, str]:
        ...

    def replace(self, params: Mapping[str, str]) -> None:
        ...


class MemoryLocation:
    """In-process location that records every programmatic write."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._params: dict[str, str] = dict(initial or {})
        self.changed = Signal()
        self.writes: list[dict[str, str]] = []

    def params(self) -> dict[str, str]:
        return dict(self._params)

    def replace(self, params: Mapping[str, str]) -> None:
        self._params = dict(params)
        self.writes.append(dict(params))
        self.changed.emit(self.params())

    def navigate(self, params: Mapping[str, str]) -> None:
        """Simulate a navigation the application did not initiate (back button, link)."""

        self._params = dict(params)
        self.changed.emit(self.params())

    def query_string(self) -> str:
        return "&".join(f"{key}={value}" for key, value in sorted(self._params.items()))


__all__ = ["Location", "MemoryLocation"]
