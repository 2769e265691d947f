"""Application-wide context: wires the store, event bus and drive session."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from .errors.handler import ErrorHandler
from .events import EventBus
from .settings import JsonFileStore, KeyValueStore, MemoryStore, PersistedState
from .utils.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .app import DriveSession
    from .gui.services.location import Location
    from .gui.services.location_sync import DebounceTimer
    from .library.catalog import AssetCatalog


def _create_catalog() -> "AssetCatalog":
    from .library.demo_catalog import demo_catalog

    return demo_catalog()


def _create_qt_timer() -> "DebounceTimer":
    # PySide6 is only needed when a live location is synchronised.
    from .gui.services.qt_timer import QtDebounceTimer

    return QtDebounceTimer()


@dataclass
class AppContext:
    """Container object shared by the front ends."""

    store: KeyValueStore = field(default_factory=MemoryStore)
    catalog: "AssetCatalog" = field(default_factory=_create_catalog)
    event_bus: EventBus = field(default_factory=EventBus)
    error_handler: Optional[ErrorHandler] = None

    def __post_init__(self) -> None:
        if self.error_handler is None:
            self.error_handler = ErrorHandler(get_logger("errors"), self.event_bus)
        self.state = PersistedState(self.store)

    def create_session(
        self,
        *,
        location: Optional["Location"] = None,
        timer: Optional["DebounceTimer"] = None,
    ) -> "DriveSession":
        from .app import DriveSession

        if location is not None and timer is None:
            timer = _create_qt_timer()
        return DriveSession(
            self.state,
            self.catalog,
            event_bus=self.event_bus,
            error_handler=self.error_handler,
            location=location,
            timer=timer,
        )


def create_session(
    store_path: Optional[Path] = None,
    *,
    store: Optional[KeyValueStore] = None,
    catalog: Optional["AssetCatalog"] = None,
    location: Optional["Location"] = None,
    timer: Optional["DebounceTimer"] = None,
) -> "DriveSession":
    """Build a session over *store* or a JSON store at *store_path*."""

    if store is None:
        store = JsonFileStore(store_path)
    context = AppContext(store=store, catalog=catalog or _create_catalog())
    return context.create_session(location=location, timer=timer)


__all__ = ["AppContext", "create_session"]
