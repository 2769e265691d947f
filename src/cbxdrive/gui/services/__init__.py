"""Location services.  The Qt timer lives in :mod:`.qt_timer` so that importing
this package does not require PySide6."""

from .location import Location, MemoryLocation
from .location_sync import (
    AwaitingEcho,
    DebounceTimer,
    Idle,
    LocationSyncController,
    LocationValue,
    PendingWrite,
    read_location,
)

__all__ = [
    "AwaitingEcho",
    "DebounceTimer",
    "Idle",
    "Location",
    "LocationSyncController",
    "LocationValue",
    "MemoryLocation",
    "PendingWrite",
    "read_location",
]
