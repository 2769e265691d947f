from .bus import Event, EventBus, Subscription
from .drive_events import (
    AssetsMovedEvent,
    AssetsRestoredEvent,
    AssetsTrashedEvent,
    FavoritesToggledEvent,
    FolderCoverChangedEvent,
    FolderCreatedEvent,
    FolderDeletedEvent,
    FolderRenamedEvent,
    SelectionChangedEvent,
    SmartFolderChangedEvent,
    ViewChangedEvent,
)

__all__ = [
    "AssetsMovedEvent",
    "AssetsRestoredEvent",
    "AssetsTrashedEvent",
    "Event",
    "EventBus",
    "FavoritesToggledEvent",
    "FolderCoverChangedEvent",
    "FolderCreatedEvent",
    "FolderDeletedEvent",
    "FolderRenamedEvent",
    "SelectionChangedEvent",
    "SmartFolderChangedEvent",
    "Subscription",
    "ViewChangedEvent",
]
