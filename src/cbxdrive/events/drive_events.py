"""Events published by the drive session after every mutation."""

from dataclasses import dataclass, field
from typing import Optional

from .bus import Event


@dataclass(kw_only=True)
class FolderCreatedEvent(Event):
    folder_id: str
    parent_id: Optional[str] = None
    name: str = ""


@dataclass(kw_only=True)
class FolderRenamedEvent(Event):
    folder_id: str
    name: str


@dataclass(kw_only=True)
class FolderDeletedEvent(Event):
    folder_id: str
    removed_ids: tuple[str, ...] = ()


@dataclass(kw_only=True)
class SmartFolderChangedEvent(Event):
    definition_id: str
    action: str = "updated"


@dataclass(kw_only=True)
class AssetsMovedEvent(Event):
    asset_ids: tuple[int, ...] = ()
    target_folder_id: str = ""


@dataclass(kw_only=True)
class AssetsTrashedEvent(Event):
    asset_ids: tuple[int, ...] = ()


@dataclass(kw_only=True)
class AssetsRestoredEvent(Event):
    asset_ids: tuple[int, ...] = ()
    target_folder_id: str = ""


@dataclass(kw_only=True)
class FavoritesToggledEvent(Event):
    added: tuple[int, ...] = ()
    removed: tuple[int, ...] = ()


@dataclass(kw_only=True)
class FolderCoverChangedEvent(Event):
    folder_id: str
    asset_id: int


@dataclass(kw_only=True)
class SelectionChangedEvent(Event):
    selected_ids: frozenset[int] = field(default_factory=frozenset)


@dataclass(kw_only=True)
class ViewChangedEvent(Event):
    view_id: str
    previous_view_id: Optional[str] = None
