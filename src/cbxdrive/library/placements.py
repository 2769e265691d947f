"""Placement overrides, favorites, folder covers and starred folders.

Each collection is owned by one session and written through to the store on
every mutation.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..config import ALL_VIEW_ID
from ..domain.models import Asset
from ..settings import PersistedState
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


def effective_folder(asset: Asset, overrides: Mapping[int, str]) -> str:
    """Return the folder *asset* resolves to.

    Override first, then the asset's base folder, then ``all``.  Whether the
    result still exists in the folder tree is decided by the resolver.
    """

    override = overrides.get(asset.id)
    if override:
        return override
    return asset.folder_id or ALL_VIEW_ID


class PlacementStore:
    """Asset id to folder id overrides.  Entries are never pruned."""

    def __init__(self, state: PersistedState) -> None:
        self._state = state
        self._overrides: dict[int, str] = state.asset_folders()

    @property
    def overrides(self) -> Mapping[int, str]:
        return MappingProxyType(self._overrides)

    def override_for(self, asset_id: int) -> Optional[str]:
        return self._overrides.get(asset_id)

    def effective_folder(self, asset: Asset) -> str:
        return effective_folder(asset, self._overrides)

    def assign(self, asset_ids: Iterable[int], folder_id: str) -> list[int]:
        """Point every id at *folder_id* and persist once.  Returns the ids written."""

        written = []
        for asset_id in asset_ids:
            self._overrides[asset_id] = folder_id
            written.append(asset_id)
        if written:
            self._state.set_asset_folders(self._overrides)
            LOGGER.debug("Placed %d asset(s) in %s", len(written), folder_id)
        return written


class FavoriteSet:
    """Favorited asset ids, orthogonal to placement."""

    def __init__(self, state: PersistedState) -> None:
        self._state = state
        self._ids: set[int] = state.favorites()

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> frozenset[int]:
        return frozenset(self._ids)

    def toggle(self, asset_ids: Iterable[int]) -> tuple[tuple[int, ...], tuple[int, ...]]:
        """Flip every id independently and return ``(added, removed)``."""

        added: list[int] = []
        removed: list[int] = []
        for asset_id in dict.fromkeys(asset_ids):
            if asset_id in self._ids:
                self._ids.discard(asset_id)
                removed.append(asset_id)
            else:
                self._ids.add(asset_id)
                added.append(asset_id)
        if added or removed:
            self._state.set_favorites(self._ids)
        return tuple(added), tuple(removed)


class FolderCoverMap:
    """Representative asset per folder.  Presentational only."""

    def __init__(self, state: PersistedState) -> None:
        self._state = state
        self._covers: dict[str, int] = state.folder_covers()

    def get(self, folder_id: str) -> Optional[int]:
        return self._covers.get(folder_id)

    def as_dict(self) -> dict[str, int]:
        return dict(self._covers)

    def set(self, folder_id: str, asset_id: int) -> None:
        self._covers[folder_id] = asset_id
        self._state.set_folder_covers(self._covers)

    def clear(self, folder_id: str) -> None:
        if self._covers.pop(folder_id, None) is not None:
            self._state.set_folder_covers(self._covers)

    def drop_folders(self, folder_ids: Iterable[str]) -> None:
        changed = False
        for folder_id in folder_ids:
            changed |= self._covers.pop(folder_id, None) is not None
        if changed:
            self._state.set_folder_covers(self._covers)


class StarredFolders:
    """Folders pinned to the sidebar's starred section, in pin order."""

    def __init__(self, state: PersistedState) -> None:
        self._state = state
        self._ids: list[str] = state.starred_folders()

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self._ids

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._ids)

    def toggle(self, folder_id: str) -> bool:
        """Star or unstar *folder_id*; returns ``True`` when it is now starred."""

        if folder_id in self._ids:
            self._ids.remove(folder_id)
            starred = False
        else:
            self._ids.append(folder_id)
            starred = True
        self._state.set_starred_folders(self._ids)
        return starred

    def drop_folders(self, folder_ids: Iterable[str]) -> None:
        doomed = set(folder_ids)
        kept = [folder_id for folder_id in self._ids if folder_id not in doomed]
        if len(kept) != len(self._ids):
            self._ids = kept
            self._state.set_starred_folders(self._ids)


__all__ = [
    "FavoriteSet",
    "FolderCoverMap",
    "PlacementStore",
    "StarredFolders",
    "effective_folder",
]
