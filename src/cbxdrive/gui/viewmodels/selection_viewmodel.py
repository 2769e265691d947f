"""Multi-select state and the bulk operations that act on it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Protocol, Sequence

from cbxdrive.application.use_cases.base import BulkOperationResult
from cbxdrive.config import TRASH_VIEW_ID
from cbxdrive.domain.models import TRASH_VIEW, ViewRef
from cbxdrive.errors import CbxDriveError, InvalidSourceError, InvalidTargetError
from cbxdrive.errors.handler import ErrorHandler, ErrorSeverity
from cbxdrive.events import (
    AssetsMovedEvent,
    AssetsRestoredEvent,
    AssetsTrashedEvent,
    EventBus,
    FavoritesToggledEvent,
    SelectionChangedEvent,
)
from cbxdrive.library.placements import FavoriteSet, PlacementStore
from cbxdrive.utils.logging import get_logger

from .base import BaseViewModel
from .signal import ObservableProperty

LOGGER = get_logger(__name__)

PREVIEW_LIMIT = 3


class SelectionState(str, Enum):
    EMPTY = "empty"
    SELECTING = "selecting"


@dataclass(frozen=True)
class DropAssets:
    """One drop gesture: the dragged ids and the folder they landed on."""

    ids: tuple[int, ...]
    target_folder_id: str


class DriveContext(Protocol):
    """What the bulk operations need from the running session."""

    @property
    def placements(self) -> PlacementStore:
        ...

    @property
    def favorites(self) -> FavoriteSet:
        ...

    @property
    def current_view(self) -> ViewRef:
        ...

    def is_real_folder(self, folder_id: str) -> bool:
        ...

    def placement_of(self, asset_id: int) -> Optional[str]:
        ...

    def invalidate(self) -> None:
        ...


class SelectionViewModel(BaseViewModel):
    """Track the selected asset ids and run move, favorite, delete and restore.

    Acting on an asset while a selection exists targets the whole selection
    when the asset is a member of it and the asset alone otherwise.  Every
    failure is routed through the :class:`ErrorHandler` and reported as a
    rejected :class:`BulkOperationResult`; nothing is raised to the caller.
    """

    def __init__(
        self,
        context: DriveContext,
        event_bus: EventBus,
        error_handler: ErrorHandler,
    ) -> None:
        super().__init__(event_bus)
        self._context = context
        self._errors = error_handler
        self.selected = ObservableProperty[tuple[int, ...]](())
        self.selected.changed.connect(self._on_selection_changed)

    # ------------------------------------------------------------------
    # Selection state
    # ------------------------------------------------------------------
    @property
    def state(self) -> SelectionState:
        return SelectionState.SELECTING if self.selected.value else SelectionState.EMPTY

    @property
    def selected_ids(self) -> frozenset[int]:
        return frozenset(self.selected.value)

    @property
    def count(self) -> int:
        return len(self.selected.value)

    def is_selected(self, asset_id: int) -> bool:
        return asset_id in self.selected.value

    def toggle(self, asset_id: int) -> None:
        current = self.selected.value
        if asset_id in current:
            self.selected.value = tuple(i for i in current if i != asset_id)
        else:
            self.selected.value = current + (asset_id,)

    def select_all(self, asset_ids: Iterable[int]) -> None:
        self.selected.value = tuple(dict.fromkeys(asset_ids))

    def clear(self) -> None:
        self.selected.value = ()

    def escape(self) -> None:
        self.clear()

    def targets_for(self, asset_id: int) -> tuple[int, ...]:
        """Ids an action on *asset_id* applies to."""

        current = self.selected.value
        if current and asset_id in current:
            return current
        return (asset_id,)

    def preview_sources(self, source_of: Callable[[int], Optional[str]]) -> list[str]:
        """Source uris of the first selected assets, for the selection bar."""

        sources: list[str] = []
        for asset_id in self.selected.value:
            src = source_of(asset_id)
            if src:
                sources.append(src)
            if len(sources) == PREVIEW_LIMIT:
                break
        return sources

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------
    def dispatch_drop(self, drop: DropAssets) -> BulkOperationResult:
        """Handle a drop from any surface with one rule set.

        Each dragged id expands through :meth:`targets_for`.  Dropping on the
        trash soft-deletes, dropping while the trash is open restores, and
        anything else is a move.
        """

        ids: list[int] = []
        for asset_id in drop.ids:
            ids.extend(self.targets_for(asset_id))
        ids = list(dict.fromkeys(ids))

        if drop.target_folder_id == TRASH_VIEW_ID:
            return self.soft_delete(ids)
        if self._context.current_view == TRASH_VIEW:
            return self.restore(ids, drop.target_folder_id)
        return self.move(ids, drop.target_folder_id)

    def move_item(self, asset_id: int, target_folder_id: str) -> BulkOperationResult:
        return self.move(self.targets_for(asset_id), target_folder_id)

    def move(self, asset_ids: Sequence[int], target_folder_id: str) -> BulkOperationResult:
        ids = tuple(dict.fromkeys(asset_ids))
        if not ids:
            return BulkOperationResult.noop()
        try:
            self._require_real_folder(target_folder_id)
        except CbxDriveError as exc:
            return self._reject(exc, "move", ids, target_folder_id)

        written = tuple(self._context.placements.assign(ids, target_folder_id))
        self._context.invalidate()
        self._event_bus.publish(
            AssetsMovedEvent(asset_ids=written, target_folder_id=target_folder_id)
        )
        cleared = self._clear_if_selected(written)
        LOGGER.info("Moved %d asset(s) to %s", len(written), target_folder_id)
        return BulkOperationResult(affected_ids=written, selection_cleared=cleared)

    def toggle_favorite(self, asset_ids: Sequence[int]) -> BulkOperationResult:
        ids = tuple(dict.fromkeys(asset_ids))
        if not ids:
            return BulkOperationResult.noop()
        added, removed = self._context.favorites.toggle(ids)
        self._context.invalidate()
        self._event_bus.publish(FavoritesToggledEvent(added=added, removed=removed))
        return BulkOperationResult(affected_ids=ids)

    def soft_delete(self, asset_ids: Sequence[int]) -> BulkOperationResult:
        ids = tuple(dict.fromkeys(asset_ids))
        if not ids:
            return BulkOperationResult.noop()
        if self._context.current_view == TRASH_VIEW:
            self.clear()
            return BulkOperationResult.noop(selection_cleared=True)

        written = tuple(self._context.placements.assign(ids, TRASH_VIEW_ID))
        self._context.invalidate()
        self._event_bus.publish(AssetsTrashedEvent(asset_ids=written))
        self.clear()
        LOGGER.info("Moved %d asset(s) to the trash", len(written))
        return BulkOperationResult(affected_ids=written, selection_cleared=True)

    def restore(self, asset_ids: Sequence[int], target_folder_id: str) -> BulkOperationResult:
        ids = tuple(dict.fromkeys(asset_ids))
        if not ids:
            return BulkOperationResult.noop()
        try:
            if self._context.current_view != TRASH_VIEW:
                raise InvalidSourceError("Assets can only be restored from the trash")
            self._require_real_folder(target_folder_id)
        except CbxDriveError as exc:
            return self._reject(exc, "restore", ids, target_folder_id)

        trashed = [i for i in ids if self._context.placement_of(i) == TRASH_VIEW_ID]
        skipped = len(ids) - len(trashed)
        if skipped:
            LOGGER.debug("Skipping %d asset(s) that are not in the trash", skipped)
        if not trashed:
            return BulkOperationResult.noop()

        written = tuple(self._context.placements.assign(trashed, target_folder_id))
        self._context.invalidate()
        self._event_bus.publish(
            AssetsRestoredEvent(asset_ids=written, target_folder_id=target_folder_id)
        )
        cleared = self._clear_if_selected(written)
        return BulkOperationResult(affected_ids=written, selection_cleared=cleared)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _require_real_folder(self, folder_id: str) -> None:
        if not self._context.is_real_folder(folder_id):
            raise InvalidTargetError(f"Not a real folder: {folder_id!r}")

    def _reject(
        self, exc: CbxDriveError, operation: str, ids: tuple[int, ...], target: str
    ) -> BulkOperationResult:
        self._errors.handle(
            exc,
            severity=ErrorSeverity.WARNING,
            context={"operation": operation, "asset_ids": ids, "target": target},
        )
        return BulkOperationResult.rejected(str(exc))

    def _clear_if_selected(self, ids: Iterable[int]) -> bool:
        current = self.selected.value
        if current and any(asset_id in current for asset_id in ids):
            self.clear()
            return True
        return False

    def _on_selection_changed(self, new_value: tuple[int, ...], _old: tuple[int, ...]) -> None:
        self._event_bus.publish(SelectionChangedEvent(selected_ids=frozenset(new_value)))


__all__ = ["DriveContext", "DropAssets", "SelectionState", "SelectionViewModel"]
