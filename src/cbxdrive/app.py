"""Drive session: owns the drive state and keeps its derived views current."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from .application.services.breadcrumbs import Breadcrumb, resolve_breadcrumb
from .application.services.search_pipeline import SearchPipeline, empty_state
from .application.services.view_resolver import ResolvedViews, ViewResolver, resolve_views
from .application.use_cases.base import FolderOperationResult
from .config import (
    ALL_VIEW_ID,
    COMPACT_THUMB_SIZE,
    DESKTOP_MIN_WIDTH_PX,
)
from .domain.models import (
    Asset,
    AssetFilters,
    EmptyState,
    PhysicalView,
    Rule,
    SearchRequest,
    SmartFolderDefinition,
    SmartView,
    SortKey,
    SubfolderItem,
    SystemViewRef,
    ViewRef,
    parse_view_id,
)
from .errors import CbxDriveError, LocationSyncError
from .errors.handler import ErrorHandler, ErrorSeverity
from .events import (
    EventBus,
    FolderCoverChangedEvent,
    FolderCreatedEvent,
    FolderDeletedEvent,
    FolderRenamedEvent,
    SmartFolderChangedEvent,
    ViewChangedEvent,
)
from .gui.services.location import Location
from .gui.services.location_sync import DebounceTimer, LocationSyncController
from .gui.viewmodels.selection_viewmodel import SelectionViewModel
from .library.catalog import (
    AssetCatalog,
    AssetMetadataProvider,
    StoredMetadataProvider,
    asset_to_record,
    merge_catalog,
    normalize_imported,
)
from .library.folder_tree import FolderTree, TreeIndex, build_tree_index
from .library.placements import FavoriteSet, FolderCoverMap, PlacementStore, StarredFolders
from .library.smart_folders import SmartFolderEngine
from .settings import PersistedState
from .utils.logging import get_logger

LOGGER = get_logger(__name__)


class ViewPreferences:
    """Display preferences that only affect rendering density and layout."""

    def __init__(self, state: PersistedState) -> None:
        self._state = state

    @property
    def view_mode(self) -> str:
        return self._state.view_mode()

    @view_mode.setter
    def view_mode(self, mode: str) -> None:
        self._state.set_view_mode(mode)

    @property
    def thumb_size(self) -> int:
        return self._state.thumb_size()

    @thumb_size.setter
    def thumb_size(self, size: int) -> None:
        self._state.set_thumb_size(size)

    def effective_thumb_size(self, viewport_width: int) -> int:
        """Narrow viewports always get compact thumbnails."""

        if viewport_width < DESKTOP_MIN_WIDTH_PX:
            return COMPACT_THUMB_SIZE
        return self.thumb_size

    @property
    def sidebar_width(self) -> int:
        return self._state.sidebar_width()

    @sidebar_width.setter
    def sidebar_width(self, width: int) -> None:
        self._state.set_sidebar_width(width)

    @property
    def sidebar_collapsed(self) -> bool:
        return self._state.sidebar_collapsed()

    @sidebar_collapsed.setter
    def sidebar_collapsed(self, collapsed: bool) -> None:
        self._state.set_sidebar_collapsed(collapsed)

    def sidebar_sections(self) -> dict[str, bool]:
        return self._state.sidebar_sections()

    def toggle_section(self, name: str) -> bool:
        sections = self._state.sidebar_sections()
        if name not in sections:
            raise KeyError(name)
        sections[name] = not sections[name]
        self._state.set_sidebar_sections(sections)
        return sections[name]

    def is_folder_open(self, folder_id: str) -> bool:
        return self._state.folder_open_state().get(folder_id, False)

    def toggle_folder_open(self, folder_id: str) -> bool:
        state = self._state.folder_open_state()
        state[folder_id] = not state.get(folder_id, False)
        self._state.set_folder_open_state(state)
        return state[folder_id]

    def forget_folders(self, folder_ids: Iterable[str]) -> None:
        state = self._state.folder_open_state()
        remaining = {k: v for k, v in state.items() if k not in set(folder_ids)}
        if len(remaining) != len(state):
            self._state.set_folder_open_state(remaining)


class DriveSession:
    """Single-user drive state for one window.

    The session owns the folder tree, placements, favorites, covers and smart
    folders, rebuilds the tree index after every structural edit and
    recomputes the resolved views lazily after any mutation.  When a
    :class:`Location` is supplied, the query and selected view are kept in
    step with it.
    """

    def __init__(
        self,
        state: PersistedState,
        catalog: AssetCatalog,
        *,
        event_bus: EventBus,
        error_handler: ErrorHandler,
        metadata: Optional[AssetMetadataProvider] = None,
        location: Optional[Location] = None,
        timer: Optional[DebounceTimer] = None,
    ) -> None:
        self._state = state
        self._catalog = catalog
        self._events = event_bus
        self._errors = error_handler
        self._metadata = metadata or StoredMetadataProvider(state)

        self._tree = FolderTree.from_payload(state.folder_tree())
        self._index: TreeIndex = build_tree_index(self._tree.roots)
        self._placements = PlacementStore(state)
        self._favorites = FavoriteSet(state)
        self._covers = FolderCoverMap(state)
        self._starred = StarredFolders(state)
        self._smart_folders = SmartFolderEngine(state, self._metadata)
        self._resolver = ViewResolver(self._smart_folders, self._covers)
        self._search = SearchPipeline(self._favorites, self._metadata)
        self.preferences = ViewPreferences(state)

        self._assets: list[Asset] = self._merge_assets()
        self._resolved: Optional[ResolvedViews] = None
        self._filters: AssetFilters = state.filters()
        self._sort: SortKey = state.sort()
        self._query = ""
        self._view_id = self.normalize_view_id(state.selected_folder())

        self.selection = SelectionViewModel(self, event_bus, error_handler)

        self._sync: Optional[LocationSyncController] = None
        if location is not None:
            if timer is None:
                raise ValueError("A debounce timer is required when a location is given")
            self._sync = LocationSyncController(
                location, timer, normalize_view=self.normalize_view_id
            )
            self._sync.start(state.selected_folder())
            self._view_id = self._sync.view_id.value
            self._query = self._sync.query.value
            self._sync.view_id.changed.connect(self._on_location_view_changed)
            self._sync.query.changed.connect(self._on_location_query_changed)

    # ------------------------------------------------------------------
    # Collaborators used by the selection viewmodel
    # ------------------------------------------------------------------
    @property
    def placements(self) -> PlacementStore:
        return self._placements

    @property
    def favorites(self) -> FavoriteSet:
        return self._favorites

    @property
    def current_view(self) -> ViewRef:
        return parse_view_id(self._view_id)

    def is_real_folder(self, folder_id: str) -> bool:
        return folder_id in self._index

    def placement_of(self, asset_id: int) -> Optional[str]:
        return self.resolved.placement_of(asset_id)

    def invalidate(self) -> None:
        self._resolved = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def state(self) -> PersistedState:
        return self._state

    @property
    def tree(self) -> FolderTree:
        return self._tree

    @property
    def index(self) -> TreeIndex:
        return self._index

    @property
    def smart_folders(self) -> SmartFolderEngine:
        return self._smart_folders

    @property
    def covers(self) -> FolderCoverMap:
        return self._covers

    @property
    def starred(self) -> StarredFolders:
        return self._starred

    @property
    def assets(self) -> Sequence[Asset]:
        return tuple(self._assets)

    @property
    def resolved(self) -> ResolvedViews:
        if self._resolved is None:
            self._resolved = resolve_views(
                self._assets, self._placements.overrides, self._favorites, self._index
            )
        return self._resolved

    @property
    def view_id(self) -> str:
        return self._view_id

    @property
    def query(self) -> str:
        return self._query

    @property
    def filters(self) -> AssetFilters:
        return self._filters

    @property
    def sort(self) -> SortKey:
        return self._sort

    @property
    def search_request(self) -> SearchRequest:
        return SearchRequest(query=self._query, filters=self._filters, sort=self._sort)

    def asset(self, asset_id: int) -> Optional[Asset]:
        return self.resolved.assets_by_id.get(asset_id)

    def view_items(self, view: Optional[ViewRef] = None) -> list[Asset]:
        """Members of *view* (default: the current view) before searching."""

        return self._resolver.items_for(view or self.current_view, self.resolved)

    def visible_items(
        self, request: Optional[SearchRequest] = None, view: Optional[ViewRef] = None
    ) -> list[Asset]:
        """A view (default: the current one) after query, facets and sort.

        *request* overrides the session's own query, filters and sort without
        storing them.
        """

        return self._search.run(self.view_items(view), request or self.search_request)

    def count(self, view_id: str) -> int:
        return self._resolver.count_for(parse_view_id(view_id), self.resolved)

    def empty_state(
        self, request: Optional[SearchRequest] = None, view: Optional[ViewRef] = None
    ) -> EmptyState:
        request = request or self.search_request
        view = view or self.current_view
        return empty_state(len(self.visible_items(request, view)), request, view)

    def breadcrumb(self, view: Optional[ViewRef] = None) -> Breadcrumb:
        return resolve_breadcrumb(view or self.current_view, self._index, self._smart_folder_name)

    def subfolders(self, folder_id: Optional[str] = None) -> list[SubfolderItem]:
        target = folder_id or self._view_id
        return self._resolver.subfolders(target, self._index, self.resolved)

    def label_for(self, view_id: str) -> str:
        view = parse_view_id(view_id)
        match view:
            case SystemViewRef(view=system_view):
                return system_view.label
            case SmartView(definition_id=definition_id):
                return self._smart_folder_name(definition_id) or definition_id
            case PhysicalView(folder_id=folder_id):
                node = self._index.node(folder_id)
                return node.name if node is not None else folder_id

    def normalize_view_id(self, raw: Optional[str]) -> str:
        """Map a stored or external view id to one that exists, else ``all``."""

        view = parse_view_id(raw)
        match view:
            case SystemViewRef():
                return view.view_id
            case SmartView(definition_id=definition_id):
                if self._smart_folders.get(definition_id) is not None:
                    return definition_id
            case PhysicalView(folder_id=folder_id):
                if folder_id in self._index:
                    return folder_id
        return ALL_VIEW_ID

    # ------------------------------------------------------------------
    # Navigation and search
    # ------------------------------------------------------------------
    def navigate(self, view_id: str) -> str:
        """Select a view, clearing the query and the selection."""

        target = self.normalize_view_id(view_id)
        if self._sync is not None:
            try:
                self._sync.navigate_to_folder(target)
            except LocationSyncError as exc:
                self._errors.handle(exc, severity=ErrorSeverity.WARNING, context={"view": target})
        self._query = ""
        self._apply_view(target)
        self.selection.clear()
        return target

    def set_query(self, text: str) -> None:
        if self._sync is not None:
            self._sync.on_query_edited(text)
        else:
            self._query = text

    def set_filters(self, filters: AssetFilters) -> None:
        self._filters = filters
        self._state.set_filters(filters)

    def clear_filters(self) -> None:
        self.set_filters(AssetFilters())

    def remove_filter_chip(self, key: str) -> None:
        self.set_filters(self._filters.remove_chip(key))

    def set_sort(self, sort: SortKey) -> None:
        self._sort = SortKey(sort)
        self._state.set_sort(self._sort)

    def dispose(self) -> None:
        self.selection.dispose()
        if self._sync is not None:
            self._sync.dispose()
            self._sync = None

    # ------------------------------------------------------------------
    # Folder tree
    # ------------------------------------------------------------------
    def create_folder(self, name: str, parent_id: Optional[str] = None) -> FolderOperationResult:
        try:
            folder_id = self._tree.create_child(parent_id, name)
        except CbxDriveError as exc:
            return self._reject(exc, "create_folder", parent_id)
        self._tree_changed()
        node = self._index.node(folder_id)
        self._events.publish(
            FolderCreatedEvent(folder_id=folder_id, parent_id=parent_id, name=node.name)
        )
        LOGGER.info("Created folder %s under %s", folder_id, parent_id or "root")
        return FolderOperationResult(folder_id=folder_id)

    def rename_folder(self, folder_id: str, name: str) -> FolderOperationResult:
        try:
            self._tree.rename(folder_id, name)
        except CbxDriveError as exc:
            return self._reject(exc, "rename_folder", folder_id)
        self._tree_changed()
        self._events.publish(
            FolderRenamedEvent(folder_id=folder_id, name=self._index.node(folder_id).name)
        )
        return FolderOperationResult(folder_id=folder_id)

    def delete_folder(self, folder_id: str) -> FolderOperationResult:
        """Remove a folder subtree.

        Placement overrides that point into the subtree are kept and resolve
        to ``all`` from now on.  Covers, starred entries and open-state for the
        removed ids are dropped.
        """

        try:
            removed = self._tree.delete(folder_id)
        except CbxDriveError as exc:
            return self._reject(exc, "delete_folder", folder_id)
        self._tree_changed()
        self._covers.drop_folders(removed)
        self._starred.drop_folders(removed)
        self.preferences.forget_folders(removed)
        self._events.publish(FolderDeletedEvent(folder_id=folder_id, removed_ids=removed))
        if self._view_id in removed:
            self.navigate(ALL_VIEW_ID)
        LOGGER.info("Deleted folder %s (%d node(s))", folder_id, len(removed))
        return FolderOperationResult(folder_id=folder_id, removed_ids=removed)

    def set_folder_cover(self, folder_id: str, asset_id: int) -> bool:
        if folder_id not in self._index or self.asset(asset_id) is None:
            LOGGER.debug("Ignoring cover %s for %s", asset_id, folder_id)
            return False
        self._covers.set(folder_id, asset_id)
        self._events.publish(FolderCoverChangedEvent(folder_id=folder_id, asset_id=asset_id))
        return True

    def toggle_starred(self, folder_id: str) -> bool:
        if folder_id not in self._index:
            return False
        return self._starred.toggle(folder_id)

    # ------------------------------------------------------------------
    # Smart folders
    # ------------------------------------------------------------------
    def create_smart_folder(self, name: str, rules: Sequence[Rule]) -> FolderOperationResult:
        try:
            definition = self._smart_folders.create(name, rules)
        except CbxDriveError as exc:
            return self._reject(exc, "create_smart_folder", None)
        self._smart_changed(definition, "created")
        return FolderOperationResult(folder_id=definition.id)

    def rename_smart_folder(self, definition_id: str, name: str) -> FolderOperationResult:
        try:
            definition = self._smart_folders.rename(definition_id, name)
        except CbxDriveError as exc:
            return self._reject(exc, "rename_smart_folder", definition_id)
        self._smart_changed(definition, "renamed")
        return FolderOperationResult(folder_id=definition.id)

    def duplicate_smart_folder(self, definition_id: str) -> FolderOperationResult:
        try:
            definition = self._smart_folders.duplicate(definition_id)
        except CbxDriveError as exc:
            return self._reject(exc, "duplicate_smart_folder", definition_id)
        self._smart_changed(definition, "duplicated")
        return FolderOperationResult(folder_id=definition.id)

    def delete_smart_folder(self, definition_id: str) -> FolderOperationResult:
        try:
            self._smart_folders.delete(definition_id)
        except CbxDriveError as exc:
            return self._reject(exc, "delete_smart_folder", definition_id)
        self._events.publish(SmartFolderChangedEvent(definition_id=definition_id, action="deleted"))
        if self._view_id == definition_id:
            self.navigate(ALL_VIEW_ID)
        return FolderOperationResult(folder_id=definition_id, removed_ids=(definition_id,))

    # ------------------------------------------------------------------
    # Imported assets
    # ------------------------------------------------------------------
    def add_imported_assets(self, records: Iterable[dict[str, Any]]) -> list[Asset]:
        """Append purchased or imported records and merge them into the catalog."""

        stored = list(self._state.imported_assets())
        known = {asset.src for asset in normalize_imported(stored)}
        incoming = [r for r in records if isinstance(r, dict) and r.get("src") not in known]
        combined = normalize_imported(stored + incoming)
        fresh = [asset for asset in combined if asset.src not in known]
        if fresh:
            self._state.set_imported_assets([asset_to_record(asset) for asset in combined])
            self._assets = self._merge_assets()
            self.invalidate()
            LOGGER.info("Imported %d asset(s)", len(fresh))
        return fresh

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _merge_assets(self) -> list[Asset]:
        imported = normalize_imported(self._state.imported_assets())
        return merge_catalog(imported, self._catalog.assets())

    def _tree_changed(self) -> None:
        self._index = build_tree_index(self._tree.roots)
        self._state.set_folder_tree(self._tree.to_payload())
        self.invalidate()

    def _smart_changed(self, definition: SmartFolderDefinition, action: str) -> None:
        self._events.publish(SmartFolderChangedEvent(definition_id=definition.id, action=action))

    def _smart_folder_name(self, definition_id: str) -> Optional[str]:
        definition = self._smart_folders.get(definition_id)
        return definition.name if definition is not None else None

    def _apply_view(self, view_id: str) -> None:
        if view_id == self._view_id:
            return
        previous, self._view_id = self._view_id, view_id
        self._state.set_selected_folder(view_id)
        self.selection.clear()
        self._events.publish(ViewChangedEvent(view_id=view_id, previous_view_id=previous))

    def _on_location_view_changed(self, view_id: str, _previous: str) -> None:
        self._apply_view(view_id)

    def _on_location_query_changed(self, query: str, _previous: str) -> None:
        self._query = query

    def _reject(
        self, exc: CbxDriveError, operation: str, target: Optional[str]
    ) -> FolderOperationResult:
        self._errors.handle(
            exc, severity=ErrorSeverity.WARNING, context={"operation": operation, "target": target}
        )
        return FolderOperationResult.rejected(str(exc))


__all__ = ["DriveSession", "ViewPreferences"]
