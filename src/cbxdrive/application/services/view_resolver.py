"""Resolve the member list of every concrete view in one catalog pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Container, Iterable, Mapping, Optional, Sequence, assert_never

from ...config import ALL_VIEW_ID, PURCHASES_VIEW_ID, SYSTEM_VIEW_IDS, TRASH_VIEW_ID
from ...domain.models import (
    Asset,
    PhysicalView,
    SmartView,
    SubfolderItem,
    SystemView,
    SystemViewRef,
    ViewRef,
)
from ...library.folder_tree import TreeIndex
from ...library.placements import FolderCoverMap, effective_folder
from ...library.smart_folders import SmartFolderEngine
from ...utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ResolvedViews:
    """Members of every real folder and system view, in catalog order.

    ``placement`` records where each asset resolved to after dangling ids
    were folded into ``all``.
    """

    members: Mapping[str, tuple[Asset, ...]] = field(default_factory=dict)
    placement: Mapping[int, str] = field(default_factory=dict)
    assets_by_id: Mapping[int, Asset] = field(default_factory=dict)

    def members_of(self, view_id: str) -> tuple[Asset, ...]:
        return self.members.get(view_id, ())

    def count(self, view_id: str) -> int:
        return len(self.members.get(view_id, ()))

    @property
    def counts(self) -> dict[str, int]:
        return {view_id: len(items) for view_id, items in self.members.items()}

    def placement_of(self, asset_id: int) -> Optional[str]:
        return self.placement.get(asset_id)


def resolve_views(
    assets: Sequence[Asset],
    overrides: Mapping[int, str],
    favorites: Container[int],
    tree_index: TreeIndex,
) -> ResolvedViews:
    """Compute counts and members for all real folders and system views.

    An override or base folder naming a folder that is not in the tree
    resolves to ``all``.
    """

    buckets: dict[str, list[Asset]] = {view_id: [] for view_id in SYSTEM_VIEW_IDS}
    for folder_id in tree_index.nodes_by_id:
        buckets[folder_id] = []
    placement: dict[int, str] = {}
    dangling = 0

    for asset in assets:
        folder_id = effective_folder(asset, overrides)
        if folder_id not in SYSTEM_VIEW_IDS and folder_id not in tree_index:
            dangling += 1
            folder_id = ALL_VIEW_ID
        placement[asset.id] = folder_id

        if folder_id == TRASH_VIEW_ID:
            buckets[TRASH_VIEW_ID].append(asset)
            continue
        buckets[ALL_VIEW_ID].append(asset)
        if asset.id in favorites:
            buckets[SystemView.FAVORITES.value].append(asset)
        if folder_id == PURCHASES_VIEW_ID:
            buckets[PURCHASES_VIEW_ID].append(asset)
        elif folder_id not in SYSTEM_VIEW_IDS:
            buckets[folder_id].append(asset)

    if dangling:
        LOGGER.debug("%d asset(s) with a dangling folder resolved to %s", dangling, ALL_VIEW_ID)

    return ResolvedViews(
        members=MappingProxyType({k: tuple(v) for k, v in buckets.items()}),
        placement=MappingProxyType(placement),
        assets_by_id=MappingProxyType({asset.id: asset for asset in assets}),
    )


class ViewResolver:
    """Answer "what is in this view" for every kind of view reference."""

    def __init__(self, smart_folders: SmartFolderEngine, covers: FolderCoverMap) -> None:
        self._smart_folders = smart_folders
        self._covers = covers

    def items_for(self, view: ViewRef, resolved: ResolvedViews) -> list[Asset]:
        match view:
            case SystemViewRef(view=system_view):
                return list(resolved.members_of(system_view.value))
            case SmartView(definition_id=definition_id):
                definition = self._smart_folders.get(definition_id)
                if definition is None:
                    return []
                return self._smart_folders.filter_assets(
                    resolved.members_of(ALL_VIEW_ID), definition
                )
            case PhysicalView(folder_id=folder_id):
                return self._pin_cover(folder_id, list(resolved.members_of(folder_id)))
            case _:
                assert_never(view)

    def count_for(self, view: ViewRef, resolved: ResolvedViews) -> int:
        match view:
            case SmartView():
                return len(self.items_for(view, resolved))
            case SystemViewRef() | PhysicalView():
                return resolved.count(view.view_id)
            case _:
                assert_never(view)

    def subfolders(
        self, folder_id: str, tree_index: TreeIndex, resolved: ResolvedViews
    ) -> list[SubfolderItem]:
        """Immediate children of *folder_id* with counts and cover thumbnails."""

        node = tree_index.node(folder_id)
        if node is None:
            return []
        return [
            SubfolderItem(
                id=child.id,
                name=child.name,
                count=resolved.count(child.id),
                cover_src=self._cover_src(child.id, resolved),
            )
            for child in node.children
        ]

    def _cover_src(self, folder_id: str, resolved: ResolvedViews) -> Optional[str]:
        cover_id = self._covers.get(folder_id)
        if cover_id is None:
            return None
        asset = resolved.assets_by_id.get(cover_id)
        return asset.src if asset is not None else None

    def _pin_cover(self, folder_id: str, items: list[Asset]) -> list[Asset]:
        cover_id = self._covers.get(folder_id)
        if cover_id is None or not items or items[0].id == cover_id:
            return items
        for index, asset in enumerate(items):
            if asset.id == cover_id:
                return [asset] + items[:index] + items[index + 1:]
        return items


def asset_ids(items: Iterable[Asset]) -> list[int]:
    return [asset.id for asset in items]


__all__ = ["ResolvedViews", "ViewResolver", "asset_ids", "resolve_views"]
