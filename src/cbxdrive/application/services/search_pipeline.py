"""Free-text query, facet filters and sorting over a resolved item list."""

from __future__ import annotations

from typing import Container, Iterable, Optional, Sequence

from ...config import COLOR_ORDER
from ...domain.models import (
    Asset,
    AssetFilters,
    AssetMeta,
    EmptyState,
    SearchRequest,
    SortKey,
    SystemView,
    SystemViewRef,
    ViewRef,
)
from ...library.catalog import AssetMetadataProvider, NullMetadataProvider

_COLOR_RANK = {color: index for index, color in enumerate(COLOR_ORDER)}


def color_rank(color: str) -> int:
    return _COLOR_RANK.get(color, len(_COLOR_RANK))


def sort_assets(assets: Iterable[Asset], sort: SortKey) -> list[Asset]:
    """Stable sort.  Name and color ties fall back to title then id."""

    items = list(assets)
    if sort in (SortKey.ID_ASC, SortKey.ID_DESC):
        items.sort(key=lambda asset: asset.id, reverse=sort.descending)
        return items

    items.sort(key=lambda asset: asset.id)
    if sort in (SortKey.COLOR_ASC, SortKey.COLOR_DESC):
        items.sort(key=lambda asset: asset.title.casefold())
        items.sort(key=lambda asset: color_rank(asset.color), reverse=sort.descending)
        return items

    items.sort(key=lambda asset: asset.title.casefold(), reverse=sort.descending)
    return items


class SearchPipeline:
    """Apply a :class:`SearchRequest` to the items of one view."""

    def __init__(
        self,
        favorites: Container[int],
        metadata: Optional[AssetMetadataProvider] = None,
    ) -> None:
        self._favorites = favorites
        self._metadata = metadata or NullMetadataProvider()

    def run(self, items: Sequence[Asset], request: SearchRequest) -> list[Asset]:
        needle = request.query.strip().casefold()
        result = [
            asset
            for asset in items
            if self._matches_filters(asset, request.filters)
            and (not needle or self._matches_query(asset, needle))
        ]
        return sort_assets(result, request.sort)

    def _meta(self, asset: Asset) -> Optional[AssetMeta]:
        return self._metadata.metadata_for(asset.id)

    def _matches_query(self, asset: Asset, needle: str) -> bool:
        if needle in asset.title.casefold() or needle in asset.filename.casefold():
            return True
        meta = self._meta(asset)
        if meta is None:
            return False
        return any(needle in text.casefold() for text in meta.searchable_text)

    def _matches_filters(self, asset: Asset, filters: AssetFilters) -> bool:
        if filters.colors and asset.color not in filters.colors:
            return False
        if filters.ratios and asset.ratio not in filters.ratios:
            return False
        if filters.orientation is not None and asset.orientation != filters.orientation:
            return False
        if filters.favorites_only and asset.id not in self._favorites:
            return False
        if filters.has_comments or filters.has_tags:
            meta = self._meta(asset)
            if meta is None:
                return False
            if filters.has_comments and not meta.comments:
                return False
            if filters.has_tags and not meta.tags:
                return False
        return True


def empty_state(result_count: int, request: SearchRequest, view: ViewRef) -> EmptyState:
    """Pick the placeholder for an empty grid.

    Trash and purchases get their own state only when nothing is being
    searched or filtered.
    """

    if result_count:
        return EmptyState.NONE
    if request.is_active:
        return EmptyState.NO_RESULTS
    if view == SystemViewRef(SystemView.TRASH):
        return EmptyState.TRASH
    if view == SystemViewRef(SystemView.PURCHASES):
        return EmptyState.PURCHASES
    return EmptyState.EMPTY_VIEW


__all__ = ["SearchPipeline", "color_rank", "empty_state", "sort_assets"]
