"""Facet filters, sort orders and their persisted representation."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Optional

from cbxdrive.config import (
    COLOR_ORDER,
    FILTERS_ENVELOPE_VERSION,
    ORIENTATION_KEYS,
    RATIO_KEYS,
)

VALID_COLORS = frozenset(COLOR_ORDER)
VALID_RATIOS = frozenset(RATIO_KEYS)
VALID_ORIENTATIONS = frozenset(ORIENTATION_KEYS)


class SortKey(str, Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    ID_ASC = "id_asc"
    ID_DESC = "id_desc"
    COLOR_ASC = "color_asc"
    COLOR_DESC = "color_desc"

    @classmethod
    def parse(cls, raw: Any, default: Optional[SortKey] = None) -> SortKey:
        try:
            return cls(raw)
        except ValueError:
            return default or cls.NAME_ASC

    @property
    def descending(self) -> bool:
        return self.value.endswith("_desc")


class EmptyState(str, Enum):
    NONE = "none"
    TRASH = "trash"
    PURCHASES = "purchases"
    NO_RESULTS = "no_results"
    EMPTY_VIEW = "empty_view"


@dataclass(frozen=True)
class AssetFilters:
    """Facet selection.  Facets AND together, values within a facet OR."""

    colors: frozenset[str] = frozenset()
    ratios: frozenset[str] = frozenset()
    orientation: Optional[str] = None
    favorites_only: bool = False
    has_comments: bool = False
    has_tags: bool = False

    def is_empty(self) -> bool:
        return (
            not self.colors
            and not self.ratios
            and self.orientation is None
            and not self.favorites_only
            and not self.has_comments
            and not self.has_tags
        )

    def active_count(self) -> int:
        return (
            len(self.colors)
            + len(self.ratios)
            + int(self.orientation is not None)
            + int(self.favorites_only)
            + int(self.has_comments)
            + int(self.has_tags)
        )

    def toggle_color(self, color: str) -> AssetFilters:
        return replace(self, colors=_toggle(self.colors, color))

    def toggle_ratio(self, ratio: str) -> AssetFilters:
        return replace(self, ratios=_toggle(self.ratios, ratio))

    def with_orientation(self, orientation: Optional[str]) -> AssetFilters:
        return replace(self, orientation=orientation)

    def chips(self) -> list[FilterChip]:
        """Return the removable chips describing every active facet value."""

        chips = [FilterChip(f"color:{c}", f"Color: {c}") for c in _ordered(self.colors, COLOR_ORDER)]
        chips.extend(FilterChip(f"ratio:{r}", f"Ratio: {r}") for r in _ordered(self.ratios, RATIO_KEYS))
        if self.orientation:
            chips.append(
                FilterChip(f"orientation:{self.orientation}", f"Orientation: {self.orientation}")
            )
        if self.favorites_only:
            chips.append(FilterChip("favoritesOnly", "Favorites"))
        if self.has_comments:
            chips.append(FilterChip("hasComments", "Has comments"))
        if self.has_tags:
            chips.append(FilterChip("hasTags", "Has tags"))
        return chips

    def remove_chip(self, key: str) -> AssetFilters:
        if key.startswith("color:"):
            return replace(self, colors=self.colors - {key[len("color:"):]})
        if key.startswith("ratio:"):
            return replace(self, ratios=self.ratios - {key[len("ratio:"):]})
        if key.startswith("orientation:"):
            return replace(self, orientation=None)
        if key == "favoritesOnly":
            return replace(self, favorites_only=False)
        if key == "hasComments":
            return replace(self, has_comments=False)
        if key == "hasTags":
            return replace(self, has_tags=False)
        return self


@dataclass(frozen=True)
class FilterChip:
    key: str
    label: str


@dataclass(frozen=True)
class SearchRequest:
    query: str = ""
    filters: AssetFilters = field(default_factory=AssetFilters)
    sort: SortKey = SortKey.NAME_ASC

    @property
    def is_active(self) -> bool:
        return bool(self.query.strip()) or not self.filters.is_empty()


def _toggle(values: frozenset[str], value: str) -> frozenset[str]:
    return values - {value} if value in values else values | {value}


def _ordered(values: Iterable[str], order: tuple[str, ...]) -> list[str]:
    rank = {key: index for index, key in enumerate(order)}
    return sorted(values, key=lambda v: (rank.get(v, len(rank)), v))


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def serialize_filters(filters: AssetFilters) -> dict[str, Any]:
    """Return the versioned envelope written to the store."""

    data: dict[str, Any] = {"colors": _ordered(filters.colors, COLOR_ORDER)}
    if filters.ratios:
        data["ratios"] = _ordered(filters.ratios, RATIO_KEYS)
    if filters.orientation:
        data["orientation"] = filters.orientation
    if filters.favorites_only:
        data["favoritesOnly"] = True
    if filters.has_comments:
        data["hasComments"] = True
    if filters.has_tags:
        data["hasTags"] = True
    return {"version": FILTERS_ENVELOPE_VERSION, "data": data}


def deserialize_filters(raw: Any) -> AssetFilters:
    """Whitelist-validate a stored filters payload.

    Accepts the ``{version, data}`` envelope, the older ``{v, data}`` one and
    the legacy bare object.  Unknown or invalid values are dropped one by one
    instead of discarding the whole payload.
    """

    if not isinstance(raw, dict):
        return AssetFilters()
    data: Any = raw
    if "data" in raw and ("version" in raw or "v" in raw):
        data = raw.get("data")
    if not isinstance(data, dict):
        return AssetFilters()

    colors = _whitelisted(data.get("colors"), VALID_COLORS)
    ratios = _whitelisted(data.get("ratios"), VALID_RATIOS)
    orientation = data.get("orientation")
    if not isinstance(orientation, str) or orientation not in VALID_ORIENTATIONS:
        orientation = None
    return AssetFilters(
        colors=colors,
        ratios=ratios,
        orientation=orientation,
        favorites_only=data.get("favoritesOnly") is True,
        has_comments=data.get("hasComments") is True,
        has_tags=data.get("hasTags") is True,
    )


def _whitelisted(values: Any, allowed: frozenset[str]) -> frozenset[str]:
    if not isinstance(values, list):
        return frozenset()
    return frozenset(v for v in values if isinstance(v, str) and v in allowed)
