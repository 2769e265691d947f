"""Typed, validated access to the persisted drive slices."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional

from jsonschema import ValidationError

from ..config import (
    KEY_ASSET_FOLDERS,
    KEY_FAVORITES,
    KEY_FILTERS,
    KEY_FOLDER_COVERS,
    KEY_FOLDER_OPEN,
    KEY_FOLDER_TREE,
    KEY_IMPORTED_ASSETS,
    KEY_LEGACY_COLOR_FILTER,
    KEY_SELECTED_FOLDER,
    KEY_SIDEBAR_COLLAPSED,
    KEY_SIDEBAR_SECTIONS,
    KEY_SIDEBAR_WIDTH,
    KEY_SMART_FOLDERS,
    KEY_SORT,
    KEY_STARRED_FOLDERS,
    KEY_THUMB_SIZE,
    KEY_VIEW_MODE,
    META_KEY_PREFIX,
    SIDEBAR_WIDTH_DEFAULT,
    SIDEBAR_WIDTH_MAX,
    SIDEBAR_WIDTH_MIN,
    SMART_FOLDER_PREFIX,
    THUMB_SIZE_DEFAULT,
    THUMB_SIZE_MAX,
    THUMB_SIZE_MIN,
)
from ..domain.models.core import RuleField, RuleOperator
from ..domain.models.query import (
    AssetFilters,
    SortKey,
    VALID_COLORS,
    deserialize_filters,
    serialize_filters,
)
from ..errors import MalformedPersistedStateError, StoreError
from ..utils.jsonio import dumps_compact, loads_or_none
from ..utils.logging import get_logger
from .schema import (
    DEFAULT_SIDEBAR_SECTIONS,
    LEGACY_KIND_RATIOS,
    default_folder_tree,
    default_smart_folders,
    validate_slice,
)
from .store import KeyValueStore

LOGGER = get_logger(__name__)

VIEW_MODES = frozenset({"grid", "list"})
_RULE_FIELDS = frozenset(field.value for field in RuleField)
_RULE_OPERATORS = frozenset(op.value for op in RuleOperator)


class PersistedState:
    """Load and persist the independent drive slices.

    Every reader validates the stored value; anything that fails shape or
    whitelist checks is replaced by the slice default and logged, never
    raised.  Every writer goes straight through to the store.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    # ------------------------------------------------------------------
    # Selected folder
    # ------------------------------------------------------------------
    def selected_folder(self) -> Optional[str]:
        raw = self._store.get_item(KEY_SELECTED_FOLDER)
        if raw is None:
            return None
        value = raw.strip()
        return value or None

    def set_selected_folder(self, view_id: str) -> None:
        self._write_raw(KEY_SELECTED_FOLDER, view_id)

    # ------------------------------------------------------------------
    # Folder tree, covers and overrides
    # ------------------------------------------------------------------
    def folder_tree(self) -> list[dict[str, Any]]:
        payload = self._load_json(KEY_FOLDER_TREE, default_folder_tree)
        if not payload:
            return default_folder_tree()
        return payload

    def set_folder_tree(self, nodes: list[dict[str, Any]]) -> None:
        self._write_json(KEY_FOLDER_TREE, nodes)

    def folder_covers(self) -> dict[str, int]:
        payload = self._load_json(KEY_FOLDER_COVERS, dict)
        return {str(k): v for k, v in payload.items() if not isinstance(v, bool)}

    def set_folder_covers(self, covers: dict[str, int]) -> None:
        self._write_json(KEY_FOLDER_COVERS, dict(covers))

    def asset_folders(self) -> dict[int, str]:
        payload = self._load_json(KEY_ASSET_FOLDERS, dict)
        overrides: dict[int, str] = {}
        for key, value in payload.items():
            asset_id = _parse_int(key)
            if asset_id is None or not isinstance(value, str) or not value:
                LOGGER.debug("Dropping invalid placement override %r -> %r", key, value)
                continue
            overrides[asset_id] = value
        return overrides

    def set_asset_folders(self, overrides: dict[int, str]) -> None:
        self._write_json(KEY_ASSET_FOLDERS, {str(k): v for k, v in overrides.items()})

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------
    def favorites(self) -> set[int]:
        payload = self._load_json(KEY_FAVORITES, list)
        return {asset_id for asset_id in map(_parse_int, payload) if asset_id is not None}

    def set_favorites(self, asset_ids: Iterable[int]) -> None:
        self._write_json(KEY_FAVORITES, sorted(asset_ids))

    # ------------------------------------------------------------------
    # Smart folders and imported assets
    # ------------------------------------------------------------------
    def smart_folders(self) -> list[dict[str, Any]]:
        payload = self._load_json(KEY_SMART_FOLDERS, default_smart_folders)
        cleaned = [d for d in (_clean_smart_definition(raw) for raw in payload) if d]
        if not cleaned:
            return default_smart_folders()
        return cleaned

    def set_smart_folders(self, definitions: list[dict[str, Any]]) -> None:
        self._write_json(KEY_SMART_FOLDERS, definitions)

    def imported_assets(self) -> list[Any]:
        return self._load_json(KEY_IMPORTED_ASSETS, list)

    def set_imported_assets(self, records: list[dict[str, Any]]) -> None:
        self._write_json(KEY_IMPORTED_ASSETS, records)

    # ------------------------------------------------------------------
    # Display preferences
    # ------------------------------------------------------------------
    def sort(self) -> SortKey:
        return SortKey.parse(self._store.get_item(KEY_SORT))

    def set_sort(self, sort: SortKey) -> None:
        self._write_raw(KEY_SORT, SortKey(sort).value)

    def view_mode(self) -> str:
        raw = self._store.get_item(KEY_VIEW_MODE)
        return raw if raw in VIEW_MODES else "grid"

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode!r}")
        self._write_raw(KEY_VIEW_MODE, mode)

    def thumb_size(self) -> int:
        return _bounded_int(
            self._store.get_item(KEY_THUMB_SIZE), THUMB_SIZE_MIN, THUMB_SIZE_MAX, THUMB_SIZE_DEFAULT
        )

    def set_thumb_size(self, size: int) -> None:
        clamped = max(THUMB_SIZE_MIN, min(THUMB_SIZE_MAX, int(size)))
        self._write_raw(KEY_THUMB_SIZE, str(clamped))

    # ------------------------------------------------------------------
    # Sidebar
    # ------------------------------------------------------------------
    def sidebar_width(self) -> int:
        return _bounded_int(
            self._store.get_item(KEY_SIDEBAR_WIDTH),
            SIDEBAR_WIDTH_MIN,
            SIDEBAR_WIDTH_MAX,
            SIDEBAR_WIDTH_DEFAULT,
        )

    def set_sidebar_width(self, width: int) -> None:
        clamped = max(SIDEBAR_WIDTH_MIN, min(SIDEBAR_WIDTH_MAX, int(width)))
        self._write_raw(KEY_SIDEBAR_WIDTH, str(clamped))

    def sidebar_collapsed(self) -> bool:
        return self._store.get_item(KEY_SIDEBAR_COLLAPSED) == "true"

    def set_sidebar_collapsed(self, collapsed: bool) -> None:
        self._write_raw(KEY_SIDEBAR_COLLAPSED, "true" if collapsed else "false")

    def sidebar_sections(self) -> dict[str, bool]:
        payload = self._load_json(KEY_SIDEBAR_SECTIONS, lambda: dict(DEFAULT_SIDEBAR_SECTIONS))
        sections = dict(DEFAULT_SIDEBAR_SECTIONS)
        for name in sections:
            value = payload.get(name)
            if isinstance(value, bool):
                sections[name] = value
        return sections

    def set_sidebar_sections(self, sections: dict[str, bool]) -> None:
        self._write_json(KEY_SIDEBAR_SECTIONS, dict(sections))

    def folder_open_state(self) -> dict[str, bool]:
        return self._load_json(KEY_FOLDER_OPEN, dict)

    def set_folder_open_state(self, state: dict[str, bool]) -> None:
        self._write_json(KEY_FOLDER_OPEN, dict(state))

    def starred_folders(self) -> list[str]:
        payload = self._load_json(KEY_STARRED_FOLDERS, list)
        return list(dict.fromkeys(payload))

    def set_starred_folders(self, folder_ids: Iterable[str]) -> None:
        self._write_json(KEY_STARRED_FOLDERS, list(dict.fromkeys(folder_ids)))

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def filters(self) -> AssetFilters:
        """Return the stored facet filters, migrating the legacy color key."""

        payload = self._load_json(KEY_FILTERS, dict)
        filters = deserialize_filters(payload)
        if self._store.get_item(KEY_LEGACY_COLOR_FILTER) is None:
            return filters
        if not filters.colors:
            colors = self._load_json(KEY_LEGACY_COLOR_FILTER, list)
            migrated = frozenset(c for c in colors if isinstance(c, str) and c in VALID_COLORS)
            if migrated:
                filters = replace(filters, colors=migrated)
                self.set_filters(filters)
        self._remove_raw(KEY_LEGACY_COLOR_FILTER)
        return filters

    def set_filters(self, filters: AssetFilters) -> None:
        self._write_json(KEY_FILTERS, serialize_filters(filters))

    # ------------------------------------------------------------------
    # Per-asset metadata
    # ------------------------------------------------------------------
    def asset_metadata(self, asset_id: int) -> Optional[dict[str, Any]]:
        payload = loads_or_none(self._store.get_item(f"{META_KEY_PREFIX}{asset_id}"))
        return payload if isinstance(payload, dict) else None

    def set_asset_metadata(self, asset_id: int, payload: dict[str, Any]) -> None:
        self._write_json(f"{META_KEY_PREFIX}{asset_id}", payload)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _load_json(self, key: str, default: Callable[[], Any]) -> Any:
        raw = self._store.get_item(key)
        if raw is None:
            return default()
        try:
            return self._decode(key, raw)
        except MalformedPersistedStateError as exc:
            LOGGER.warning("Replacing malformed slice %s with its default: %s", key, exc)
            return default()

    def _decode(self, key: str, raw: str) -> Any:
        payload = loads_or_none(raw)
        if payload is None:
            raise MalformedPersistedStateError(f"{key} does not contain JSON")
        try:
            validate_slice(key, payload)
        except ValidationError as exc:
            raise MalformedPersistedStateError(exc.message) from exc
        return deepcopy(payload)

    def _write_json(self, key: str, payload: Any) -> None:
        self._write_raw(key, dumps_compact(payload))

    def _write_raw(self, key: str, value: str) -> None:
        try:
            self._store.set_item(key, value)
        except StoreError as exc:
            LOGGER.error("Failed to persist %s: %s", key, exc)

    def _remove_raw(self, key: str) -> None:
        try:
            self._store.remove_item(key)
        except StoreError as exc:
            LOGGER.error("Failed to remove %s: %s", key, exc)


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _bounded_int(raw: Optional[str], low: int, high: int, default: int) -> int:
    value = _parse_int(raw)
    if value is None or not low <= value <= high:
        return default
    return value


def _clean_smart_definition(raw: Any) -> Optional[dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    def_id, name = raw.get("id"), raw.get("name")
    if not isinstance(def_id, str) or not def_id.startswith(SMART_FOLDER_PREFIX):
        return None
    if not isinstance(name, str):
        return None

    kind = raw.get("kind")
    if kind is not None and kind not in LEGACY_KIND_RATIOS:
        return None

    rules = raw.get("rules")
    if rules is None or rules == []:
        if kind is None:
            return {"id": def_id, "name": name, "rules": []}
        rules = [{"field": "ratio", "op": "is", "value": LEGACY_KIND_RATIOS[kind]}]
    if not isinstance(rules, list):
        return None
    for rule in rules:
        if not (
            isinstance(rule, dict)
            and rule.get("field") in _RULE_FIELDS
            and rule.get("op") in _RULE_OPERATORS
            and isinstance(rule.get("value"), str)
        ):
            return None
    return {
        "id": def_id,
        "name": name,
        "rules": [{"field": r["field"], "op": r["op"], "value": r["value"]} for r in rules],
    }


__all__ = ["PersistedState", "VIEW_MODES"]
