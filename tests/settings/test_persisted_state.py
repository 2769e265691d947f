import logging

import pytest

from cbxdrive.config import (
    KEY_ASSET_FOLDERS,
    KEY_FAVORITES,
    KEY_FILTERS,
    KEY_FOLDER_TREE,
    KEY_LEGACY_COLOR_FILTER,
    KEY_SIDEBAR_SECTIONS,
    KEY_SMART_FOLDERS,
    KEY_SORT,
    KEY_THUMB_SIZE,
    KEY_VIEW_MODE,
)
from cbxdrive.domain.models import AssetFilters, SortKey
from cbxdrive.errors import StoreError
from cbxdrive.settings import MemoryStore, PersistedState
from cbxdrive.settings.schema import default_folder_tree, default_smart_folders


def _state(**items) -> PersistedState:
    return PersistedState(MemoryStore(items))


def test_missing_slices_fall_back_to_defaults(state):
    assert state.selected_folder() is None
    assert state.folder_tree() == default_folder_tree()
    assert state.smart_folders() == default_smart_folders()
    assert state.asset_folders() == {}
    assert state.favorites() == set()
    assert state.sort() is SortKey.NAME_ASC
    assert state.view_mode() == "grid"
    assert state.filters() == AssetFilters()


@pytest.mark.parametrize("raw", ["{not json", '{"id": "x"}', '[{"name": "no id"}]'])
def test_malformed_tree_is_replaced_and_logged(raw, caplog):
    state = _state(**{KEY_FOLDER_TREE: raw})

    with caplog.at_level(logging.WARNING):
        assert state.folder_tree() == default_folder_tree()
    assert "Replacing malformed slice" in caplog.text


def test_empty_tree_uses_default():
    assert _state(**{KEY_FOLDER_TREE: "[]"}).folder_tree() == default_folder_tree()


def test_round_trips_tree_and_overrides(state):
    tree = [{"id": "a", "name": "A", "children": [{"id": "b", "name": "B"}]}]
    state.set_folder_tree(tree)
    state.set_asset_folders({1: "a", 2: "b"})

    assert state.folder_tree() == tree
    assert state.asset_folders() == {1: "a", 2: "b"}


def test_invalid_overrides_are_dropped_individually():
    state = _state(**{KEY_ASSET_FOLDERS: '{"1": "a", "two": "b", "3": 7, "4": ""}'})

    assert state.asset_folders() == {1: "a"}


def test_favorites_accept_string_ids():
    state = _state(**{KEY_FAVORITES: '[1, "2", "x", 3]'})

    assert state.favorites() == {1, 2, 3}


def test_smart_folders_map_legacy_kind_and_skip_invalid():
    raw = (
        '[{"id": "smart:old", "name": "Old", "kind": "wides"},'
        ' {"id": "smart:bad", "name": "Bad", "kind": "panoramas"},'
        ' {"id": "nope", "name": "Wrong prefix", "rules": []},'
        ' {"id": "smart:k", "name": "Keywords",'
        '  "rules": [{"field": "keywords", "op": "contains", "value": "cat"}]}]'
    )
    state = _state(**{KEY_SMART_FOLDERS: raw})

    assert state.smart_folders() == [
        {"id": "smart:old", "name": "Old", "rules": [{"field": "ratio", "op": "is", "value": "16/9"}]},
        {
            "id": "smart:k",
            "name": "Keywords",
            "rules": [{"field": "keywords", "op": "contains", "value": "cat"}],
        },
    ]


def test_smart_folders_without_valid_entries_use_defaults():
    state = _state(**{KEY_SMART_FOLDERS: '[{"id": 3}]'})

    assert state.smart_folders() == default_smart_folders()


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 220), ("300", 300), ("139", 220), ("521", 220), ("big", 220), ("140", 140)],
)
def test_thumb_size_bounds(raw, expected):
    items = {} if raw is None else {KEY_THUMB_SIZE: raw}
    assert _state(**items).thumb_size() == expected


def test_set_thumb_size_clamps(state):
    state.set_thumb_size(9000)
    assert state.thumb_size() == 520
    state.set_thumb_size(10)
    assert state.thumb_size() == 140


def test_view_mode_and_sort_whitelists():
    state = _state(**{KEY_VIEW_MODE: "mosaic", KEY_SORT: "random"})

    assert state.view_mode() == "grid"
    assert state.sort() is SortKey.NAME_ASC
    with pytest.raises(ValueError):
        state.set_view_mode("mosaic")


def test_sidebar_sections_merge_with_defaults():
    state = _state(**{KEY_SIDEBAR_SECTIONS: '{"smart": false, "legacy": 1}'})

    assert state.sidebar_sections() == {"smart": False, "starred": True, "folders": True}


def test_legacy_color_filter_is_migrated_once():
    store = MemoryStore({KEY_LEGACY_COLOR_FILTER: '["red", "chartreuse"]'})
    state = PersistedState(store)

    assert state.filters() == AssetFilters(colors=frozenset({"red"}))
    assert store.get_item(KEY_LEGACY_COLOR_FILTER) is None
    assert store.get_item(KEY_FILTERS) is not None
    assert state.filters() == AssetFilters(colors=frozenset({"red"}))


def test_legacy_color_filter_loses_to_current_colors():
    store = MemoryStore(
        {
            KEY_FILTERS: '{"version": 1, "data": {"colors": ["blue"]}}',
            KEY_LEGACY_COLOR_FILTER: '["red"]',
        }
    )

    assert PersistedState(store).filters().colors == {"blue"}
    assert store.get_item(KEY_LEGACY_COLOR_FILTER) is None


class ReadOnlyStore(MemoryStore):
    def set_item(self, key, value):
        raise StoreError("read-only")

    def remove_item(self, key):
        raise StoreError("read-only")


def test_legacy_color_migration_survives_read_only_store(caplog):
    store = ReadOnlyStore({KEY_LEGACY_COLOR_FILTER: '["red"]'})

    with caplog.at_level(logging.ERROR):
        filters = PersistedState(store).filters()

    assert filters.colors == {"red"}
    assert store.get_item(KEY_LEGACY_COLOR_FILTER) == '["red"]'
    assert "Failed to persist" in caplog.text
    assert "Failed to remove" in caplog.text


def test_asset_metadata_round_trip(state):
    assert state.asset_metadata(7) is None
    state.set_asset_metadata(7, {"tags": ["cat"]})
    assert state.asset_metadata(7) == {"tags": ["cat"]}
