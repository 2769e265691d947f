import pytest

from cbxdrive.appctx import AppContext
from cbxdrive.domain.models import (
    AssetFilters,
    EmptyState,
    Rule,
    SearchRequest,
    SortKey,
    parse_view_id,
)
from cbxdrive.events import FolderDeletedEvent, ViewChangedEvent
from cbxdrive.gui.services import MemoryLocation

from conftest import make_asset

ASSETS = [
    make_asset(1, title="Alpha", folder="a", ratio="16/9", color="red"),
    make_asset(2, title="Bravo", folder="a", ratio="3/4", color="blue"),
    make_asset(3, title="Charlie", folder="b", ratio="16/9", color="red"),
    make_asset(4, title="Delta", folder="d"),
    make_asset(5, title="Echo"),
]


@pytest.fixture
def session(session_factory):
    return session_factory(ASSETS)


def _ids(items):
    return [asset.id for asset in items]


def test_starts_on_all(session):
    assert session.view_id == "all"
    assert _ids(session.visible_items()) == [1, 2, 3, 4, 5]
    assert session.count("a") == 2


def test_navigate_persists_and_publishes(session, session_factory, chain_store, event_bus):
    events = []
    event_bus.subscribe(ViewChangedEvent, events.append)
    session.selection.select_all([1])
    session.set_query("alp")

    assert session.navigate("a") == "a"

    assert session.query == ""
    assert session.selection.count == 0
    assert events[-1].view_id == "a" and events[-1].previous_view_id == "all"
    assert session_factory(ASSETS, store=chain_store).view_id == "a"


def test_navigate_to_unknown_view_falls_back_to_all(session):
    session.navigate("a")

    assert session.navigate("nowhere") == "all"
    assert session.navigate("smart:missing") == "all"
    assert session.navigate("smart:wides") == "smart:wides"
    assert _ids(session.view_items()) == [1, 3]


def test_search_filters_and_sort(session):
    session.set_query("a")
    session.set_filters(AssetFilters(colors=frozenset({"red"})))
    session.set_sort(SortKey.NAME_DESC)

    assert _ids(session.visible_items()) == [3, 1]

    session.remove_filter_chip("color:red")
    assert session.filters.is_empty()
    session.clear_filters()
    assert session.state.filters() == AssetFilters()


def test_request_override_is_not_stored(session):
    request = SearchRequest(filters=AssetFilters(ratios=frozenset({"3/4"})))

    assert _ids(session.visible_items(request)) == [2]
    assert session.filters.is_empty()


def test_empty_states(session):
    session.navigate("trash")
    assert session.empty_state() is EmptyState.TRASH
    session.navigate("purchases")
    assert session.empty_state() is EmptyState.PURCHASES
    session.navigate("x")
    assert session.empty_state() is EmptyState.EMPTY_VIEW
    session.set_query("zzz")
    assert session.empty_state() is EmptyState.NO_RESULTS


def test_other_views_are_read_without_navigating(session):
    trash = parse_view_id("trash")

    assert session.visible_items(view=trash) == []
    assert session.empty_state(view=trash) is EmptyState.TRASH
    assert [crumb.id for crumb in session.breadcrumb(trash).segments] == ["all", "trash"]
    assert session.view_id == "all"
    assert _ids(session.visible_items()) == [1, 2, 3, 4, 5]


def test_state_survives_a_new_session(session, session_factory, chain_store):
    created = session.create_folder("Reports", "x")
    session.selection.move([1], created.folder_id)
    session.selection.toggle_favorite([2])
    session.set_sort(SortKey.ID_DESC)

    reopened = session_factory(ASSETS, store=chain_store)

    assert created.folder_id in reopened.index
    assert reopened.index.parent_id(created.folder_id) == "x"
    assert reopened.placement_of(1) == created.folder_id
    assert 2 in reopened.favorites
    assert reopened.sort is SortKey.ID_DESC


def test_folder_operations_reject_bad_input(session, event_bus):
    assert not session.create_folder("  ").success
    assert not session.create_folder("New", "missing").success
    assert not session.rename_folder("missing", "New").success
    assert not session.delete_folder("missing").success

    renamed = session.rename_folder("a", "Archive")
    assert renamed.success
    assert session.label_for("a") == "Archive"


def test_delete_folder_cleans_up_and_leaves_overrides_dangling(session, event_bus):
    deleted = []
    event_bus.subscribe(FolderDeletedEvent, deleted.append)
    session.navigate("c")
    session.toggle_starred("a")
    session.toggle_starred("x")
    session.set_folder_cover("a", 1)
    session.preferences.toggle_folder_open("a")
    session.selection.move([5], "b")

    result = session.delete_folder("a")

    assert set(result.removed_ids) == {"a", "b", "c", "d"}
    assert deleted[-1].folder_id == "a"
    assert session.view_id == "all"
    assert session.starred.ids == ("x",)
    assert session.covers.get("a") is None
    assert not session.preferences.is_folder_open("a")
    assert session.placements.override_for(5) == "b"
    assert session.placement_of(5) == "all"
    assert _ids(session.view_items()) == [1, 2, 3, 4, 5]


def test_breadcrumb_and_subfolders(session):
    session.navigate("d")
    crumb = session.breadcrumb()

    assert [c.label for c in crumb.visible] == ["Root", "…", "C", "D"]
    assert [(s.id, s.count) for s in session.subfolders("a")] == [("b", 1)]
    assert session.label_for("trash") == "Trash"
    assert session.label_for("smart:wides") == "Wide (16:9)"


def test_cover_requires_known_folder_and_asset(session):
    assert not session.set_folder_cover("missing", 1)
    assert not session.set_folder_cover("a", 999)
    assert session.set_folder_cover("a", 2)
    assert _ids(session.view_items(session.current_view)) == [1, 2, 3, 4, 5]
    session.navigate("a")
    assert _ids(session.view_items()) == [2, 1]


def test_smart_folder_lifecycle(session):
    created = session.create_smart_folder("Reds", [Rule("name", "contains", "ha")])
    session.navigate(created.folder_id)
    assert _ids(session.view_items()) == [1, 3]

    copy = session.duplicate_smart_folder(created.folder_id)
    assert session.smart_folders.definitions[0].id == copy.folder_id
    assert session.rename_smart_folder(copy.folder_id, "Copy").success

    assert session.delete_smart_folder(created.folder_id).success
    assert session.view_id == "all"
    assert not session.delete_smart_folder(created.folder_id).success


def test_imported_assets_merge_ahead_of_catalog(session, session_factory, chain_store):
    fresh = session.add_imported_assets([{"src": "/bought.jpg", "title": "Bought"}, {"title": "no src"}])

    assert [a.title for a in fresh] == ["Bought"]
    assert session.assets[0].src == "/bought.jpg"
    assert _ids(session.view_items(None))[0] == fresh[0].id
    assert session.count("purchases") == 1
    assert session.add_imported_assets([{"src": "/bought.jpg"}]) == []
    assert session_factory(ASSETS, store=chain_store).count("purchases") == 1


def test_effective_thumb_size(session):
    session.preferences.thumb_size = 400

    assert session.preferences.effective_thumb_size(1280) == 400
    assert session.preferences.effective_thumb_size(639) == 140


def test_sidebar_preferences(session):
    prefs = session.preferences
    prefs.sidebar_width = 10
    prefs.sidebar_collapsed = True

    assert prefs.sidebar_width == 200
    assert prefs.sidebar_collapsed
    assert prefs.toggle_section("smart") is False
    assert prefs.sidebar_sections()["smart"] is False
    with pytest.raises(KeyError):
        prefs.toggle_section("bogus")


def test_location_linked_session(session_factory, fake_timer):
    location = MemoryLocation({"folder": "b"})
    session = session_factory(ASSETS, location=location, timer=fake_timer)
    assert session.view_id == "b"

    session.set_query("char")
    assert session.query == "char"
    assert location.writes == []
    fake_timer.fire()
    assert location.writes[-1] == {"folder": "b", "q": "char"}

    session.navigate("a")
    assert location.writes[-1] == {"folder": "a"}
    assert session.query == ""

    location.navigate({"folder": "x", "search": "echo"})
    assert session.view_id == "x"
    assert session.query == "echo"

    session.dispose()
    location.navigate({"folder": "a"})
    assert session.view_id == "x"


def test_location_requires_timer(session_factory):
    with pytest.raises(ValueError):
        session_factory(ASSETS, location=MemoryLocation())


def test_app_context_builds_demo_session():
    session = AppContext().create_session()

    assert session.count("all") == 16
    assert session.count("marketing") == 0
    assert session.count("campaigns_2025") == 2
