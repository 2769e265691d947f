import pytest

from cbxdrive.config import KEY_ASSET_FOLDERS
from cbxdrive.errors import InvalidSourceError, InvalidTargetError
from cbxdrive.errors.handler import ErrorOccurredEvent
from cbxdrive.events import AssetsMovedEvent, SelectionChangedEvent
from cbxdrive.gui.viewmodels import DropAssets, SelectionState

from conftest import make_asset


@pytest.fixture
def session(session_factory):
    assets = [
        make_asset(1, folder="a"),
        make_asset(2, folder="a"),
        make_asset(3, folder="a"),
        make_asset(4, folder="b"),
    ]
    return session_factory(assets)


@pytest.fixture
def selection(session):
    return session.selection


def _folder(session, asset_id):
    return session.placement_of(asset_id)


def test_toggle_and_state(selection):
    assert selection.state is SelectionState.EMPTY
    selection.toggle(1)
    selection.toggle(2)
    assert selection.state is SelectionState.SELECTING
    assert selection.selected.value == (1, 2)
    selection.toggle(1)
    assert selection.selected_ids == {2}
    selection.escape()
    assert selection.count == 0


def test_selection_changes_are_published(selection, event_bus):
    seen = []
    event_bus.subscribe(SelectionChangedEvent, seen.append)

    selection.select_all([3, 1, 3])

    assert seen[-1].selected_ids == {1, 3}
    assert selection.selected.value == (3, 1)


def test_moving_a_selected_asset_moves_the_whole_selection(session, selection):
    selection.select_all([1, 2])

    result = selection.move_item(2, "b")

    assert result.success
    assert set(result.affected_ids) == {1, 2}
    assert result.selection_cleared
    assert [_folder(session, i) for i in (1, 2, 3)] == ["b", "b", "a"]


def test_moving_an_unselected_asset_moves_only_it(session, selection):
    selection.select_all([1, 2])

    result = selection.move_item(3, "x")

    assert result.affected_ids == (3,)
    assert not result.selection_cleared
    assert selection.selected.value == (1, 2)
    assert _folder(session, 1) == "a"


@pytest.mark.parametrize("target", ["trash", "all", "smart:wides", "missing"])
def test_invalid_target_is_rejected_without_writes(session, selection, event_bus, target):
    errors = []
    event_bus.subscribe(ErrorOccurredEvent, errors.append)
    selection.select_all([1, 2])
    store_before = session.state.store.get_item(KEY_ASSET_FOLDERS)

    result = selection.move([1, 2], target)

    assert not result.success
    assert selection.selected.value == (1, 2)
    assert session.state.store.get_item(KEY_ASSET_FOLDERS) == store_before
    assert isinstance(errors[-1].error, InvalidTargetError)


def test_soft_delete_then_restore_round_trip(session, selection):
    selection.select_all([1, 2, 4])

    trashed = selection.soft_delete(selection.selected.value)

    assert trashed.selection_cleared and selection.count == 0
    assert [a.id for a in session.view_items()] == [3]
    assert session.count("trash") == 3

    session.navigate("trash")
    restored = selection.restore([1, 2, 4], "x")

    assert set(restored.affected_ids) == {1, 2, 4}
    assert session.count("trash") == 0
    assert [a.id for a in session.view_items(session.current_view)] == []
    assert session.count("x") == 3


def test_soft_delete_inside_trash_is_a_noop(session, selection):
    selection.soft_delete([1])
    session.navigate("trash")
    selection.select_all([1])

    result = selection.soft_delete([1])

    assert result.affected_ids == ()
    assert result.selection_cleared
    assert _folder(session, 1) == "trash"


def test_restore_outside_trash_is_rejected(selection, event_bus):
    errors = []
    event_bus.subscribe(ErrorOccurredEvent, errors.append)

    result = selection.restore([1], "b")

    assert not result.success
    assert isinstance(errors[-1].error, InvalidSourceError)


def test_restore_skips_assets_that_are_not_trashed(session, selection):
    selection.soft_delete([1])
    session.navigate("trash")

    result = selection.restore([1, 2], "x")

    assert result.affected_ids == (1,)
    assert _folder(session, 2) == "a"


def test_toggle_favorite_flips_each_id(session, selection):
    selection.toggle_favorite([1])
    selection.toggle_favorite([1, 2])

    assert 1 not in session.favorites
    assert 2 in session.favorites


def test_dispatch_drop_routes_by_target_and_view(session, selection, event_bus):
    moves = []
    event_bus.subscribe(AssetsMovedEvent, moves.append)
    selection.select_all([1, 2])

    selection.dispatch_drop(DropAssets(ids=(1,), target_folder_id="x"))
    assert set(moves[-1].asset_ids) == {1, 2}

    selection.dispatch_drop(DropAssets(ids=(4,), target_folder_id="trash"))
    assert _folder(session, 4) == "trash"

    session.navigate("trash")
    selection.dispatch_drop(DropAssets(ids=(4,), target_folder_id="b"))
    assert _folder(session, 4) == "b"


def test_preview_sources_are_capped(session, selection):
    selection.select_all([1, 2, 3, 4])

    sources = selection.preview_sources(lambda i: session.asset(i).src)

    assert sources == [session.asset(i).src for i in (1, 2, 3)]
