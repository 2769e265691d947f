import pytest

from cbxdrive.domain.models import (
    ALL_VIEW,
    Asset,
    PhysicalView,
    SmartView,
    SystemView,
    SystemViewRef,
    is_reserved_folder_id,
    parse_view_id,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("all", SystemViewRef(SystemView.ALL)),
        ("favorites", SystemViewRef(SystemView.FAVORITES)),
        ("purchases", SystemViewRef(SystemView.PURCHASES)),
        ("trash", SystemViewRef(SystemView.TRASH)),
        ("smart:wides", SmartView("smart:wides")),
        ("folder_abc1234", PhysicalView("folder_abc1234")),
    ],
)
def test_parse_view_id(raw, expected):
    assert parse_view_id(raw) == expected
    assert parse_view_id(raw).view_id == raw


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_empty_view_id_is_all(raw):
    assert parse_view_id(raw) == ALL_VIEW


def test_reserved_ids():
    assert is_reserved_folder_id("trash")
    assert is_reserved_folder_id("smart:anything")
    assert not is_reserved_folder_id("marketing")


def test_system_view_labels():
    assert SystemView.FAVORITES.label == "Favorites"
    assert SystemView.ALL.label == "All files"


def test_filename_is_percent_decoded():
    asset = Asset(id=1, title="Hiring", src="https://cdn.example.com/a/hiring%20post.jpg?x=1", ratio="4/3")
    assert asset.filename == "hiring post.jpg"


@pytest.mark.parametrize(
    "ratio, orientation",
    [("3/4", "portrait"), ("4/3", "landscape"), ("16/9", "landscape"), ("1/1", "square"), ("wide", None)],
)
def test_orientation_from_ratio(ratio, orientation):
    assert Asset(id=1, title="t", src="/t.jpg", ratio=ratio).orientation == orientation
