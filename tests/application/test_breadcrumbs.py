import pytest

from cbxdrive.domain.models import parse_view_id
from cbxdrive.library.folder_tree import FolderTree, build_tree_index
from cbxdrive.application.services.breadcrumbs import (
    ELLIPSIS_CRUMB,
    breadcrumb_text,
    resolve_breadcrumb,
)

from conftest import CHAIN_TREE


@pytest.fixture
def index():
    return build_tree_index(FolderTree.from_payload(CHAIN_TREE).roots)


def _names(view_id):
    return {"smart:w": "Wide"}.get(view_id)


def test_deep_chain_truncates_to_first_and_last_two(index):
    crumb = resolve_breadcrumb(parse_view_id("d"), index, _names)

    assert crumb.truncated
    assert [c.label for c in crumb.visible] == ["Root", "…", "C", "D"]
    assert crumb.visible[1] is ELLIPSIS_CRUMB
    assert breadcrumb_text(crumb) == "Root / … / C / D"


def test_expanding_the_ellipsis_lists_navigable_middle(index):
    hidden = resolve_breadcrumb(parse_view_id("d"), index, _names).expand_hidden()

    assert [(c.id, c.label) for c in hidden] == [("a", "A"), ("b", "B")]
    assert all(c.navigable for c in hidden)
    assert hidden[1].full_label == "All files / Root / A / B"


def test_short_chain_is_not_truncated(index):
    crumb = resolve_breadcrumb(parse_view_id("b"), index, _names)

    assert not crumb.truncated
    assert [c.id for c in crumb.visible] == ["root", "a", "b"]
    assert crumb.hidden == ()


def test_system_and_smart_views_get_two_segments(index):
    trash = resolve_breadcrumb(parse_view_id("trash"), index, _names)
    smart = resolve_breadcrumb(parse_view_id("smart:w"), index, _names)
    unnamed = resolve_breadcrumb(parse_view_id("smart:gone"), index, _names)

    assert [c.label for c in trash.visible] == ["All files", "Trash"]
    assert [c.label for c in smart.visible] == ["All files", "Wide"]
    assert smart.visible[0].id == "all"
    assert unnamed.visible[-1].label == "Smart folder"


def test_all_view_has_no_crumbs(index):
    assert len(resolve_breadcrumb(parse_view_id("all"), index, _names)) == 0
