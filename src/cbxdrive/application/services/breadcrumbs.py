"""Breadcrumb chains for the selected view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, assert_never

from ...config import (
    ALL_VIEW_ID,
    BREADCRUMB_MAX_VISIBLE,
    CRUMB_ELLIPSIS,
    CRUMB_SEPARATOR,
    ROOT_CRUMB_LABEL,
)
from ...domain.models import PhysicalView, SmartView, SystemView, SystemViewRef, ViewRef
from ...library.folder_tree import TreeIndex


@dataclass(frozen=True)
class Crumb:
    id: str
    label: str
    full_label: str
    navigable: bool = True


ELLIPSIS_CRUMB = Crumb(id="", label=CRUMB_ELLIPSIS, full_label="", navigable=False)


@dataclass(frozen=True)
class Breadcrumb:
    """A full crumb chain plus its truncated rendering.

    When truncated, ``visible`` is ``first, ELLIPSIS_CRUMB, last two`` and
    ``hidden`` holds the collapsed middle segments.
    """

    segments: tuple[Crumb, ...] = ()

    @property
    def truncated(self) -> bool:
        return len(self.segments) > BREADCRUMB_MAX_VISIBLE

    @property
    def visible(self) -> tuple[Crumb, ...]:
        if not self.truncated:
            return self.segments
        return (self.segments[0], ELLIPSIS_CRUMB) + self.segments[-2:]

    @property
    def hidden(self) -> tuple[Crumb, ...]:
        if not self.truncated:
            return ()
        return self.segments[1:-2]

    def expand_hidden(self) -> tuple[Crumb, ...]:
        """Segments behind the ellipsis, each with its own full label."""

        return self.hidden

    def __len__(self) -> int:
        return len(self.segments)


def _full_label(names: list[str]) -> str:
    return CRUMB_SEPARATOR.join([ROOT_CRUMB_LABEL, *names])


def _two_segment(view_id: str, label: str) -> Breadcrumb:
    return Breadcrumb(
        (
            Crumb(ALL_VIEW_ID, ROOT_CRUMB_LABEL, ROOT_CRUMB_LABEL),
            Crumb(view_id, label, _full_label([label])),
        )
    )


def resolve_breadcrumb(
    view: ViewRef,
    tree_index: TreeIndex,
    smart_folder_name: Callable[[str], Optional[str]],
) -> Breadcrumb:
    """Build the chain for *view*.

    Real folders yield their ancestor path, system views and smart folders a
    fixed two-segment chain under "All files", and ``all`` an empty chain.
    """

    match view:
        case SystemViewRef(view=SystemView.ALL):
            return Breadcrumb()
        case SystemViewRef(view=system_view):
            return _two_segment(system_view.value, system_view.label)
        case SmartView(definition_id=definition_id):
            return _two_segment(definition_id, smart_folder_name(definition_id) or "Smart folder")
        case PhysicalView(folder_id=folder_id):
            names: list[str] = []
            crumbs: list[Crumb] = []
            for node in tree_index.path(folder_id):
                names.append(node.name)
                crumbs.append(Crumb(node.id, node.name, _full_label(names)))
            return Breadcrumb(tuple(crumbs))
        case _:
            assert_never(view)


def breadcrumb_text(crumb: Breadcrumb) -> str:
    return CRUMB_SEPARATOR.join(segment.label for segment in crumb.visible)


__all__ = ["ELLIPSIS_CRUMB", "Breadcrumb", "Crumb", "breadcrumb_text", "resolve_breadcrumb"]
