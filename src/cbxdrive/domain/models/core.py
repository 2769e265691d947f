from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union
from urllib.parse import unquote, urlsplit

from cbxdrive.config import (
    ALL_VIEW_ID,
    FAVORITES_VIEW_ID,
    PURCHASES_VIEW_ID,
    SMART_FOLDER_PREFIX,
    SYSTEM_VIEW_IDS,
    TRASH_VIEW_ID,
)


class SystemView(str, Enum):
    """Fixed pseudo-folders.  Not persisted and not editable."""

    ALL = ALL_VIEW_ID
    FAVORITES = FAVORITES_VIEW_ID
    PURCHASES = PURCHASES_VIEW_ID
    TRASH = TRASH_VIEW_ID

    @property
    def label(self) -> str:
        return _SYSTEM_LABELS[self]


_SYSTEM_LABELS = {
    SystemView.ALL: "All files",
    SystemView.FAVORITES: "Favorites",
    SystemView.PURCHASES: "Purchases",
    SystemView.TRASH: "Trash",
}


# ---------------------------------------------------------------------------
# View references
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PhysicalView:
    """A folder tree node."""

    folder_id: str

    @property
    def view_id(self) -> str:
        return self.folder_id


@dataclass(frozen=True)
class SmartView:
    """A saved rule set; navigable like a folder but not part of the tree."""

    definition_id: str

    @property
    def view_id(self) -> str:
        return self.definition_id


@dataclass(frozen=True)
class SystemViewRef:
    view: SystemView

    @property
    def view_id(self) -> str:
        return self.view.value


ViewRef = Union[PhysicalView, SmartView, SystemViewRef]

ALL_VIEW = SystemViewRef(SystemView.ALL)
FAVORITES_VIEW = SystemViewRef(SystemView.FAVORITES)
PURCHASES_VIEW = SystemViewRef(SystemView.PURCHASES)
TRASH_VIEW = SystemViewRef(SystemView.TRASH)


def is_smart_folder_id(raw: Optional[str]) -> bool:
    return bool(raw and raw.startswith(SMART_FOLDER_PREFIX))


def is_reserved_folder_id(raw: str) -> bool:
    """Return ``True`` for ids that a tree node may never use."""

    return raw in SYSTEM_VIEW_IDS or is_smart_folder_id(raw)


def parse_view_id(raw: Optional[str]) -> ViewRef:
    """Map a raw view id onto the tagged union.

    Empty input resolves to the ``all`` view.  Whether a physical id still
    exists in the tree is the caller's concern.
    """

    value = (raw or "").strip()
    if not value:
        return ALL_VIEW
    if value in SYSTEM_VIEW_IDS:
        return SystemViewRef(SystemView(value))
    if is_smart_folder_id(value):
        return SmartView(value)
    return PhysicalView(value)


# ---------------------------------------------------------------------------
# Catalog items
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Asset:
    id: int
    title: str
    src: str
    ratio: str
    folder_id: Optional[str] = None
    color: str = "neutral"

    @property
    def filename(self) -> str:
        """Last path segment of the source uri, percent-decoded."""

        path = urlsplit(self.src).path if "://" in self.src else self.src
        segments = [part for part in path.split("/") if part]
        if not segments:
            return ""
        try:
            return unquote(segments[-1], errors="strict")
        except UnicodeDecodeError:
            return segments[-1]

    @property
    def orientation(self) -> Optional[str]:
        width, height = _ratio_parts(self.ratio)
        if width is None or height is None:
            return None
        if width == height:
            return "square"
        return "portrait" if width < height else "landscape"


def _ratio_parts(ratio: str) -> tuple[Optional[float], Optional[float]]:
    left, sep, right = ratio.partition("/")
    if not sep:
        return None, None
    try:
        width, height = float(left), float(right)
    except ValueError:
        return None, None
    if width <= 0 or height <= 0:
        return None, None
    return width, height


@dataclass(frozen=True)
class AssetComment:
    id: str
    text: str
    created_at: str = ""


@dataclass(frozen=True)
class AssetMeta:
    """Optional per-asset tags and comments supplied by a collaborator."""

    tags: tuple[str, ...] = ()
    comments: tuple[AssetComment, ...] = ()
    updated_at: str = ""

    @property
    def searchable_text(self) -> tuple[str, ...]:
        return self.tags + tuple(comment.text for comment in self.comments)


# ---------------------------------------------------------------------------
# Folders
# ---------------------------------------------------------------------------

@dataclass
class FolderNode:
    id: str
    name: str
    children: list[FolderNode] = field(default_factory=list)

    def to_dict(self) -> dict:
        payload: dict = {"id": self.id, "name": self.name}
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload

    def iter_subtree(self):
        """Yield this node and every descendant, depth first."""

        yield self
        for child in self.children:
            yield from child.iter_subtree()


class RuleField(str, Enum):
    RATIO = "ratio"
    NAME = "name"
    KEYWORDS = "keywords"


class RuleOperator(str, Enum):
    IS = "is"
    CONTAINS = "contains"


@dataclass(frozen=True)
class Rule:
    # Plain strings so that stored rules with unknown fields survive loading
    # and simply evaluate to ``False``.
    field: str
    operator: str
    value: str

    def to_dict(self) -> dict:
        return {"field": self.field, "op": self.operator, "value": self.value}


@dataclass(frozen=True)
class SmartFolderDefinition:
    id: str
    name: str
    rules: tuple[Rule, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "rules": [rule.to_dict() for rule in self.rules],
        }


@dataclass(frozen=True)
class SubfolderItem:
    """Immediate child of a real folder, annotated for the subfolder strip."""

    id: str
    name: str
    count: int
    cover_src: Optional[str] = None
