"""Folder hierarchy, its derived indices and the sidebar tree helpers."""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence

from ..config import CRUMB_SEPARATOR, FOLDER_ID_PREFIX, GENERATED_ID_LENGTH
from ..domain.models import FolderNode, is_reserved_folder_id
from ..errors import FolderNameError, FolderNotFoundError
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def random_suffix(length: int = GENERATED_ID_LENGTH) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_folder_id() -> str:
    return f"{FOLDER_ID_PREFIX}{random_suffix()}"


@dataclass(frozen=True)
class TreeIndex:
    """Derived lookups for one tree snapshot.

    ``path_by_id`` maps every node id to the nodes from its root down to the
    node itself.
    """

    nodes_by_id: Mapping[str, FolderNode] = field(default_factory=dict)
    path_by_id: Mapping[str, tuple[FolderNode, ...]] = field(default_factory=dict)

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self.nodes_by_id

    def node(self, folder_id: str) -> Optional[FolderNode]:
        return self.nodes_by_id.get(folder_id)

    def path(self, folder_id: str) -> tuple[FolderNode, ...]:
        return self.path_by_id.get(folder_id, ())

    def parent_id(self, folder_id: str) -> Optional[str]:
        path = self.path_by_id.get(folder_id, ())
        return path[-2].id if len(path) > 1 else None


def build_tree_index(nodes: Sequence[FolderNode]) -> TreeIndex:
    """Build the id and path lookups for *nodes*.

    Pure: the same tree always produces the same index and nothing is cached.
    """

    nodes_by_id: dict[str, FolderNode] = {}
    path_by_id: dict[str, tuple[FolderNode, ...]] = {}
    stack: list[tuple[FolderNode, tuple[FolderNode, ...]]] = [
        (node, ()) for node in reversed(nodes)
    ]
    while stack:
        node, ancestors = stack.pop()
        if node.id in nodes_by_id:
            # A node reachable twice would make the tree a graph; keep the first.
            LOGGER.warning("Duplicate folder id %s ignored while indexing", node.id)
            continue
        path = ancestors + (node,)
        nodes_by_id[node.id] = node
        path_by_id[node.id] = path
        stack.extend((child, path) for child in reversed(node.children))
    return TreeIndex(MappingProxyType(nodes_by_id), MappingProxyType(path_by_id))


class FolderTree:
    """Ordered forest of user folders.

    The tree only stores nodes.  Lookups used for rendering come from
    :func:`build_tree_index`, which the session rebuilds after every
    structural change.
    """

    def __init__(
        self,
        roots: Iterable[FolderNode] = (),
        *,
        id_factory: Callable[[], str] = generate_folder_id,
    ) -> None:
        self._roots: list[FolderNode] = list(roots)
        self._id_factory = id_factory

    @classmethod
    def from_payload(
        cls,
        payload: Iterable[Any],
        *,
        id_factory: Callable[[], str] = generate_folder_id,
    ) -> FolderTree:
        """Build a tree from stored JSON, dropping invalid nodes with their subtree."""

        seen: set[str] = set()
        return cls(_sanitize_nodes(payload, seen), id_factory=id_factory)

    @property
    def roots(self) -> tuple[FolderNode, ...]:
        return tuple(self._roots)

    def to_payload(self) -> list[dict[str, Any]]:
        return [node.to_dict() for node in self._roots]

    def iter_nodes(self) -> Iterator[FolderNode]:
        for root in self._roots:
            yield from root.iter_subtree()

    def find(self, folder_id: str) -> Optional[FolderNode]:
        for node in self.iter_nodes():
            if node.id == folder_id:
                return node
        return None

    def __contains__(self, folder_id: object) -> bool:
        return isinstance(folder_id, str) and self.find(folder_id) is not None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_child(self, parent_id: Optional[str], name: str) -> str:
        """Append a new folder under *parent_id* (or at the root) and return its id."""

        clean = _clean_name(name)
        siblings = self._roots
        if parent_id is not None:
            parent = self.find(parent_id)
            if parent is None:
                raise FolderNotFoundError(f"Parent folder not found: {parent_id}")
            siblings = parent.children

        taken = {node.id for node in self.iter_nodes()}
        folder_id = self._id_factory()
        while folder_id in taken or is_reserved_folder_id(folder_id):
            folder_id = self._id_factory()

        siblings.append(FolderNode(id=folder_id, name=clean))
        return folder_id

    def rename(self, folder_id: str, name: str) -> None:
        clean = _clean_name(name)
        node = self.find(folder_id)
        if node is None:
            raise FolderNotFoundError(f"Folder not found: {folder_id}")
        node.name = clean

    def delete(self, folder_id: str) -> tuple[str, ...]:
        """Remove *folder_id* with its subtree and return every removed id."""

        removed = _detach(self._roots, folder_id)
        if removed is None:
            raise FolderNotFoundError(f"Folder not found: {folder_id}")
        return tuple(node.id for node in removed.iter_subtree())


def _clean_name(name: str) -> str:
    clean = (name or "").strip()
    if not clean:
        raise FolderNameError("Folder name must not be empty")
    return clean


def _detach(nodes: list[FolderNode], folder_id: str) -> Optional[FolderNode]:
    for index, node in enumerate(nodes):
        if node.id == folder_id:
            return nodes.pop(index)
        found = _detach(node.children, folder_id)
        if found is not None:
            return found
    return None


def _sanitize_nodes(payload: Iterable[Any], seen: set[str]) -> list[FolderNode]:
    nodes: list[FolderNode] = []
    for raw in payload:
        if not isinstance(raw, dict):
            continue
        folder_id = raw.get("id")
        name = raw.get("name")
        if not isinstance(folder_id, str) or not folder_id or not isinstance(name, str):
            continue
        if is_reserved_folder_id(folder_id) or folder_id in seen:
            LOGGER.warning("Dropping stored folder with reserved or duplicate id %s", folder_id)
            continue
        seen.add(folder_id)
        children = raw.get("children")
        nodes.append(
            FolderNode(
                id=folder_id,
                name=name,
                children=_sanitize_nodes(children, seen) if isinstance(children, list) else [],
            )
        )
    return nodes


# ---------------------------------------------------------------------------
# Sidebar helpers
# ---------------------------------------------------------------------------

def filter_tree(nodes: Sequence[FolderNode], query: str) -> list[FolderNode]:
    """Keep nodes whose name contains *query* plus the ancestors of every hit.

    A matching node keeps all of its children; a node kept only as an
    ancestor keeps just the matching branches.  Returns copies.
    """

    needle = query.strip().casefold()
    if not needle:
        return list(nodes)

    def walk(items: Sequence[FolderNode]) -> list[FolderNode]:
        out: list[FolderNode] = []
        for node in items:
            child_hits = walk(node.children)
            if needle in node.name.casefold():
                out.append(FolderNode(node.id, node.name, child_hits or list(node.children)))
            elif child_hits:
                out.append(FolderNode(node.id, node.name, child_hits))
        return out

    return walk(nodes)


def sort_tree(nodes: Sequence[FolderNode], *, descending: bool = False) -> list[FolderNode]:
    """Return copies of *nodes* sorted by case-insensitive name at every level."""

    ordered = sorted(nodes, key=lambda node: node.name.casefold(), reverse=descending)
    return [
        FolderNode(node.id, node.name, sort_tree(node.children, descending=descending))
        for node in ordered
    ]


@dataclass(frozen=True)
class FlatFolder:
    id: str
    label: str
    trail: str


def flatten_tree(nodes: Sequence[FolderNode], trail: tuple[str, ...] = ()) -> list[FlatFolder]:
    """Depth-first list of folders with their ``A / B / C`` trail."""

    out: list[FlatFolder] = []
    for node in nodes:
        path = trail + (node.name,)
        out.append(FlatFolder(id=node.id, label=node.name, trail=CRUMB_SEPARATOR.join(path)))
        out.extend(flatten_tree(node.children, path))
    return out


__all__ = [
    "FlatFolder",
    "FolderTree",
    "TreeIndex",
    "build_tree_index",
    "filter_tree",
    "flatten_tree",
    "generate_folder_id",
    "random_suffix",
    "sort_tree",
]
