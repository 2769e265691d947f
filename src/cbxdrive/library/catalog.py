"""Read-only asset catalog and optional metadata collaborators."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, Sequence

from ..config import DEFAULT_COLOR, DEFAULT_RATIO, IMPORTED_ID_BASE, PURCHASES_VIEW_ID
from ..domain.models import Asset, AssetComment, AssetMeta
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


class AssetCatalog(Protocol):
    """Ordered, read-only source of catalog assets."""

    def assets(self) -> Sequence[Asset]:
        ...


class StaticCatalog:
    """Catalog backed by an in-memory list."""

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets: tuple[Asset, ...] = tuple(assets)

    def assets(self) -> Sequence[Asset]:
        return self._assets

    def __len__(self) -> int:
        return len(self._assets)


class AssetMetadataProvider(Protocol):
    def metadata_for(self, asset_id: int) -> Optional[AssetMeta]:
        ...


class NullMetadataProvider:
    """Provider used when no collaborator is available; nothing has metadata."""

    def metadata_for(self, asset_id: int) -> Optional[AssetMeta]:
        return None


class StoredMetadataProvider:
    """Read per-asset tags and comments from ``CBX_META_V1:<id>`` entries.

    Entries are decoded lazily and cached; call :meth:`invalidate` after an
    external collaborator rewrites them.
    """

    def __init__(self, state) -> None:
        self._state = state
        self._cache: dict[int, Optional[AssetMeta]] = {}

    def metadata_for(self, asset_id: int) -> Optional[AssetMeta]:
        if asset_id not in self._cache:
            self._cache[asset_id] = parse_asset_meta(self._state.asset_metadata(asset_id))
        return self._cache[asset_id]

    def invalidate(self, asset_id: Optional[int] = None) -> None:
        if asset_id is None:
            self._cache.clear()
        else:
            self._cache.pop(asset_id, None)


def parse_asset_meta(payload: Any) -> Optional[AssetMeta]:
    """Convert a stored metadata object into :class:`AssetMeta`.

    Invalid tags and comments are dropped individually; a payload that is not
    an object yields ``None``.
    """

    if not isinstance(payload, dict):
        return None
    raw_tags = payload.get("tags")
    tags: list[str] = []
    if isinstance(raw_tags, list):
        for tag in raw_tags:
            if isinstance(tag, str) and tag.strip() and tag.strip() not in tags:
                tags.append(tag.strip())

    comments: list[AssetComment] = []
    raw_comments = payload.get("comments")
    if isinstance(raw_comments, list):
        for index, entry in enumerate(raw_comments):
            if not isinstance(entry, dict):
                continue
            text = entry.get("text")
            if not isinstance(text, str) or not text.strip():
                continue
            comment_id = entry.get("id")
            created_at = entry.get("createdAt")
            comments.append(
                AssetComment(
                    id=comment_id if isinstance(comment_id, str) else str(index),
                    text=text,
                    created_at=created_at if isinstance(created_at, str) else "",
                )
            )

    updated_at = payload.get("updatedAt")
    return AssetMeta(
        tags=tuple(tags),
        comments=tuple(comments),
        updated_at=updated_at if isinstance(updated_at, str) else "",
    )


def normalize_imported(records: Iterable[Any]) -> list[Asset]:
    """Turn stored imported/purchased records into assets.

    Records without a source uri are dropped.  Missing ids become
    ``IMPORTED_ID_BASE + index``, missing titles ``Asset <id>`` and missing
    folders ``purchases``.  Later duplicates of a source uri are skipped.
    """

    assets: list[Asset] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            continue
        src = record.get("src")
        if not isinstance(src, str) or not src:
            continue
        if src in seen:
            continue
        seen.add(src)

        asset_id = _coerce_id(record.get("id")) or IMPORTED_ID_BASE + index
        title = record.get("title")
        if not isinstance(title, str) or not title.strip():
            title = f"Asset {asset_id}"
        ratio = record.get("ratio")
        folder_id = record.get("folderId")
        color = record.get("color")
        assets.append(
            Asset(
                id=asset_id,
                title=title,
                src=src,
                ratio=ratio if isinstance(ratio, str) and ratio else DEFAULT_RATIO,
                folder_id=folder_id if isinstance(folder_id, str) and folder_id else PURCHASES_VIEW_ID,
                color=color if isinstance(color, str) and color else DEFAULT_COLOR,
            )
        )
    return assets


def merge_catalog(imported: Sequence[Asset], catalog: Sequence[Asset]) -> list[Asset]:
    """Place *imported* ahead of *catalog*; imported assets win on shared sources."""

    merged = list(imported)
    taken_src = {asset.src for asset in imported}
    taken_ids = {asset.id for asset in imported}
    for asset in catalog:
        if asset.src in taken_src:
            continue
        if asset.id in taken_ids:
            LOGGER.debug("Skipping catalog asset %s: id already used by an import", asset.id)
            continue
        merged.append(asset)
        taken_src.add(asset.src)
        taken_ids.add(asset.id)
    return merged


def asset_to_record(asset: Asset) -> dict[str, Any]:
    """Return the stored imported-asset shape of *asset*."""

    record: dict[str, Any] = {
        "id": asset.id,
        "title": asset.title,
        "src": asset.src,
        "ratio": asset.ratio,
        "color": asset.color,
    }
    if asset.folder_id:
        record["folderId"] = asset.folder_id
    return record


def _coerce_id(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, float) and value.is_integer():
        return int(value) or None
    if isinstance(value, str):
        try:
            return int(value.strip()) or None
        except ValueError:
            return None
    return None


__all__ = [
    "AssetCatalog",
    "AssetMetadataProvider",
    "NullMetadataProvider",
    "StaticCatalog",
    "StoredMetadataProvider",
    "asset_to_record",
    "merge_catalog",
    "normalize_imported",
    "parse_asset_meta",
]
