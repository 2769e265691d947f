"""Schemas and defaults for every persisted drive slice."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    KEY_ASSET_FOLDERS,
    KEY_FAVORITES,
    KEY_FILTERS,
    KEY_FOLDER_COVERS,
    KEY_FOLDER_OPEN,
    KEY_FOLDER_TREE,
    KEY_IMPORTED_ASSETS,
    KEY_LEGACY_COLOR_FILTER,
    KEY_SIDEBAR_SECTIONS,
    KEY_SMART_FOLDERS,
    KEY_STARRED_FOLDERS,
)

FOLDER_NODE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "name"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "children": {"type": "array", "items": {"$ref": "#/$defs/node"}},
    },
}

SLICE_SCHEMAS: dict[str, dict[str, Any]] = {
    KEY_FOLDER_TREE: {
        "$id": "cbxdrive/folder-tree.schema.json",
        "$defs": {"node": FOLDER_NODE_SCHEMA},
        "type": "array",
        "items": {"$ref": "#/$defs/node"},
    },
    KEY_FAVORITES: {
        "$id": "cbxdrive/favorites.schema.json",
        "type": "array",
        "items": {"type": ["integer", "string"]},
    },
    KEY_FOLDER_COVERS: {
        "$id": "cbxdrive/folder-covers.schema.json",
        "type": "object",
        "additionalProperties": {"type": "integer"},
    },
    KEY_ASSET_FOLDERS: {
        "$id": "cbxdrive/asset-folders.schema.json",
        "type": "object",
        "additionalProperties": True,
    },
    KEY_SMART_FOLDERS: {
        "$id": "cbxdrive/smart-folders.schema.json",
        "type": "array",
        "items": {"type": "object"},
    },
    KEY_IMPORTED_ASSETS: {
        "$id": "cbxdrive/imported-assets.schema.json",
        "type": "array",
    },
    KEY_SIDEBAR_SECTIONS: {
        "$id": "cbxdrive/sidebar-sections.schema.json",
        "type": "object",
        "properties": {
            "smart": {"type": "boolean"},
            "starred": {"type": "boolean"},
            "folders": {"type": "boolean"},
        },
        "additionalProperties": True,
    },
    KEY_FOLDER_OPEN: {
        "$id": "cbxdrive/folder-open.schema.json",
        "type": "object",
        "additionalProperties": {"type": "boolean"},
    },
    KEY_STARRED_FOLDERS: {
        "$id": "cbxdrive/starred-folders.schema.json",
        "type": "array",
        "items": {"type": "string"},
    },
    KEY_FILTERS: {
        "$id": "cbxdrive/filters.schema.json",
        "type": "object",
    },
    KEY_LEGACY_COLOR_FILTER: {
        "$id": "cbxdrive/legacy-colors.schema.json",
        "type": "array",
    },
}

DEFAULT_FOLDER_TREE: list[dict[str, Any]] = [
    {
        "id": "marketing",
        "name": "Marketing",
        "children": [
            {
                "id": "campaigns",
                "name": "Campaigns",
                "children": [
                    {"id": "campaigns_2025", "name": "2025"},
                    {"id": "campaigns_2024", "name": "2024"},
                ],
            },
            {
                "id": "social",
                "name": "Social",
                "children": [
                    {"id": "social_instagram", "name": "Instagram"},
                    {"id": "social_linkedin", "name": "LinkedIn"},
                ],
            },
        ],
    },
    {
        "id": "brand",
        "name": "Brand",
        "children": [
            {
                "id": "logos",
                "name": "Logos",
                "children": [
                    {"id": "logos_primary", "name": "Primary"},
                    {"id": "logos_symbol", "name": "Symbol"},
                ],
            },
            {
                "id": "guidelines",
                "name": "Guidelines",
                "children": [{"id": "guidelines_tone", "name": "Tone of voice"}],
            },
        ],
    },
    {
        "id": "product",
        "name": "Product",
        "children": [
            {
                "id": "ui",
                "name": "UI",
                "children": [
                    {"id": "ui_components", "name": "Components"},
                    {"id": "ui_screens", "name": "Screens"},
                ],
            },
        ],
    },
]

DEFAULT_SMART_FOLDERS: list[dict[str, Any]] = [
    {
        "id": "smart:portraits",
        "name": "Portraits",
        "rules": [{"field": "ratio", "op": "is", "value": "3/4"}],
    },
    {
        "id": "smart:wides",
        "name": "Wide (16:9)",
        "rules": [{"field": "ratio", "op": "is", "value": "16/9"}],
    },
    {
        "id": "smart:squares",
        "name": "Square (1:1)",
        "rules": [{"field": "ratio", "op": "is", "value": "1/1"}],
    },
]

# Legacy definitions stored a ``kind`` instead of rules.
LEGACY_KIND_RATIOS: dict[str, str] = {
    "portraits": "3/4",
    "wides": "16/9",
    "squares": "1/1",
}

DEFAULT_SIDEBAR_SECTIONS: dict[str, bool] = {"smart": True, "starred": True, "folders": True}

_validators = {key: Draft202012Validator(schema) for key, schema in SLICE_SCHEMAS.items()}


def validate_slice(key: str, payload: Any) -> None:
    """Validate *payload* against the schema for *key*.

    Raises :class:`jsonschema.ValidationError` when the shape is wrong.
    """

    validator = _validators.get(key)
    if validator is not None:
        validator.validate(payload)


def default_folder_tree() -> list[dict[str, Any]]:
    return deepcopy(DEFAULT_FOLDER_TREE)


def default_smart_folders() -> list[dict[str, Any]]:
    return deepcopy(DEFAULT_SMART_FOLDERS)


__all__ = [
    "DEFAULT_FOLDER_TREE",
    "DEFAULT_SIDEBAR_SECTIONS",
    "DEFAULT_SMART_FOLDERS",
    "LEGACY_KIND_RATIOS",
    "SLICE_SCHEMAS",
    "default_folder_tree",
    "default_smart_folders",
    "validate_slice",
]
