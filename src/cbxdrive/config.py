"""Default configuration values for cbxdrive."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# View identifiers
# ---------------------------------------------------------------------------

# System views are pseudo-folders that are never stored in the folder tree.
# ``ALL_VIEW_ID`` doubles as the fallback placement for assets without a
# folder and for overrides that point at a deleted folder.
ALL_VIEW_ID: Final[str] = "all"
FAVORITES_VIEW_ID: Final[str] = "favorites"
PURCHASES_VIEW_ID: Final[str] = "purchases"
TRASH_VIEW_ID: Final[str] = "trash"
SYSTEM_VIEW_IDS: Final[frozenset[str]] = frozenset(
    {ALL_VIEW_ID, FAVORITES_VIEW_ID, PURCHASES_VIEW_ID, TRASH_VIEW_ID}
)

SMART_FOLDER_PREFIX: Final[str] = "smart:"
FOLDER_ID_PREFIX: Final[str] = "folder_"
GENERATED_ID_LENGTH: Final[int] = 7

ROOT_CRUMB_LABEL: Final[str] = "All files"
CRUMB_SEPARATOR: Final[str] = " / "
CRUMB_ELLIPSIS: Final[str] = "…"
# Chains longer than this collapse into first + ellipsis + last two.
BREADCRUMB_MAX_VISIBLE: Final[int] = 3

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

IMPORTED_ID_BASE: Final[int] = 100_000
DEFAULT_COLOR: Final[str] = "neutral"
DEFAULT_RATIO: Final[str] = "4/3"

# Hue order used by the color sort.  Unknown colors sort after every known one.
COLOR_ORDER: Final[tuple[str, ...]] = (
    "red",
    "orange",
    "yellow",
    "green",
    "blue",
    "purple",
    "pink",
    "neutral",
)
RATIO_KEYS: Final[tuple[str, ...]] = ("3/4", "4/3", "1/1", "16/9")
ORIENTATION_KEYS: Final[tuple[str, ...]] = ("portrait", "landscape", "square")

# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

# Accepted query aliases in precedence order; only the first one is written.
QUERY_PARAM_ALIASES: Final[tuple[str, ...]] = ("q", "query", "search")
FOLDER_PARAM: Final[str] = "folder"
LOCATION_WRITE_DEBOUNCE_MS: Final[int] = 250

# ---------------------------------------------------------------------------
# Display preferences
# ---------------------------------------------------------------------------

THUMB_SIZE_DEFAULT: Final[int] = 220
THUMB_SIZE_MIN: Final[int] = 140
THUMB_SIZE_MAX: Final[int] = 520
COMPACT_THUMB_SIZE: Final[int] = 140
# Viewports narrower than this render compact thumbnails regardless of the
# stored preference.
DESKTOP_MIN_WIDTH_PX: Final[int] = 640
SIDEBAR_WIDTH_DEFAULT: Final[int] = 256
SIDEBAR_WIDTH_MIN: Final[int] = 200
SIDEBAR_WIDTH_MAX: Final[int] = 480

# ---------------------------------------------------------------------------
# Persistent store keys
# ---------------------------------------------------------------------------

STORE_FILE_NAME: Final[str] = "store.json"
APP_DIR_NAME: Final[str] = "cbxdrive"

KEY_SELECTED_FOLDER: Final[str] = "CBX_SELECTED_FOLDER_V1"
KEY_FAVORITES: Final[str] = "CBX_ASSET_FAVORITES_V1"
KEY_FOLDER_COVERS: Final[str] = "CBX_FOLDER_COVERS_V1"
KEY_FOLDER_TREE: Final[str] = "CBX_FOLDER_TREE_V1"
KEY_ASSET_FOLDERS: Final[str] = "CBX_ASSET_FOLDERS_V1"
KEY_SMART_FOLDERS: Final[str] = "CBX_SMART_FOLDERS_V1"
KEY_IMPORTED_ASSETS: Final[str] = "CBX_DRIVE_IMPORTED_ASSETS_V1"
KEY_SORT: Final[str] = "CBX_ASSET_SORT_V1"
KEY_VIEW_MODE: Final[str] = "CBX_ASSET_VIEW_V1"
KEY_THUMB_SIZE: Final[str] = "CBX_ASSET_THUMBSIZE_V1"
KEY_SIDEBAR_WIDTH: Final[str] = "CBX_SIDEBAR_WIDTH_V1"
KEY_SIDEBAR_COLLAPSED: Final[str] = "CBX_SIDEBAR_COLLAPSED_V1"
KEY_SIDEBAR_SECTIONS: Final[str] = "CBX_SIDEBAR_SECTIONS_V1"
KEY_FOLDER_OPEN: Final[str] = "CBX_FOLDER_OPEN_V1"
KEY_STARRED_FOLDERS: Final[str] = "CBX_FAVORITES_V1"
KEY_FILTERS: Final[str] = "CBX_ASSET_FILTERS_V1"
KEY_LEGACY_COLOR_FILTER: Final[str] = "CBX_COLOR_FILTER_V1"
META_KEY_PREFIX: Final[str] = "CBX_META_V1:"

FILTERS_ENVELOPE_VERSION: Final[int] = 1
