"""Folder tree, placements, smart folders and the asset catalog."""

from .catalog import (
    AssetCatalog,
    AssetMetadataProvider,
    NullMetadataProvider,
    StaticCatalog,
    StoredMetadataProvider,
    merge_catalog,
    normalize_imported,
)
from .folder_tree import FolderTree, TreeIndex, build_tree_index
from .placements import FavoriteSet, FolderCoverMap, PlacementStore, StarredFolders, effective_folder
from .smart_folders import SmartFolderEngine, evaluate_rule, matches

__all__ = [
    "AssetCatalog",
    "AssetMetadataProvider",
    "FavoriteSet",
    "FolderCoverMap",
    "FolderTree",
    "NullMetadataProvider",
    "PlacementStore",
    "SmartFolderEngine",
    "StarredFolders",
    "StaticCatalog",
    "StoredMetadataProvider",
    "TreeIndex",
    "build_tree_index",
    "effective_folder",
    "evaluate_rule",
    "matches",
    "merge_catalog",
    "normalize_imported",
]
