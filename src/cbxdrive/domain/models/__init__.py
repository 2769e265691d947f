from .core import (
    ALL_VIEW,
    FAVORITES_VIEW,
    PURCHASES_VIEW,
    TRASH_VIEW,
    Asset,
    AssetComment,
    AssetMeta,
    FolderNode,
    PhysicalView,
    Rule,
    RuleField,
    RuleOperator,
    SmartFolderDefinition,
    SmartView,
    SubfolderItem,
    SystemView,
    SystemViewRef,
    ViewRef,
    is_reserved_folder_id,
    is_smart_folder_id,
    parse_view_id,
)
from .query import AssetFilters, EmptyState, FilterChip, SearchRequest, SortKey

__all__ = [
    "ALL_VIEW",
    "FAVORITES_VIEW",
    "PURCHASES_VIEW",
    "TRASH_VIEW",
    "Asset",
    "AssetComment",
    "AssetFilters",
    "AssetMeta",
    "EmptyState",
    "FilterChip",
    "FolderNode",
    "PhysicalView",
    "Rule",
    "RuleField",
    "RuleOperator",
    "SearchRequest",
    "SmartFolderDefinition",
    "SmartView",
    "SortKey",
    "SubfolderItem",
    "SystemView",
    "SystemViewRef",
    "ViewRef",
    "is_reserved_folder_id",
    "is_smart_folder_id",
    "parse_view_id",
]
