from .breadcrumbs import ELLIPSIS_CRUMB, Breadcrumb, Crumb, resolve_breadcrumb
from .search_pipeline import SearchPipeline, empty_state, sort_assets
from .view_resolver import ResolvedViews, ViewResolver, resolve_views

__all__ = [
    "Breadcrumb",
    "Crumb",
    "ELLIPSIS_CRUMB",
    "ResolvedViews",
    "SearchPipeline",
    "ViewResolver",
    "empty_state",
    "resolve_breadcrumb",
    "resolve_views",
    "sort_assets",
]
