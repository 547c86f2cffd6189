"""Runtime filtering, search, and grouping over a loaded archive index."""

from .engine import (
    PREDICATES,
    available_years,
    build_view,
    enrich,
    enrich_all,
    filter_entries,
    group_by_year,
    matches,
    newest_first,
    resolve_category,
)
from .loader import is_remote, load_index
from .models import (
    ALL,
    PHOTOS_CATEGORY,
    ArchiveView,
    LoadResult,
    LoadState,
    QueryFilters,
    YearGroup,
)
from .session import ArchiveSession

__all__ = [
    "ALL",
    "PHOTOS_CATEGORY",
    "PREDICATES",
    "ArchiveSession",
    "ArchiveView",
    "LoadResult",
    "LoadState",
    "QueryFilters",
    "YearGroup",
    "available_years",
    "build_view",
    "enrich",
    "enrich_all",
    "filter_entries",
    "group_by_year",
    "is_remote",
    "load_index",
    "matches",
    "newest_first",
    "resolve_category",
]
