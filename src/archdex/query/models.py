"""Query parameters and derived views over an enriched archive."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from archdex.models import ArchiveEntry, EnrichedEntry

ALL = "all"
PHOTOS_CATEGORY = "Photos"


class LoadState(str, Enum):
    """Lifecycle of an archive session."""

    LOADING = "loading"
    LOADED = "loaded"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class QueryFilters:
    """The four independent query parameters.

    Attributes:
        search: Case-insensitive text matched against filename or title.
        year: Document year to keep, or ``all``.
        type: Entry type (``photo``/``document``) to keep, or ``all``.
        category: Category to keep, ``Photos`` for every photo, or ``all``.
    """

    search: str = ""
    year: str = ALL
    type: str = ALL
    category: str = ALL

    def with_changes(self, **changes: str) -> "QueryFilters":
        """Return a copy with the given parameters replaced."""
        return replace(self, **changes)

    def as_dict(self) -> dict[str, str]:
        return {
            "search": self.search,
            "year": self.year,
            "type": self.type,
            "category": self.category,
        }


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Entries read from an index source, or the reason none could be read."""

    source: str
    entries: tuple[ArchiveEntry, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class YearGroup:
    """Filtered entries sharing a document year, in index order."""

    year: str
    entries: tuple[EnrichedEntry, ...]

    @property
    def count(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class ArchiveView:
    """Everything a listing needs to render one combination of filters.

    Attributes:
        filters: Parameters the view was computed for.
        total: Number of entries in the loaded index.
        groups: Year groups, newest year first.
        years: Distinct document years across the whole index, newest first.
        load_error: Reason the index could not be loaded, if any.
    """

    filters: QueryFilters
    total: int
    groups: tuple[YearGroup, ...]
    years: tuple[str, ...]
    load_error: Optional[str] = None

    @property
    def filtered_count(self) -> int:
        return sum(group.count for group in self.groups)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation of the view."""
        return {
            "counts": {"total": self.total, "matches": self.filtered_count},
            "filters": self.filters.as_dict(),
            "years": list(self.years),
            "load_error": self.load_error,
            "groups": [
                {
                    "year": group.year,
                    "count": group.count,
                    "entries": [
                        entry.model_dump(mode="json", by_alias=True, exclude_none=True)
                        for entry in group.entries
                    ],
                }
                for group in self.groups
            ],
        }


__all__ = [
    "ALL",
    "PHOTOS_CATEGORY",
    "ArchiveView",
    "LoadResult",
    "LoadState",
    "QueryFilters",
    "YearGroup",
]
