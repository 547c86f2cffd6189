"""Pure functions turning loaded entries and filters into a grouped view."""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from archdex.models import ArchiveEntry, EnrichedEntry
from archdex.parsing import format_title, parse_document_date, parse_document_year

from .models import ALL, PHOTOS_CATEGORY, ArchiveView, QueryFilters, YearGroup

Predicate = Callable[[EnrichedEntry, QueryFilters], bool]


def enrich(entry: ArchiveEntry) -> EnrichedEntry:
    """Attach the filename-derived document year, date, and title to ``entry``."""
    return EnrichedEntry(
        **entry.model_dump(include=set(ArchiveEntry.model_fields)),
        doc_year=parse_document_year(entry.filename, entry.year),
        doc_date=parse_document_date(entry.filename, entry.month, entry.year),
        title=format_title(entry.filename),
    )


def enrich_all(entries: Iterable[ArchiveEntry]) -> tuple[EnrichedEntry, ...]:
    return tuple(enrich(entry) for entry in entries)


def _is_active(value: str) -> bool:
    return bool(value) and value != ALL


def _year_matches(entry: EnrichedEntry, filters: QueryFilters) -> bool:
    return not _is_active(filters.year) or entry.doc_year == filters.year


def _type_matches(entry: EnrichedEntry, filters: QueryFilters) -> bool:
    return not _is_active(filters.type) or entry.type == filters.type


def _category_matches(entry: EnrichedEntry, filters: QueryFilters) -> bool:
    if not _is_active(filters.category):
        return True
    # "Photos" is a pseudo-category covering every photo, whatever its own category.
    if filters.category == PHOTOS_CATEGORY:
        return entry.type == "photo"
    return entry.category == filters.category


def _search_matches(entry: EnrichedEntry, filters: QueryFilters) -> bool:
    if not filters.search:
        return True
    needle = filters.search.lower()
    return needle in entry.filename.lower() or needle in entry.title.lower()


PREDICATES: tuple[Predicate, ...] = (
    _year_matches,
    _type_matches,
    _category_matches,
    _search_matches,
)


def matches(entry: EnrichedEntry, filters: QueryFilters) -> bool:
    """Return whether ``entry`` passes every active filter."""
    return all(predicate(entry, filters) for predicate in PREDICATES)


def filter_entries(
    entries: Iterable[EnrichedEntry], filters: QueryFilters
) -> list[EnrichedEntry]:
    """Return the entries passing ``filters``, preserving their order."""
    return [entry for entry in entries if matches(entry, filters)]


def group_by_year(entries: Iterable[EnrichedEntry]) -> dict[str, list[EnrichedEntry]]:
    """Bucket entries by document year; each bucket keeps the input order."""
    groups: dict[str, list[EnrichedEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.doc_year, []).append(entry)
    return groups


def newest_first(years: Iterable[str]) -> list[str]:
    return sorted(years, reverse=True)


def available_years(entries: Iterable[EnrichedEntry]) -> list[str]:
    """Return the distinct document years present in ``entries``, newest first."""
    return newest_first({entry.doc_year for entry in entries})


def resolve_category(value: Optional[str], known: Sequence[str]) -> str:
    """Map a requested category onto a known one, ignoring case.

    Unknown, empty, or missing values select every category.
    """
    if not value:
        return ALL
    wanted = value.lower()
    for candidate in [*known, PHOTOS_CATEGORY]:
        if candidate.lower() == wanted:
            return candidate
    return ALL


def build_view(
    entries: Sequence[EnrichedEntry],
    filters: QueryFilters,
    *,
    load_error: Optional[str] = None,
) -> ArchiveView:
    """Filter and group ``entries`` for display."""
    groups = group_by_year(filter_entries(entries, filters))
    return ArchiveView(
        filters=filters,
        total=len(entries),
        groups=tuple(YearGroup(year, tuple(groups[year])) for year in newest_first(groups)),
        years=tuple(available_years(entries)),
        load_error=load_error,
    )


__all__ = [
    "PREDICATES",
    "available_years",
    "build_view",
    "enrich",
    "enrich_all",
    "filter_entries",
    "group_by_year",
    "matches",
    "newest_first",
    "resolve_category",
]
