"""Tests for enrichment, filtering, and grouping of archive entries."""

from itertools import permutations

import pytest

from archdex.models import ArchiveEntry
from archdex.query import (
    ALL,
    PREDICATES,
    ArchiveSession,
    LoadResult,
    LoadState,
    QueryFilters,
    available_years,
    build_view,
    enrich,
    enrich_all,
    filter_entries,
    group_by_year,
    resolve_category,
)


def _entry(filename: str, year: str, month: str, **extra: object) -> ArchiveEntry:
    extra.setdefault("type", "document")
    return ArchiveEntry(
        filename=filename,
        url=f"/archive/{year}/{month}/{filename}",
        year=year,
        month=month,
        **extra,
    )


@pytest.fixture()
def entries() -> list[ArchiveEntry]:
    return [
        _entry("Minutes-04-12-23.pdf", "2023", "04", category="Minutes"),
        _entry("newsletter.pdf", "2022", "01"),
        _entry("Tank_Repair.jpg", "2022", "03", type="photo", category="History"),
        _entry("Budget-2021-Final.xlsx", "2022", "02", category="Financial"),
        _entry("20190614_pump.jpg", "2023", "05", type="photo"),
        _entry("Minutes-01-09-23.pdf", "2023", "01", category="Minutes"),
    ]


def test_enrich_adds_document_year_date_and_title() -> None:
    enriched = enrich(_entry("Minutes-04-12-23.pdf", "2024", "07"))

    assert enriched.doc_year == "2023"
    assert enriched.doc_date == "April 12, 2023"
    assert enriched.title == "Minutes 04 12 23"
    assert enriched.year == "2024"
    dumped = enriched.model_dump(by_alias=True)
    assert dumped["docYear"] == "2023"
    assert dumped["docDate"] == "April 12, 2023"


def test_enrich_is_idempotent_on_enriched_entries() -> None:
    once = enrich(_entry("welcome.pdf", "2022", "01"))

    assert enrich(once) == once


def test_grouping_example_uses_directory_year_fallback() -> None:
    enriched = enrich_all(
        [
            _entry("Minutes-04-12-23.pdf", "2023", "04"),
            _entry("newsletter.pdf", "2022", "01"),
        ]
    )

    view = build_view(enriched, QueryFilters())

    assert [group.year for group in view.groups] == ["2023", "2022"]
    assert view.groups[0].entries[0].filename == "Minutes-04-12-23.pdf"
    assert view.groups[1].entries[0].filename == "newsletter.pdf"
    assert view.groups[1].entries[0].doc_date == "January 2022"


def test_groups_preserve_index_order(entries: list[ArchiveEntry]) -> None:
    groups = group_by_year(enrich_all(entries))

    assert list(groups) == ["2023", "2022", "2021", "2019"]
    assert [entry.filename for entry in groups["2023"]] == [
        "Minutes-04-12-23.pdf",
        "Minutes-01-09-23.pdf",
    ]


def test_view_counts_and_year_facet(entries: list[ArchiveEntry]) -> None:
    view = build_view(enrich_all(entries), QueryFilters(type="photo"))

    assert view.total == 6
    assert view.filtered_count == 2
    assert [(group.year, group.count) for group in view.groups] == [("2022", 1), ("2019", 1)]
    assert view.years == ("2023", "2022", "2021", "2019")


def test_photos_pseudo_category_matches_every_photo(entries: list[ArchiveEntry]) -> None:
    enriched = enrich_all(entries)

    photos = filter_entries(enriched, QueryFilters(category="Photos"))

    assert {entry.filename for entry in photos} == {"Tank_Repair.jpg", "20190614_pump.jpg"}
    assert all(entry.type == "photo" for entry in photos)


def test_category_filter_is_exact(entries: list[ArchiveEntry]) -> None:
    enriched = enrich_all(entries)

    assert [e.filename for e in filter_entries(enriched, QueryFilters(category="History"))] == [
        "Tank_Repair.jpg"
    ]
    assert filter_entries(enriched, QueryFilters(category="minutes")) == []


def test_year_filter_uses_document_year(entries: list[ArchiveEntry]) -> None:
    enriched = enrich_all(entries)

    matched = filter_entries(enriched, QueryFilters(year="2021"))

    assert [entry.filename for entry in matched] == ["Budget-2021-Final.xlsx"]


def test_search_matches_filename_or_title_case_insensitively(
    entries: list[ArchiveEntry],
) -> None:
    enriched = enrich_all(entries)

    by_filename = filter_entries(enriched, QueryFilters(search="minutes"))
    by_title = filter_entries(enriched, QueryFilters(search="tank repair"))

    assert [entry.filename for entry in by_filename] == [
        "Minutes-04-12-23.pdf",
        "Minutes-01-09-23.pdf",
    ]
    assert [entry.filename for entry in by_title] == ["Tank_Repair.jpg"]


def test_non_matching_search_empties_view_without_touching_other_filters(
    entries: list[ArchiveEntry],
) -> None:
    enriched = enrich_all(entries)
    filters = QueryFilters(year="2023", category="Minutes")

    view = build_view(enriched, filters.with_changes(search="zzz-not-here"))
    restored = build_view(enriched, filters)

    assert view.is_empty
    assert view.filtered_count == 0
    assert restored.filtered_count == 2
    assert filters.year == "2023"


def test_filters_compose_with_and(entries: list[ArchiveEntry]) -> None:
    enriched = enrich_all(entries)

    matched = filter_entries(
        enriched, QueryFilters(search="minutes", year="2023", type="document", category="Minutes")
    )
    none = filter_entries(enriched, QueryFilters(search="minutes", type="photo"))

    assert len(matched) == 2
    assert none == []


def test_empty_values_behave_like_all(entries: list[ArchiveEntry]) -> None:
    enriched = enrich_all(entries)

    assert filter_entries(enriched, QueryFilters(year="", type="", category="")) == list(
        enriched
    )


def test_filtering_is_order_independent_and_idempotent(entries: list[ArchiveEntry]) -> None:
    enriched = enrich_all(entries)
    filters = QueryFilters(search="pump", year="2019", type="photo", category="Photos")
    expected = filter_entries(enriched, filters)

    for order in permutations(PREDICATES):
        survivors = [e for e in enriched if all(check(e, filters) for check in order)]
        assert survivors == expected

    assert [entry.filename for entry in expected] == ["20190614_pump.jpg"]
    assert filter_entries(expected, filters) == expected


def test_available_years_sorted_descending(entries: list[ArchiveEntry]) -> None:
    assert available_years(enrich_all(entries)) == ["2023", "2022", "2021", "2019"]


@pytest.mark.parametrize(
    ("requested", "expected"),
    [
        ("minutes", "Minutes"),
        ("ccr", "CCR"),
        ("PHOTOS", "Photos"),
        ("unknown", ALL),
        ("", ALL),
        (None, ALL),
    ],
)
def test_resolve_category(requested: str | None, expected: str) -> None:
    assert resolve_category(requested, ["Minutes", "CCR", "Financial"]) == expected


def test_session_lifecycle_and_view_cache(entries: list[ArchiveEntry]) -> None:
    calls: list[str] = []

    def _loader(source: str, **_: object) -> LoadResult:
        calls.append(source)
        return LoadResult(source=source, entries=tuple(entries))

    session = ArchiveSession("index.json", loader=_loader)
    assert session.state is LoadState.LOADING

    session.load()

    assert session.state is LoadState.READY
    assert session.total == 6
    assert len(session.enriched) == 6
    first = session.view(QueryFilters(year="2023"))
    assert session.view(QueryFilters(year="2023")) is first
    assert calls == ["index.json"]


def test_session_failed_load_is_ready_and_empty() -> None:
    def _loader(source: str, **_: object) -> LoadResult:
        return LoadResult(source=source, error="connection refused")

    session = ArchiveSession("https://example.invalid/archive-index.json", loader=_loader).load()
    view = session.view(QueryFilters(search="minutes"))

    assert session.state is LoadState.READY
    assert view.is_empty
    assert view.total == 0
    assert view.load_error == "connection refused"


def test_view_as_dict_uses_camel_case_dates(entries: list[ArchiveEntry]) -> None:
    payload = build_view(enrich_all(entries[:1]), QueryFilters()).as_dict()

    assert payload["counts"] == {"total": 1, "matches": 1}
    entry = payload["groups"][0]["entries"][0]
    assert entry["docYear"] == "2023"
    assert entry["docDate"] == "April 12, 2023"
    assert entry["category"] == "Minutes"
