"""Tests covering archive tree discovery and index persistence."""

import json
from pathlib import Path

import pytest

from archdex.config.models import ArchiveSettings, CategoryRule
from archdex.indexer import (
    ArchiveRootError,
    ArchiveScanner,
    IndexerError,
    build_index,
    generate_index,
    write_index,
)


def _touch(path: Path, content: bytes = b"x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture()
def archive(tmp_path: Path) -> Path:
    root = tmp_path / "archive"
    _touch(root / "2023" / "04" / "Minutes-04-12-23.pdf", b"minutes!")
    _touch(root / "2023" / "04" / "Pump_House.JPG", b"jpegdata")
    _touch(root / "2022" / "01" / "newsletter.pdf")
    _touch(root / "2022" / "01" / ".DS_Store")
    _touch(root / ".hidden" / "01" / "secret.pdf")
    _touch(root / "2021" / "photos" / "scan.pdf")
    _touch(root / "2021" / "06" / "extra" / "deep" / "budget.xlsx")
    return root


def test_scanner_emits_one_entry_per_visible_file(archive: Path) -> None:
    entries = list(ArchiveScanner().scan(archive))

    assert [entry.url for entry in entries] == [
        "/archive/2021/06/extra/deep/budget.xlsx",
        "/archive/2021/photos/scan.pdf",
        "/archive/2022/01/newsletter.pdf",
        "/archive/2023/04/Minutes-04-12-23.pdf",
        "/archive/2023/04/Pump_House.JPG",
    ]


def test_scanner_captures_directory_year_month_size_and_extension(archive: Path) -> None:
    entries = {entry.filename: entry for entry in ArchiveScanner().scan(archive)}

    minutes = entries["Minutes-04-12-23.pdf"]
    assert (minutes.year, minutes.month) == ("2023", "04")
    assert minutes.size == len(b"minutes!")
    assert minutes.ext == "pdf"
    assert minutes.type == "document"

    photo = entries["Pump_House.JPG"]
    assert photo.ext == "jpg"
    assert photo.type == "photo"

    deep = entries["budget.xlsx"]
    assert (deep.year, deep.month) == ("2021", "06")


def test_photo_directory_overrides_extension(archive: Path) -> None:
    entries = {entry.filename: entry for entry in ArchiveScanner().scan(archive)}

    assert entries["scan.pdf"].type == "photo"
    assert entries["scan.pdf"].category is None


def test_document_directory_overrides_photo_extension(tmp_path: Path) -> None:
    _touch(tmp_path / "2020" / "documents" / "site-plan.png")

    (entry,) = ArchiveScanner().scan(tmp_path)

    assert entry.type == "document"


def test_category_rules_apply_to_documents_only(tmp_path: Path) -> None:
    _touch(tmp_path / "2023" / "04" / "MINUTES-04-12-23.pdf")
    _touch(tmp_path / "2023" / "04" / "minutes-meeting.jpg")
    _touch(tmp_path / "2023" / "04" / "welcome.pdf")
    scanner = ArchiveScanner(
        category_rules=[
            CategoryRule(pattern="*minutes*", category="Minutes"),
            CategoryRule(pattern="*.pdf", category="Other"),
        ]
    )

    categories = {entry.filename: entry.category for entry in scanner.scan(tmp_path)}

    assert categories == {
        "MINUTES-04-12-23.pdf": "Minutes",
        "minutes-meeting.jpg": None,
        "welcome.pdf": "Other",
    }


def test_file_above_month_level_gets_empty_segments(tmp_path: Path) -> None:
    _touch(tmp_path / "readme.txt")
    _touch(tmp_path / "2019" / "notes.txt")

    entries = {entry.filename: entry for entry in ArchiveScanner().scan(tmp_path)}

    assert (entries["readme.txt"].year, entries["readme.txt"].month) == ("", "")
    assert (entries["notes.txt"].year, entries["notes.txt"].month) == ("2019", "")
    assert entries["readme.txt"].url == "/archive/readme.txt"


def test_url_prefix_is_configurable(tmp_path: Path) -> None:
    _touch(tmp_path / "2020" / "02" / "a.pdf")
    settings = ArchiveSettings(url_prefix="/files/archive/")

    (entry,) = ArchiveScanner.from_settings(settings).scan(tmp_path)

    assert entry.url == "/files/archive/2020/02/a.pdf"


def test_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ArchiveRootError):
        build_index(tmp_path / "missing", ArchiveScanner())


def test_root_must_be_a_directory(tmp_path: Path) -> None:
    target = _touch(tmp_path / "file.pdf")

    with pytest.raises(ArchiveRootError):
        build_index(target, ArchiveScanner())


def test_failed_build_leaves_existing_index_untouched(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = tmp_path / "archive"
    _touch(root / "2020" / "01" / "a.pdf")
    _touch(root / "2020" / "02" / "b.pdf")
    output = tmp_path / "archive-index.json"
    output.write_text("[]", encoding="utf-8")

    scanner = ArchiveScanner()
    original_children = scanner._children

    def _flaky_children(directory: Path) -> list[Path]:
        if directory.name == "02":
            raise PermissionError("denied")
        return original_children(directory)

    monkeypatch.setattr(scanner, "_children", _flaky_children)

    with pytest.raises(IndexerError):
        generate_index(root, output, scanner)

    assert output.read_text(encoding="utf-8") == "[]"
    assert not (tmp_path / ".archive-index.json.tmp").exists()


def test_failed_replace_removes_staging_file(tmp_path: Path) -> None:
    output = tmp_path / "idx.json"
    _touch(output / "keep.txt")

    with pytest.raises(OSError):
        write_index([], output)

    assert sorted(path.name for path in tmp_path.iterdir()) == ["idx.json"]
    assert (output / "keep.txt").exists()


def test_generate_index_writes_json_array(archive: Path, tmp_path: Path) -> None:
    output = tmp_path / "public" / "archive-index.json"

    result = generate_index(archive, output, ArchiveScanner())

    assert result.count == 5
    assert result.counts_by_type() == {"photo": 2, "document": 3}
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert isinstance(payload, list)
    assert len(payload) == 5
    minutes = next(item for item in payload if item["filename"] == "Minutes-04-12-23.pdf")
    assert minutes == {
        "type": "document",
        "filename": "Minutes-04-12-23.pdf",
        "url": "/archive/2023/04/Minutes-04-12-23.pdf",
        "year": "2023",
        "month": "04",
        "size": 8,
        "ext": "pdf",
    }


def test_regeneration_replaces_whole_index(tmp_path: Path) -> None:
    root = tmp_path / "archive"
    stale = _touch(root / "2020" / "01" / "old.pdf")
    output = tmp_path / "index.json"
    generate_index(root, output, ArchiveScanner())

    stale.unlink()
    _touch(root / "2021" / "01" / "new.pdf")
    write_index(build_index(root, ArchiveScanner()), output)

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [item["filename"] for item in payload] == ["new.pdf"]
