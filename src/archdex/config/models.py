"""Configuration models describing archdex settings."""

from __future__ import annotations

import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORIES = ["Minutes", "CCR", "Financial", "Newsletter", "Policy", "History", "Bylaws"]


class ArchdexBaseModel(BaseModel):
    """Shared configuration for archdex Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class CategoryRule(ArchdexBaseModel):
    """Glob rule attaching a category to matching document filenames.

    Attributes:
        pattern: Case-insensitive shell-style glob matched against the filename.
        category: Category label applied when the pattern matches.
    """

    pattern: str
    category: str


def _default_category_rules() -> list[CategoryRule]:
    return [
        CategoryRule(pattern="*minutes*", category="Minutes"),
        CategoryRule(pattern="*ccr*", category="CCR"),
        CategoryRule(pattern="*newsletter*", category="Newsletter"),
        CategoryRule(pattern="*bylaws*", category="Bylaws"),
    ]


class ArchiveSettings(ArchdexBaseModel):
    """Settings governing how the archive tree is indexed.

    Attributes:
        root: Directory holding the ``year/month/file`` archive tree.
        output: Path of the JSON index artifact written by ``archdex index``.
        url_prefix: First segment of the root-relative public URL.
        photo_dirs: Directory names whose contents are always photos.
        document_dirs: Directory names whose contents are always documents.
        photo_extensions: Extensions treated as photos elsewhere in the tree.
        category_rules: Ordered glob rules attaching categories to documents.
    """

    root: str = "public/archive"
    output: str = "archive-index.json"
    url_prefix: str = "archive"
    photo_dirs: List[str] = Field(default_factory=lambda: ["photos"])
    document_dirs: List[str] = Field(default_factory=lambda: ["documents"])
    photo_extensions: List[str] = Field(
        default_factory=lambda: ["jpg", "jpeg", "png", "gif", "heic", "webp", "tif", "tiff"]
    )
    category_rules: List[CategoryRule] = Field(default_factory=_default_category_rules)


class QuerySettings(ArchdexBaseModel):
    """Settings used when loading and filtering a published index.

    Attributes:
        index_source: Path or ``http(s)`` URL of the index artifact.
        categories: Known categories offered by the category facet.
        timeout_seconds: Network timeout applied to remote index fetches.
    """

    index_source: str = "archive-index.json"
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    timeout_seconds: float = 10.0


class LoggingSettings(ArchdexBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"unknown logging level {value!r}")
        return normalized


class CLIOptions(ArchdexBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class ArchdexConfig(ArchdexBaseModel):
    """Top-level configuration struct for archdex.

    Attributes:
        archive: Indexing settings.
        query: Index loading and filtering settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    archive: ArchiveSettings = Field(default_factory=ArchiveSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DEFAULT_CATEGORIES",
    "ArchdexBaseModel",
    "CategoryRule",
    "ArchiveSettings",
    "QuerySettings",
    "LoggingSettings",
    "CLIOptions",
    "ArchdexConfig",
]
