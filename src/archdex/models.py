"""Records exchanged between the indexer and the query engine."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EntryType = Literal["photo", "document"]
UNCATEGORIZED = "Document"


class ArchiveEntry(BaseModel):
    """One file in the published index.

    ``year`` and ``month`` are the first two directory segments under the
    archive root, copied verbatim; they say where the file was filed, not what
    date the document itself refers to.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: EntryType
    filename: str
    url: str
    year: str = ""
    month: str = ""
    size: int = Field(default=0, ge=0)
    ext: str = ""
    category: Optional[str] = None

    @property
    def display_category(self) -> str:
        """Return the category label, ``Document`` when none was attached."""
        return self.category or UNCATEGORIZED


class EnrichedEntry(ArchiveEntry):
    """An index record plus the dates recovered from its filename."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    doc_year: str = Field(alias="docYear")
    doc_date: str = Field(alias="docDate")
    title: str = ""


__all__ = ["ArchiveEntry", "EnrichedEntry", "EntryType", "UNCATEGORIZED"]
