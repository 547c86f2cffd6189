"""Build and persist the flat archive index."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from archdex.models import ArchiveEntry

from .discovery import ArchiveScanner

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexBuildResult:
    """Outcome of a completed index build.

    Attributes:
        root: Archive root that was walked.
        output: Path of the written index artifact.
        entries: Records written to the artifact, in walk order.
    """

    root: Path
    output: Path
    entries: list[ArchiveEntry] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.entries)

    def counts_by_type(self) -> dict[str, int]:
        counts = {"photo": 0, "document": 0}
        for entry in self.entries:
            counts[entry.type] += 1
        return counts


def build_index(root: Path, scanner: ArchiveScanner) -> list[ArchiveEntry]:
    """Walk ``root`` completely and return its entries.

    Raises:
        IndexerError: Propagated from the scanner; nothing is returned partially.
    """
    entries = list(scanner.scan(root))
    LOGGER.info("Indexed %d files under %s", len(entries), root)
    return entries


def serialize_index(entries: Sequence[ArchiveEntry]) -> str:
    """Return the JSON array text stored in the index artifact."""
    payload = [entry.model_dump(mode="json", exclude_none=True) for entry in entries]
    return json.dumps(payload, indent=2)


def write_index(entries: Sequence[ArchiveEntry], output: Path) -> Path:
    """Replace ``output`` with the serialized ``entries``.

    The text is written to a hidden sibling file first and moved into place, so
    readers never observe a half-written artifact.
    """
    output = output.expanduser()
    output.parent.mkdir(parents=True, exist_ok=True)
    staging = output.with_name(f".{output.name}.tmp")
    try:
        staging.write_text(serialize_index(entries), encoding="utf-8")
        os.replace(staging, output)
    except BaseException:
        staging.unlink(missing_ok=True)
        raise
    LOGGER.info("Wrote %d entries to %s", len(entries), output)
    return output


def generate_index(root: Path, output: Path, scanner: ArchiveScanner) -> IndexBuildResult:
    """Build the index for ``root`` and write it to ``output``."""
    entries = build_index(root, scanner)
    written = write_index(entries, output)
    return IndexBuildResult(root=root, output=written, entries=entries)


__all__ = [
    "IndexBuildResult",
    "build_index",
    "generate_index",
    "serialize_index",
    "write_index",
]
