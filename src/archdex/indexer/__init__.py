"""Build-time indexing of the on-disk archive tree."""

from .builder import IndexBuildResult, build_index, generate_index, serialize_index, write_index
from .discovery import ArchiveScanner
from .errors import ArchiveRootError, IndexerError

__all__ = [
    "ArchiveRootError",
    "ArchiveScanner",
    "IndexBuildResult",
    "IndexerError",
    "build_index",
    "generate_index",
    "serialize_index",
    "write_index",
]
