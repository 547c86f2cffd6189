"""Indexer errors."""


class IndexerError(Exception):
    """Base exception for failures that abort an index build."""


class ArchiveRootError(IndexerError):
    """Raised when the archive root is missing, not a directory, or unreadable."""
