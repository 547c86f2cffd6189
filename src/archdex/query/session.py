"""Stateful wrapper holding one loaded index for repeated queries."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import httpx

from archdex.models import ArchiveEntry, EnrichedEntry

from .engine import build_view, enrich_all
from .loader import load_index
from .models import ArchiveView, LoadResult, LoadState, QueryFilters

Loader = Callable[..., LoadResult]


class ArchiveSession:
    """Load an index once, enrich it once, and answer any number of filter queries.

    A session moves from ``loading`` to ``loaded`` to ``ready``. A failed load
    still ends ``ready``, with no entries and ``load_error`` set. Views are
    cached per filter combination until the next :meth:`load`.
    """

    def __init__(
        self,
        source: str | Path,
        *,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
        loader: Loader = load_index,
    ) -> None:
        self.source = str(source)
        self._client = client
        self._timeout = timeout
        self._loader = loader
        self.state = LoadState.LOADING
        self.load_error: Optional[str] = None
        self._entries: tuple[ArchiveEntry, ...] = ()
        self._enriched: tuple[EnrichedEntry, ...] = ()
        self._views: dict[QueryFilters, ArchiveView] = {}

    def load(self) -> "ArchiveSession":
        """Fetch the index and enrich its entries."""
        self.state = LoadState.LOADING
        self._views.clear()
        result = self._loader(self.source, client=self._client, timeout=self._timeout)
        self._entries = result.entries
        self.load_error = result.error
        self.state = LoadState.LOADED
        self._enriched = enrich_all(self._entries)
        self.state = LoadState.READY
        return self

    @property
    def entries(self) -> tuple[ArchiveEntry, ...]:
        return self._entries

    @property
    def enriched(self) -> tuple[EnrichedEntry, ...]:
        return self._enriched

    @property
    def total(self) -> int:
        return len(self._entries)

    def view(self, filters: Optional[QueryFilters] = None) -> ArchiveView:
        """Return the grouped view for ``filters`` (no filtering by default)."""
        filters = filters or QueryFilters()
        cached = self._views.get(filters)
        if cached is None:
            cached = build_view(self._enriched, filters, load_error=self.load_error)
            self._views[filters] = cached
        return cached


__all__ = ["ArchiveSession"]
