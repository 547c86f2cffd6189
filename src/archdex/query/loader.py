"""Load a published index from disk or over HTTP."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import httpx
from pydantic import TypeAdapter

from archdex.models import ArchiveEntry

from .models import LoadResult

LOGGER = logging.getLogger(__name__)

_INDEX_ADAPTER = TypeAdapter(list[ArchiveEntry])


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_source(source: str, client: Optional[httpx.Client], timeout: float) -> str:
    if not is_remote(source):
        return Path(source).expanduser().read_text(encoding="utf-8")
    if client is not None:
        response = client.get(source)
    else:
        with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
            response = owned.get(source)
    response.raise_for_status()
    return response.text


def load_index(
    source: str | Path,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 10.0,
) -> LoadResult:
    """Read and validate the index at ``source``.

    A failed read never raises: missing files, invalid URLs, HTTP errors,
    malformed or too deeply nested JSON, and invalid records all produce an
    empty result carrying the error message.

    Args:
        source: Filesystem path or ``http(s)`` URL of the index artifact.
        client: Optional preconfigured client used for remote sources.
        timeout: Timeout in seconds for remote sources without a client.

    Returns:
        LoadResult: Loaded entries, or none together with the failure reason.
    """

    location = str(source)
    try:
        payload = json.loads(_read_source(location, client, timeout))
        if not isinstance(payload, list):
            raise ValueError("index payload must be a JSON array")
        entries = _INDEX_ADAPTER.validate_python(payload)
    except (OSError, httpx.HTTPError, httpx.InvalidURL, ValueError, RecursionError) as exc:
        LOGGER.warning("Could not load archive index from %s: %s", location, exc)
        return LoadResult(source=location, error=str(exc) or type(exc).__name__)

    LOGGER.debug("Loaded %d entries from %s", len(entries), location)
    return LoadResult(source=location, entries=tuple(entries))


__all__ = ["is_remote", "load_index"]
