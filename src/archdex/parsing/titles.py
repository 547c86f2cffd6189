"""Human-readable titles derived from archive filenames."""

from __future__ import annotations

import re

from .rules import strip_extension

_SEPARATORS = re.compile(r"[-_]")
_WORD_START = re.compile(r"\b\w", re.ASCII)
_TRAILING_COPY_NUMBER = re.compile(r"\s+\d$")


def format_title(filename: str) -> str:
    """Return a display title for ``filename``.

    The extension is dropped, ``-`` and ``_`` become spaces, and a trailing
    single-digit copy counter (``Report_2``) is removed. Word starts follow
    ASCII rules, so ``été`` becomes ``éTé``.

    Args:
        filename: Base file name including its extension.

    Returns:
        str: Title suitable for listings and text search.
    """

    title = _SEPARATORS.sub(" ", strip_extension(filename))
    title = _WORD_START.sub(lambda match: match.group(0).upper(), title)
    return _TRAILING_COPY_NUMBER.sub("", title)


__all__ = ["format_title"]
