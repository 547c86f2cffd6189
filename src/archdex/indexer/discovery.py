"""Archive tree discovery."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from archdex.config.models import ArchiveSettings, CategoryRule
from archdex.models import ArchiveEntry, EntryType

from .errors import ArchiveRootError, IndexerError


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


class ArchiveScanner:
    """Walk an archive tree laid out as ``root/<year>/<month>/...`` and describe each file.

    Only the first two directory segments below the root are interpreted (as
    year and month); anything deeper stays embedded in the URL.
    """

    def __init__(
        self,
        *,
        url_prefix: str = "archive",
        photo_dirs: Iterable[str] = ("photos",),
        document_dirs: Iterable[str] = ("documents",),
        photo_extensions: Iterable[str] = (
            "jpg", "jpeg", "png", "gif", "heic", "webp", "tif", "tiff"
        ),
        category_rules: Sequence[CategoryRule] = (),
    ) -> None:
        self.url_prefix = url_prefix.strip("/")
        self.photo_dirs = {name.lower() for name in photo_dirs}
        self.document_dirs = {name.lower() for name in document_dirs}
        self.photo_extensions = {ext.lower().lstrip(".") for ext in photo_extensions}
        self.category_rules = list(category_rules)

    @classmethod
    def from_settings(cls, settings: ArchiveSettings) -> "ArchiveScanner":
        """Build a scanner from the ``archive`` configuration section."""
        return cls(
            url_prefix=settings.url_prefix,
            photo_dirs=settings.photo_dirs,
            document_dirs=settings.document_dirs,
            photo_extensions=settings.photo_extensions,
            category_rules=settings.category_rules,
        )

    def scan(self, root: Path) -> Iterator[ArchiveEntry]:
        """Yield an entry per regular file under ``root``, depth-first in name order.

        Raises:
            ArchiveRootError: If ``root`` is missing or not a readable directory.
            IndexerError: If a file or subdirectory cannot be read during the walk.
        """
        root = root.expanduser()
        if not root.exists():
            raise ArchiveRootError(f"Archive root {root} does not exist.")
        if not root.is_dir():
            raise ArchiveRootError(f"Archive root {root} is not a directory.")
        try:
            children = self._children(root)
        except OSError as exc:
            raise ArchiveRootError(f"Archive root {root} is not readable: {exc}") from exc
        yield from self._walk(children, root)

    def _children(self, directory: Path) -> list[Path]:
        return sorted(directory.iterdir(), key=lambda child: child.name)

    def _walk(self, children: list[Path], root: Path) -> Iterator[ArchiveEntry]:
        for child in children:
            if _is_hidden(child):
                continue
            if child.is_dir():
                try:
                    nested = self._children(child)
                except OSError as exc:
                    raise IndexerError(f"Cannot read directory {child}: {exc}") from exc
                yield from self._walk(nested, root)
            elif child.is_file():
                yield self._describe(child, root)

    def _describe(self, path: Path, root: Path) -> ArchiveEntry:
        try:
            size = path.stat().st_size
        except OSError as exc:
            raise IndexerError(f"Cannot stat {path}: {exc}") from exc

        relative = path.relative_to(root)
        directories = relative.parts[:-1]
        ext = path.suffix.lstrip(".").lower()
        entry_type = self._entry_type(directories, ext)
        category = self._category(path.name) if entry_type == "document" else None

        return ArchiveEntry(
            type=entry_type,
            filename=path.name,
            url=self._url(relative),
            year=directories[0] if len(directories) > 0 else "",
            month=directories[1] if len(directories) > 1 else "",
            size=size,
            ext=ext,
            category=category,
        )

    def _entry_type(self, directories: Sequence[str], ext: str) -> EntryType:
        lowered = {segment.lower() for segment in directories}
        if lowered & self.photo_dirs:
            return "photo"
        if lowered & self.document_dirs:
            return "document"
        return "photo" if ext in self.photo_extensions else "document"

    def _category(self, filename: str) -> Optional[str]:
        lowered = filename.lower()
        for rule in self.category_rules:
            if fnmatchcase(lowered, rule.pattern.lower()):
                return rule.category
        return None

    def _url(self, relative: Path) -> str:
        segments = [self.url_prefix] if self.url_prefix else []
        segments.extend(relative.parts)
        return "/" + "/".join(segments)


__all__ = ["ArchiveScanner"]
