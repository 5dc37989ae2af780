"""Content registries.

A registry is the flat set of addressable documents that navigation trees
and redirects are validated against. Registries are loaded up front;
lookups never touch the filesystem.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from docnav.paths import normalize_path
from docnav.types import ContentPath

logger = logging.getLogger(__name__)

_H1_RE = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)
_FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)
_FRONTMATTER_TITLE_RE = re.compile(r"^title:\s*(.+?)\s*$", re.MULTILINE)


class ContentRegistry(Protocol):
    """Read-only view of existing content units."""

    def exists(self, path: str) -> bool: ...

    def list_all_paths(self) -> set[ContentPath]: ...

    def title(self, path: str) -> str | None: ...


class StaticRegistry:
    """In-memory registry built from a known set of paths."""

    __slots__ = ("_paths", "_titles")

    def __init__(
        self,
        paths: Iterable[str],
        titles: dict[str, str] | None = None,
    ) -> None:
        """Initialize registry.

        Args:
            paths: Content paths (e.g., "user-guide/sql-editor")
            titles: Optional display titles keyed by content path
        """
        self._paths = frozenset(ContentPath(normalize_path(p)) for p in paths)
        self._titles = {normalize_path(k): v for k, v in (titles or {}).items()}

    def exists(self, path: str) -> bool:
        return normalize_path(path) in self._paths

    def list_all_paths(self) -> set[ContentPath]:
        return set(self._paths)

    def title(self, path: str) -> str | None:
        return self._titles.get(normalize_path(path))

    def __len__(self) -> int:
        return len(self._paths)


class DirectoryRegistry(StaticRegistry):
    """Registry of markdown documents found under a source directory.

    The content path of a document is its path relative to the source
    directory without suffix, so "docs/user-guide/sql-editor.md" is
    "user-guide/sql-editor". Hidden and underscore-prefixed files and
    directories are partials and are skipped.
    """

    __slots__ = ("_source_dir",)

    def __init__(
        self,
        source_dir: Path,
        extensions: Iterable[str] = (".md", ".mdx"),
    ) -> None:
        """Scan source directory.

        Args:
            source_dir: Root directory containing documents
            extensions: File suffixes that count as documents
        """
        self._source_dir = source_dir
        suffixes = frozenset(extensions)

        paths: list[str] = []
        titles: dict[str, str] = {}
        if not source_dir.is_dir():
            logger.warning(f"Source directory not found: {source_dir}")
        else:
            for file_path in sorted(source_dir.rglob("*")):
                if file_path.suffix not in suffixes or not file_path.is_file():
                    continue
                relative = file_path.relative_to(source_dir)
                if any(part.startswith((".", "_")) for part in relative.parts):
                    continue

                content_path = relative.with_suffix("").as_posix()
                paths.append(content_path)
                title = _extract_title(file_path)
                if title is not None:
                    titles[content_path] = title

        logger.debug(f"Found {len(paths)} documents in {source_dir}")
        super().__init__(paths, titles)

    @property
    def source_dir(self) -> Path:
        """Root directory containing documents."""
        return self._source_dir


def _extract_title(file_path: Path) -> str | None:
    """Extract title from frontmatter or first H1 heading."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {file_path}: {e}")
        return None

    frontmatter = _FRONTMATTER_RE.match(text)
    if frontmatter:
        match = _FRONTMATTER_TITLE_RE.search(frontmatter.group(1))
        if match:
            return match.group(1).strip("\"'")
        text = text[frontmatter.end():]

    match = _H1_RE.search(text)
    if match:
        return match.group(1)
    return None
