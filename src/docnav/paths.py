"""Shared validation helpers for navigation trees and redirect tables.

Paths are treated as opaque, case-sensitive strings. The only normalization
applied is stripping trailing slashes, so "/docs/guide/" and "/docs/guide"
compare equal while "/docs/Guide" does not.
"""

import re
from collections.abc import Callable, Hashable, Iterable, Iterator, Sequence
from functools import lru_cache
from typing import Any, TypeVar

from docnav.types import ContentPath, URLPath

T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


def normalize_path(path: str) -> str:
    """Strip trailing slashes from a path.

    The root path "/" is kept as is. No other URL semantics are applied:
    case, query strings and percent-encoding are left untouched.

    Args:
        path: Raw path as authored

    Returns:
        Normalized path
    """
    stripped = path.rstrip("/")
    if not stripped and path.startswith("/"):
        return "/"
    return stripped


def find_duplicates(values: Iterable[H]) -> dict[H, list[int]]:
    """Find values that occur more than once.

    Args:
        values: Ordered sequence of hashable values

    Returns:
        Mapping of each repeated value to every position it occurs at,
        in order of first occurrence
    """
    positions: dict[H, list[int]] = {}
    for idx, value in enumerate(values):
        positions.setdefault(value, []).append(idx)
    return {value: idxs for value, idxs in positions.items() if len(idxs) > 1}


def _default_children(node: Any) -> Sequence[Any]:
    return getattr(node, "items", ())


def walk(
    nodes: Sequence[T],
    children: Callable[[T], Sequence[T]] = _default_children,
) -> Iterator[tuple[int, T]]:
    """Traverse a forest depth-first in pre-order.

    Sibling order is preserved. Iterative, so deep trees do not hit the
    recursion limit.

    Args:
        nodes: Root nodes of the forest
        children: Returns the ordered children of a node

    Yields:
        (depth, node) pairs, roots at depth 0
    """
    stack: list[tuple[int, T]] = [(0, node) for node in reversed(nodes)]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        stack.extend((depth + 1, child) for child in reversed(children(node)))


def doc_url(path: ContentPath | str, route_base_path: str = "/docs/") -> URLPath:
    """Map a content path to the URL it is served at.

    A trailing "index" segment maps to its directory, so "guide/index"
    is served at "/docs/guide".

    Args:
        path: Content path (e.g., "user-guide/sql-editor")
        route_base_path: URL prefix for documents

    Returns:
        URL path (e.g., "/docs/user-guide/sql-editor")
    """
    base = normalize_path(route_base_path)
    doc = normalize_path(path).lstrip("/")
    if doc == "index":
        doc = ""
    elif doc.endswith("/index"):
        doc = doc.removesuffix("/index")

    if not doc:
        return URLPath(base)
    if base == "/":
        return URLPath(f"/{doc}")
    return URLPath(f"{base}/{doc}")


@lru_cache(maxsize=128)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("/**", i) and i + 3 == len(pattern):
            # Trailing "/**" matches the directory itself and everything below
            parts.append("(?:/.*)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(parts))


def match_glob(path: str, pattern: str) -> bool:
    """Check a URL path against a glob pattern.

    Supports "*" (within one segment), "**" (across segments) and "?".

    Args:
        path: URL path to test
        pattern: Glob pattern (e.g., "/docs/tags/**")

    Returns:
        True if the whole path matches
    """
    return _compile_glob(normalize_path(pattern)).fullmatch(normalize_path(path)) is not None
