"""Redirect table compilation and lookup.

Legacy URLs are declared as entries mapping one or more source paths to a
single canonical target. Resolution is single-hop: an entry may not point at
a path that is itself redirected, so chains have to be flattened by the
author before they are declared.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from docnav.errors import (
    BuildError,
    ChainedRedirectError,
    DanglingRedirectWarning,
    DuplicateSourceError,
    MalformedRedirectError,
    SelfRedirectError,
    SpecError,
)
from docnav.paths import find_duplicates, normalize_path

logger = logging.getLogger(__name__)

_REDIRECT_KEYS = frozenset({"sources", "from", "target", "to"})


@dataclass(frozen=True)
class RedirectEntry:
    """Legacy source paths and the canonical path they redirect to."""

    sources: tuple[str, ...]
    target: str


class ResolutionMap:
    """Compiled, read-only redirect table with O(1) lookups."""

    __slots__ = ("_entries", "_targets")

    def __init__(self, entries: Sequence[RedirectEntry]) -> None:
        """Initialize map from already validated entries.

        Use compile_redirects() to build a map from untrusted input.
        """
        self._entries = tuple(entries)
        self._targets = {
            source: entry.target for entry in self._entries for source in entry.sources
        }

    def resolve(self, request_path: str) -> str | None:
        """Look up the canonical path for a legacy path.

        Args:
            request_path: Requested URL path (e.g., "/docs/data-policy/overview/")

        Returns:
            Target path, or None if request_path is not a legacy path
        """
        return self._targets.get(normalize_path(request_path))

    @property
    def entries(self) -> tuple[RedirectEntry, ...]:
        """Entries in declaration order."""
        return self._entries

    def sources(self) -> set[str]:
        """All legacy paths."""
        return set(self._targets)

    def to_dict(self) -> list[dict[str, str | list[str]]]:
        """Convert to list of dictionaries for JSON serialization."""
        return [{"from": list(entry.sources), "to": entry.target} for entry in self._entries]

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._targets

    def __iter__(self) -> Iterator[str]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolutionMap):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"ResolutionMap({len(self._targets)} sources, {len(self._entries)} entries)"


def parse_redirects(descriptors: object) -> list[RedirectEntry]:
    """Parse redirect descriptors into entries.

    Each descriptor is a mapping with "sources" (or "from") holding a path
    or a list of paths, and "target" (or "to") holding one path. All paths
    must start with "/".

    Args:
        descriptors: Ordered list of redirect descriptors

    Returns:
        Entries in declaration order, with normalized paths

    Raises:
        BuildError: With a MalformedRedirectError for every bad descriptor
    """
    indexed, errors = _parse_indexed(descriptors)
    if errors:
        raise BuildError("redirects", errors)
    return [entry for _, entry in indexed]


def _parse_indexed(
    descriptors: object,
) -> tuple[list[tuple[int, RedirectEntry]], list[SpecError]]:
    """Parse every well-formed descriptor, keeping its declaration index."""
    if not isinstance(descriptors, (list, tuple)):
        return [], [MalformedRedirectError("expected a list of redirects", location="redirects")]

    indexed: list[tuple[int, RedirectEntry]] = []
    errors: list[SpecError] = []
    for idx, descriptor in enumerate(descriptors):
        try:
            indexed.append((idx, _parse_entry(descriptor, f"redirects[{idx}]")))
        except MalformedRedirectError as e:
            errors.append(e)
    return indexed, errors


def _parse_entry(descriptor: object, location: str) -> RedirectEntry:
    if not isinstance(descriptor, Mapping):
        raise MalformedRedirectError("expected a mapping", location=location)

    unknown = sorted(str(k) for k in descriptor if k not in _REDIRECT_KEYS)
    if unknown:
        raise MalformedRedirectError(f"unknown keys: {', '.join(unknown)}", location=location)
    if "sources" in descriptor and "from" in descriptor:
        raise MalformedRedirectError("both 'sources' and 'from' given", location=location)
    if "target" in descriptor and "to" in descriptor:
        raise MalformedRedirectError("both 'target' and 'to' given", location=location)

    raw_sources = descriptor.get("sources", descriptor.get("from"))
    if isinstance(raw_sources, str):
        raw_sources = [raw_sources]
    if not isinstance(raw_sources, (list, tuple)) or not raw_sources:
        raise MalformedRedirectError(
            "'from' must be a path or a non-empty list of paths",
            location=location,
        )

    sources = tuple(_parse_path(source, "'from'", location) for source in raw_sources)
    target = _parse_path(descriptor.get("target", descriptor.get("to")), "'to'", location)
    return RedirectEntry(sources=sources, target=target)


def _parse_path(value: object, field_name: str, location: str) -> str:
    if not isinstance(value, str) or not value.startswith("/"):
        raise MalformedRedirectError(
            f"{field_name} paths must be strings starting with '/', got {value!r}",
            location=location,
        )
    return normalize_path(value)


def compile_redirects(entries: Iterable[RedirectEntry]) -> ResolutionMap:
    """Validate redirect entries and compile them into a resolution map.

    Args:
        entries: Redirect entries in declaration order

    Returns:
        ResolutionMap mapping every source path to its target

    Raises:
        BuildError: With every DuplicateSourceError, SelfRedirectError and
            ChainedRedirectError found
    """
    indexed = [
        (
            idx,
            RedirectEntry(
                sources=tuple(normalize_path(source) for source in entry.sources),
                target=normalize_path(entry.target),
            ),
        )
        for idx, entry in enumerate(entries)
    ]

    errors = _check_entries(indexed)
    if errors:
        raise BuildError("redirects", errors)
    return _to_map(indexed)


def build_redirects(descriptors: object) -> ResolutionMap:
    """Parse and compile a redirect table, reporting every defect at once.

    Malformed descriptors are skipped for the remaining checks, so a typo in
    one entry does not hide a duplicate, self or chained redirect elsewhere.
    Error locations always refer to the declared position.

    Args:
        descriptors: Ordered list of redirect descriptors

    Returns:
        ResolutionMap mapping every source path to its target

    Raises:
        BuildError: With every MalformedRedirectError, followed by every
            DuplicateSourceError, SelfRedirectError and ChainedRedirectError
    """
    indexed, errors = _parse_indexed(descriptors)
    errors.extend(_check_entries(indexed))
    if errors:
        raise BuildError("redirects", errors)
    return _to_map(indexed)


def _check_entries(indexed: Sequence[tuple[int, RedirectEntry]]) -> list[SpecError]:
    errors: list[SpecError] = []
    declared: list[tuple[str, int]] = [
        (source, idx) for idx, entry in indexed for source in entry.sources
    ]

    for source, positions in find_duplicates(source for source, _ in declared).items():
        errors.append(
            DuplicateSourceError(source, entries=[declared[pos][1] for pos in positions]),
        )

    source_entry: dict[str, int] = {}
    for source, idx in declared:
        source_entry.setdefault(source, idx)

    for idx, entry in indexed:
        if entry.target in entry.sources:
            errors.append(SelfRedirectError(entry.target, entry=idx))
        elif entry.target in source_entry:
            errors.append(
                ChainedRedirectError(
                    entry.target,
                    entry=idx,
                    source_entry=source_entry[entry.target],
                ),
            )
    return errors


def _to_map(indexed: Sequence[tuple[int, RedirectEntry]]) -> ResolutionMap:
    resolution_map = ResolutionMap([entry for _, entry in indexed])
    logger.debug(f"Compiled {len(resolution_map)} redirects from {len(indexed)} entries")
    return resolution_map


def validate_targets(
    resolution_map: ResolutionMap,
    known_paths: Iterable[str],
) -> list[DanglingRedirectWarning]:
    """Report redirect targets that do not match known content.

    Dangling targets are advisory: content may be reorganized independently
    of the redirect table, so they never fail a build.

    Args:
        resolution_map: Compiled redirects
        known_paths: URL paths that exist

    Returns:
        One warning per dangling target, in declaration order
    """
    known = {normalize_path(path) for path in known_paths}

    sources_by_target: dict[str, list[str]] = {}
    for entry in resolution_map.entries:
        sources_by_target.setdefault(entry.target, []).extend(entry.sources)

    warnings: list[DanglingRedirectWarning] = []
    for target, sources in sources_by_target.items():
        if target not in known:
            warning = DanglingRedirectWarning(target, sources)
            logger.warning(str(warning))
            warnings.append(warning)
    return warnings
