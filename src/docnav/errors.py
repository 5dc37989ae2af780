"""Error taxonomy and build reports.

Validation never stops at the first defect. Builders collect every
SpecError they find and raise a single BuildError carrying all of them,
so one run reports every problem in a sidebar or redirect spec.
Warnings are advisory and are returned, never raised.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field


class DocnavError(Exception):
    """Base class for docnav errors."""


class SpecError(DocnavError):
    """A single defect in a declarative sidebar or redirect spec."""

    def __init__(self, message: str, *, location: str) -> None:
        """Initialize error.

        Args:
            message: Human-readable description of the defect
            location: Where the defect is (e.g., "sidebars.guides[1].children[0]")
        """
        super().__init__(f"{location}: {message}")
        self.message = message
        self.location = location


class MalformedNodeError(SpecError):
    """Descriptor is neither a valid leaf nor a valid category."""


class DuplicateLeafError(SpecError):
    """Same content path referenced twice in one tree."""

    def __init__(self, path: str, *, tree: str, locations: Sequence[str]) -> None:
        self.path = path
        self.tree = tree
        self.locations = list(locations)
        super().__init__(
            f"duplicate document '{path}' (also at {', '.join(self.locations[1:])})",
            location=self.locations[0],
        )


class UnresolvedReferenceError(SpecError):
    """Leaf references a content path missing from the registry."""

    def __init__(self, path: str, *, location: str) -> None:
        self.path = path
        super().__init__(f"document '{path}' not found", location=location)


class MalformedRedirectError(SpecError):
    """Redirect descriptor has the wrong shape or an invalid path."""


class DuplicateSourceError(SpecError):
    """Legacy path declared as a source more than once."""

    def __init__(self, source: str, *, entries: Sequence[int]) -> None:
        self.source = source
        self.entries = list(entries)
        others = ", ".join(f"redirects[{idx}]" for idx in self.entries[1:])
        super().__init__(
            f"source '{source}' is also declared in {others}",
            location=f"redirects[{self.entries[0]}]",
        )


class SelfRedirectError(SpecError):
    """Source path equals its own target."""

    def __init__(self, source: str, *, entry: int) -> None:
        self.source = source
        self.entry = entry
        super().__init__(f"'{source}' redirects to itself", location=f"redirects[{entry}]")


class ChainedRedirectError(SpecError):
    """Target path is itself the source of another redirect."""

    def __init__(self, path: str, *, entry: int, source_entry: int) -> None:
        self.path = path
        self.entry = entry
        self.source_entry = source_entry
        super().__init__(
            f"target '{path}' is redirected again by redirects[{source_entry}]; "
            "point this entry at the final target instead",
            location=f"redirects[{entry}]",
        )


class UnknownSidebarError(SpecError):
    """Navbar references a sidebar that is not declared."""

    def __init__(self, name: str, *, location: str) -> None:
        self.name = name
        super().__init__(f"sidebar '{name}' is not declared", location=location)


class BuildError(DocnavError):
    """Build failed with one or more spec errors."""

    def __init__(self, subject: str, errors: Sequence[SpecError]) -> None:
        """Initialize error.

        Args:
            subject: What was being built (e.g., "sidebar 'docs'")
            errors: Every defect found during the build
        """
        self.subject = subject
        self.errors = list(errors)
        lines = [f"{subject}: {len(self.errors)} error(s)"]
        lines.extend(f"  {error}" for error in self.errors)
        super().__init__("\n".join(lines))


class DanglingRedirectWarning(UserWarning):
    """Redirect target does not match any known page."""

    def __init__(self, target: str, sources: Sequence[str]) -> None:
        self.target = target
        self.sources = list(sources)
        super().__init__(
            f"redirect target '{target}' does not match any known page "
            f"(from {', '.join(self.sources)})",
        )


@dataclass
class BuildReport:
    """Errors and warnings collected during a build."""

    errors: list[SpecError] = field(default_factory=list)
    warnings: list[Warning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether the build may proceed. Warnings never fail a build."""
        return not self.errors

    def raise_for_errors(self, subject: str = "site") -> None:
        """Raise BuildError if any errors were collected."""
        if self.errors:
            raise BuildError(subject, self.errors)

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Convert to dictionary for JSON serialization."""
        return {
            "errors": [
                {"type": type(error).__name__, "location": error.location, "message": error.message}
                for error in self.errors
            ],
            "warnings": [
                {"type": type(warning).__name__, "message": str(warning)}
                for warning in self.warnings
            ],
        }
