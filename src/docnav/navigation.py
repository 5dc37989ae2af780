"""Navigation tree builder.

Builds immutable navigation trees (one per sidebar) from declarative specs
of nested categories and document references. Sibling order is exactly the
authored order; nothing is sorted.

A spec is a list of node descriptors:

    "user-guide/sql-editor"                              # leaf shorthand
    {"kind": "leaf", "path": "user-guide/sql-editor"}    # leaf
    {"kind": "category", "label": "User Guide", "collapsed": False,
     "children": [...]}                                  # category

The sidebars.js spelling ("type", "doc"/"id", "items") is accepted too.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypedDict

from docnav.errors import (
    BuildError,
    DuplicateLeafError,
    MalformedNodeError,
    SpecError,
    UnresolvedReferenceError,
)
from docnav.paths import doc_url, find_duplicates, normalize_path, walk
from docnav.registry import ContentRegistry
from docnav.types import ContentPath

logger = logging.getLogger(__name__)

_LEAF_KINDS = frozenset({"leaf", "doc"})
_LEAF_KEYS = frozenset({"kind", "type", "path", "id", "label"})
_CATEGORY_KEYS = frozenset({"kind", "type", "label", "collapsed", "children", "items"})


class NavItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation node."""

    type: str
    label: str
    path: str
    url: str
    collapsed: bool
    items: list[NavItemDict]


class NavigationTreeDict(TypedDict):
    """Dictionary representation of a navigation tree."""

    name: str
    items: list[NavItemDict]


@dataclass(frozen=True)
class Leaf:
    """Reference to one document."""

    path: ContentPath
    label: str | None = None

    def to_dict(
        self,
        registry: ContentRegistry | None = None,
        route_base_path: str = "/docs/",
    ) -> NavItemDict:
        """Convert to dictionary for JSON serialization.

        The label falls back to the registry title, then to the path.
        """
        label = self.label
        if label is None and registry is not None:
            label = registry.title(self.path)
        return {
            "type": "doc",
            "label": label or self.path,
            "path": self.path,
            "url": doc_url(self.path, route_base_path),
        }


@dataclass(frozen=True)
class Category:
    """Labelled group of child nodes."""

    label: str
    collapsed: bool = True
    items: tuple[NavNode, ...] = ()

    def to_dict(
        self,
        registry: ContentRegistry | None = None,
        route_base_path: str = "/docs/",
    ) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": "category",
            "label": self.label,
            "collapsed": self.collapsed,
            "items": [item.to_dict(registry, route_base_path) for item in self.items],
        }


NavNode = Leaf | Category


@dataclass(frozen=True)
class NavigationTree:
    """Named, validated forest of navigation nodes for one sidebar."""

    name: str
    items: tuple[NavNode, ...]

    def to_dict(
        self,
        registry: ContentRegistry | None = None,
        route_base_path: str = "/docs/",
    ) -> NavigationTreeDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "items": [item.to_dict(registry, route_base_path) for item in self.items],
        }


class _SpecParser:
    """Parses descriptors into nodes, collecting every defect."""

    def __init__(self) -> None:
        self.errors: list[SpecError] = []
        self.leaves: list[tuple[ContentPath, str]] = []
        self._active: set[int] = set()

    def parse_items(self, spec: object, location: str) -> tuple[NavNode, ...]:
        if not isinstance(spec, (list, tuple)):
            self._malformed(f"expected a list of nodes, got {type(spec).__name__}", location)
            return ()

        # A list that contains itself would never terminate
        if id(spec) in self._active:
            self._malformed("node list contains itself", location)
            return ()

        self._active.add(id(spec))
        try:
            nodes: list[NavNode] = []
            for idx, descriptor in enumerate(spec):
                node = self._parse_node(descriptor, f"{location}[{idx}]")
                if node is not None:
                    nodes.append(node)
        finally:
            self._active.discard(id(spec))
        return tuple(nodes)

    def _parse_node(self, descriptor: object, location: str) -> NavNode | None:
        if isinstance(descriptor, str):
            return self._leaf(descriptor, None, location)

        if not isinstance(descriptor, Mapping):
            self._malformed(
                f"expected a document path or a mapping, got {type(descriptor).__name__}",
                location,
            )
            return None

        kind = self._aliased(descriptor, "kind", "type", location)
        if kind is None:
            self._malformed("missing 'kind'", location)
            return None
        if not isinstance(kind, str):
            self._malformed(f"'kind' must be a string, got {type(kind).__name__}", location)
            return None
        if kind in _LEAF_KINDS:
            return self._parse_leaf(descriptor, location)
        if kind == "category":
            return self._parse_category(descriptor, location)

        self._malformed(f"unknown kind {kind!r}", location)
        return None

    def _parse_leaf(self, descriptor: Mapping[str, object], location: str) -> Leaf | None:
        if not self._check_keys(descriptor, _LEAF_KEYS, location):
            return None

        path = self._aliased(descriptor, "path", "id", location)
        label = descriptor.get("label")
        if label is not None and (not isinstance(label, str) or not label):
            self._malformed("'label' must be a non-empty string", location)
            return None
        return self._leaf(path, label, location)

    def _parse_category(
        self,
        descriptor: Mapping[str, object],
        location: str,
    ) -> Category | None:
        if not self._check_keys(descriptor, _CATEGORY_KEYS, location):
            return None

        valid = True
        label = descriptor.get("label")
        if not isinstance(label, str) or not label:
            self._malformed("category 'label' must be a non-empty string", location)
            valid = False

        collapsed = descriptor.get("collapsed", True)
        if not isinstance(collapsed, bool):
            self._malformed("category 'collapsed' must be a boolean", location)
            valid = False

        children = self._aliased(descriptor, "children", "items", location)
        if children is None:
            self._malformed("category is missing 'children'", location)
            return None

        # Children are parsed even when this category is invalid so their
        # defects are reported in the same pass
        items = self.parse_items(children, f"{location}.children")
        if not valid:
            return None
        return Category(label=label, collapsed=collapsed, items=items)

    def _leaf(self, path: object, label: str | None, location: str) -> Leaf | None:
        if not isinstance(path, str) or not normalize_path(path):
            self._malformed("document path must be a non-empty string", location)
            return None
        content_path = ContentPath(normalize_path(path))
        self.leaves.append((content_path, location))
        return Leaf(path=content_path, label=label)

    def _aliased(
        self,
        descriptor: Mapping[str, object],
        key: str,
        alias: str,
        location: str,
    ) -> object:
        if key in descriptor and alias in descriptor:
            self._malformed(f"both '{key}' and '{alias}' given", location)
        return descriptor.get(key, descriptor.get(alias))

    def _check_keys(
        self,
        descriptor: Mapping[str, object],
        allowed: frozenset[str],
        location: str,
    ) -> bool:
        unknown = sorted(str(k) for k in descriptor if k not in allowed)
        if unknown:
            self._malformed(f"unknown keys: {', '.join(unknown)}", location)
            return False
        return True

    def _malformed(self, message: str, location: str) -> None:
        self.errors.append(MalformedNodeError(message, location=location))


def build_tree(name: str, spec: object, registry: ContentRegistry) -> NavigationTree:
    """Build a validated navigation tree.

    Args:
        name: Sidebar name (e.g., "guides")
        spec: Ordered list of node descriptors
        registry: Registry that every document reference must resolve in

    Returns:
        Immutable NavigationTree

    Raises:
        BuildError: With every MalformedNodeError, DuplicateLeafError and
            UnresolvedReferenceError found in the spec
    """
    parser = _SpecParser()
    items = parser.parse_items(spec, name)
    errors = parser.errors

    paths = [path for path, _ in parser.leaves]
    for path, positions in find_duplicates(paths).items():
        errors.append(
            DuplicateLeafError(
                path,
                tree=name,
                locations=[parser.leaves[idx][1] for idx in positions],
            ),
        )

    seen: set[str] = set()
    for path, location in parser.leaves:
        if path in seen:
            continue
        seen.add(path)
        if not registry.exists(path):
            errors.append(UnresolvedReferenceError(path, location=location))

    if errors:
        raise BuildError(f"sidebar '{name}'", errors)

    logger.debug(f"Built sidebar '{name}' with {len(paths)} documents")
    return NavigationTree(name=name, items=items)


def build_trees(
    specs: Mapping[str, object],
    registry: ContentRegistry,
) -> dict[str, NavigationTree]:
    """Build every named sidebar independently.

    Args:
        specs: Sidebar name to spec, in declaration order
        registry: Registry shared by all sidebars

    Returns:
        Sidebar name to NavigationTree, in declaration order

    Raises:
        BuildError: With the errors of every failing sidebar
    """
    trees: dict[str, NavigationTree] = {}
    errors: list[SpecError] = []
    for name, spec in specs.items():
        try:
            trees[name] = build_tree(name, spec, registry)
        except BuildError as e:
            errors.extend(e.errors)

    if errors:
        raise BuildError("sidebars", errors)
    return trees


def flatten_leaves(tree: NavigationTree) -> tuple[ContentPath, ...]:
    """List document paths depth-first in pre-order.

    Args:
        tree: Navigation tree

    Returns:
        Content paths in authored order
    """
    return tuple(node.path for _, node in walk(tree.items) if isinstance(node, Leaf))
