"""Docnav - navigation trees and redirect tables for documentation sites."""

from docnav.errors import (
    BuildError,
    BuildReport,
    ChainedRedirectError,
    DanglingRedirectWarning,
    DuplicateLeafError,
    DuplicateSourceError,
    MalformedNodeError,
    MalformedRedirectError,
    SelfRedirectError,
    SpecError,
    UnknownSidebarError,
    UnresolvedReferenceError,
)
from docnav.navigation import Category, Leaf, NavigationTree, build_tree, build_trees, flatten_leaves
from docnav.redirects import (
    RedirectEntry,
    ResolutionMap,
    build_redirects,
    compile_redirects,
    parse_redirects,
    validate_targets,
)
from docnav.registry import ContentRegistry, DirectoryRegistry, StaticRegistry

__all__ = [
    "BuildError",
    "BuildReport",
    "Category",
    "ChainedRedirectError",
    "ContentRegistry",
    "DanglingRedirectWarning",
    "DirectoryRegistry",
    "DuplicateLeafError",
    "DuplicateSourceError",
    "Leaf",
    "MalformedNodeError",
    "MalformedRedirectError",
    "NavigationTree",
    "RedirectEntry",
    "ResolutionMap",
    "SelfRedirectError",
    "SpecError",
    "StaticRegistry",
    "UnknownSidebarError",
    "UnresolvedReferenceError",
    "build_redirects",
    "build_tree",
    "build_trees",
    "compile_redirects",
    "flatten_leaves",
    "parse_redirects",
    "validate_targets",
]
