"""Core type definitions."""

from typing import NewType

# Content path as authored in sidebars (e.g., "user-guide/sql-editor")
# Identifies a unit in the content registry, not a URL
ContentPath = NewType("ContentPath", str)

# URL path for routing (e.g., "/docs/user-guide/sql-editor")
# Distinct from ContentPath to catch type mismatches
URLPath = NewType("URLPath", str)
