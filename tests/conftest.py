"""Shared test fixtures."""

from pathlib import Path

import pytest
from docnav.config import (
    Config,
    DocsConfig,
    LiveReloadConfig,
    ServerConfig,
    SiteConfig,
    SitemapConfig,
)
from docnav.registry import StaticRegistry


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create docs directory with a small documentation set."""
    docs = tmp_path / "docs"
    (docs / "user-guide").mkdir(parents=True)
    (docs / "intro.md").write_text("# Introduction\n\nWelcome.")
    (docs / "faq.md").write_text("# FAQ\n\nQuestions.")
    (docs / "user-guide" / "sql-editor.md").write_text("# SQL Editor\n\nQueries.")
    (docs / "user-guide" / "users.mdx").write_text("# Users\n\nAccounts.")
    return docs


@pytest.fixture
def registry() -> StaticRegistry:
    """Registry with the documents of the docs_dir fixture."""
    return StaticRegistry(
        ["intro", "faq", "user-guide/sql-editor", "user-guide/users"],
        titles={"intro": "Introduction", "faq": "FAQ"},
    )


@pytest.fixture
def test_config(docs_dir: Path) -> Config:
    """Create a test configuration over docs_dir.

    Declares two sidebars sharing one document and a redirect table with
    one dangling target.
    """
    return Config(
        server=ServerConfig(),
        docs=DocsConfig(source_dir=docs_dir),
        site=SiteConfig(url="https://example.com", navbar=["docs", "guides"]),
        sitemap=SitemapConfig(),
        live_reload=LiveReloadConfig(enabled=False),
        sidebars={
            "docs": [
                {
                    "type": "category",
                    "label": "Guide",
                    "collapsed": False,
                    "items": ["intro"],
                },
                "faq",
            ],
            "guides": [
                {
                    "kind": "category",
                    "label": "User Guide",
                    "children": ["user-guide/sql-editor", "user-guide/users", "intro"],
                },
            ],
        },
        redirects=[
            {"from": ["/docs/old-intro", "/docs/start"], "to": "/docs/intro"},
            {"from": "/docs/legacy-faq", "to": "/docs/faq"},
            {"from": "/docs/gone", "to": "/docs/missing"},
        ],
    )
