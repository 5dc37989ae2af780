"""Sitemap generation from navigation trees."""

from collections.abc import Iterable, Mapping
from xml.etree import ElementTree as ET

from docnav.navigation import NavigationTree, flatten_leaves
from docnav.paths import doc_url, match_glob
from docnav.types import URLPath

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
CHANGEFREQ_VALUES = frozenset(
    {"always", "hourly", "daily", "weekly", "monthly", "yearly", "never"},
)


def collect_urls(
    trees: Mapping[str, NavigationTree],
    *,
    route_base_path: str = "/docs/",
    ignore_patterns: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> list[URLPath]:
    """Collect document URLs from all sidebars.

    Documents listed in several sidebars appear once, at their first
    position. Redirect sources should be passed as exclude so legacy URLs
    are never advertised.

    Args:
        trees: Sidebars in declaration order
        route_base_path: URL prefix for documents
        ignore_patterns: Glob patterns of URLs to leave out
        exclude: Exact URL paths to leave out

    Returns:
        URL paths in sidebar order
    """
    patterns = list(ignore_patterns)
    seen = set(exclude)
    urls: list[URLPath] = []
    for tree in trees.values():
        for path in flatten_leaves(tree):
            url = doc_url(path, route_base_path)
            if url in seen:
                continue
            seen.add(url)
            if any(match_glob(url, pattern) for pattern in patterns):
                continue
            urls.append(url)
    return urls


def build_sitemap(
    urls: Iterable[str],
    *,
    base_url: str | None = None,
    changefreq: str = "weekly",
    priority: float = 0.5,
) -> str:
    """Render a sitemaps.org urlset document.

    Args:
        urls: URL paths to list
        base_url: Site origin prepended to every path (e.g., "https://example.com")
        changefreq: Expected change frequency hint
        priority: Priority hint between 0.0 and 1.0

    Returns:
        Sitemap XML
    """
    if changefreq not in CHANGEFREQ_VALUES:
        raise ValueError(f"Invalid changefreq: {changefreq}")
    if not 0.0 <= priority <= 1.0:
        raise ValueError(f"Priority must be between 0.0 and 1.0, got {priority}")

    origin = base_url.rstrip("/") if base_url else ""
    urlset = ET.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for url in urls:
        entry = ET.SubElement(urlset, "url")
        ET.SubElement(entry, "loc").text = f"{origin}{url}"
        ET.SubElement(entry, "changefreq").text = changefreq
        ET.SubElement(entry, "priority").text = f"{priority:.1f}"

    ET.indent(urlset)
    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'
