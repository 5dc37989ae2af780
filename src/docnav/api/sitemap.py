"""Sitemap endpoint.

Serves sitemap.xml built from the current sidebars, with ETag support.
"""

from hashlib import md5

from aiohttp import web

from docnav.app_keys import site_loader_key
from docnav.site import render_sitemap


def create_sitemap_routes(filename: str) -> list[web.RouteDef]:
    return [
        web.get(f"/{filename}", get_sitemap),
    ]


async def get_sitemap(request: web.Request) -> web.Response:
    loader = request.app[site_loader_key]
    body = render_sitemap(loader.load(), loader.config)

    etag = _compute_etag(body)

    if_none_match = request.headers.get("If-None-Match")
    if if_none_match == etag:
        return web.Response(status=304)

    return web.Response(
        text=body,
        content_type="application/xml",
        headers={
            "ETag": etag,
            "Cache-Control": "public, max-age=300",
        },
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) are enough for cache validation
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
