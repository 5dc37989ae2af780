"""Application keys for type-safe app configuration access."""

from aiohttp import web

from docnav.site import SiteLoader

site_loader_key = web.AppKey("site_loader", SiteLoader)
