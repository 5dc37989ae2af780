"""aiohttp preview server for Docnav.

Serves navigation data as JSON, answers legacy paths with permanent
redirects and publishes the sitemap. Page content is not rendered here.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from aiohttp import web

from docnav.api.navigation import create_navigation_routes
from docnav.api.report import create_report_routes
from docnav.api.sitemap import create_sitemap_routes
from docnav.app_keys import site_loader_key
from docnav.config import Config
from docnav.site import SiteLoader

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def redirect_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Answer legacy paths with 301 to their canonical path.

    Only paths that no route serves are looked up, so a redirect source can
    never shadow the API, the sitemap or the live reload socket.
    """
    if isinstance(request.match_info.http_exception, web.HTTPNotFound):
        target = request.app[site_loader_key].load().resolve(request.path)
        if target is not None:
            location = f"{target}?{request.query_string}" if request.query_string else target
            logger.debug(f"Redirecting {request.path} to {location}")
            raise web.HTTPMovedPermanently(location=location)
    return await handler(request)


def create_app(
    config: Config,
    *,
    config_loader: Callable[[], Config] | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        config_loader: Re-reads configuration when the site is rebuilt

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[redirect_middleware])

    site_loader = SiteLoader(config, config_loader=config_loader)
    app[site_loader_key] = site_loader
    app.on_startup.append(_build_site)

    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_report_routes())
    if config.sitemap.enabled:
        app.router.add_routes(create_sitemap_routes(config.sitemap.filename))

    if config.live_reload.enabled:
        from docnav.live import LiveReloadManager
        from docnav.live.reload import create_live_reload_routes

        watch_files = [p for p in (config.config_path, config.docs.sidebars_file) if p is not None]
        manager = LiveReloadManager(
            config.docs.source_dir,
            site_loader,
            watch_patterns=config.live_reload.watch_patterns,
            watch_files=watch_files,
        )
        app["live_reload_manager"] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _build_site(app: web.Application) -> None:
    """Build the initial site off the event loop before serving requests."""
    await asyncio.to_thread(app[site_loader_key].load)


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    from docnav.live import LiveReloadManager

    manager: LiveReloadManager = app["live_reload_manager"]
    await manager.start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    from docnav.live import LiveReloadManager

    manager: LiveReloadManager = app["live_reload_manager"]
    await manager.stop()


def run_server(
    config: Config,
    *,
    config_loader: Callable[[], Config] | None = None,
) -> None:
    """Run the server.

    Args:
        config: Application configuration
        config_loader: Re-reads configuration when the site is rebuilt
    """
    app = create_app(config, config_loader=config_loader)
    web.run_app(app, host=config.server.host, port=config.server.port)
