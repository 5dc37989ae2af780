"""Build report and redirect table endpoints."""

from aiohttp import web

from docnav.app_keys import site_loader_key


def create_report_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/report", get_report),
        web.get("/api/redirects", get_redirects),
    ]


async def get_report(request: web.Request) -> web.Response:
    loader = request.app[site_loader_key]
    site = loader.load()
    # Latest attempt, which may differ from the site still being served
    report = loader.last_report or site.report
    return web.json_response({"ok": report.ok, **report.to_dict()})


async def get_redirects(request: web.Request) -> web.Response:
    site = request.app[site_loader_key].load()
    return web.json_response({"redirects": site.redirects.to_dict()})
