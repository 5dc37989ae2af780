"""Navigation API endpoints.

Provides all sidebars and single-sidebar endpoints.
"""

from aiohttp import web

from docnav.app_keys import site_loader_key
from docnav.navigation import flatten_leaves


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/navigation", get_navigation),
        web.get("/api/navigation/{name}", get_sidebar),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    site = request.app[site_loader_key].load()
    return web.json_response(site.to_dict())


async def get_sidebar(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    site = request.app[site_loader_key].load()

    tree = site.get_tree(name)
    if tree is None:
        return web.json_response(
            {"error": "Sidebar not found", "name": name},
            status=404,
        )

    data = tree.to_dict(site.registry, site.route_base_path)
    return web.json_response({**data, "documents": list(flatten_leaves(tree))})
