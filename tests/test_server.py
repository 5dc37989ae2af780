"""Tests for server module."""

from dataclasses import replace
from typing import Any

import pytest
from aiohttp import web
from docnav.app_keys import site_loader_key
from docnav.config import Config, LiveReloadConfig
from docnav.server import create_app


class TestCreateApp:
    """Tests for create_app()."""

    def test__valid_config__returns_configured_app(self, test_config: Config) -> None:
        """Create app with site loader over the configuration."""
        app = create_app(test_config)

        assert site_loader_key in app
        assert app[site_loader_key].config is test_config
        assert "live_reload_manager" not in app

    def test__live_reload_enabled__registers_manager(self, test_config: Config) -> None:
        """Register live reload manager when enabled."""
        config = replace(test_config, live_reload=LiveReloadConfig(enabled=True))

        app = create_app(config)

        assert "live_reload_manager" in app


    @pytest.mark.asyncio
    async def test__startup__builds_site_before_requests(
        self,
        aiohttp_client: Any,
        test_config: Config,
    ) -> None:
        """Build the initial site while the app starts up."""
        app = create_app(test_config)

        await aiohttp_client(app)

        assert app[site_loader_key].last_report is not None


class TestRedirectMiddleware:
    """Tests for legacy path redirects."""

    @pytest.fixture
    def app(self, test_config: Config) -> web.Application:
        return create_app(test_config)

    @pytest.mark.asyncio
    async def test__legacy_path__redirects_permanently(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Answer legacy path with 301 to its target."""
        client = await aiohttp_client(app)
        response = await client.get("/docs/old-intro", allow_redirects=False)

        assert response.status == 301
        assert response.headers["Location"] == "/docs/intro"

    @pytest.mark.asyncio
    async def test__trailing_slash__redirects(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Match legacy path with trailing slash."""
        client = await aiohttp_client(app)
        response = await client.get("/docs/legacy-faq/", allow_redirects=False)

        assert response.status == 301
        assert response.headers["Location"] == "/docs/faq"

    @pytest.mark.asyncio
    async def test__query_string__preserved(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Carry query string over to the target."""
        client = await aiohttp_client(app)
        response = await client.get("/docs/start?tab=sql", allow_redirects=False)

        assert response.status == 301
        assert response.headers["Location"] == "/docs/intro?tab=sql"

    @pytest.mark.asyncio
    async def test__other_path__not_redirected(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Serve other paths normally."""
        client = await aiohttp_client(app)
        response = await client.get("/docs/intro", allow_redirects=False)

        assert response.status == 404


    @pytest.mark.asyncio
    async def test__served_route__not_shadowed_by_redirect(
        self,
        aiohttp_client: Any,
        test_config: Config,
    ) -> None:
        """Serve own routes even when declared as redirect sources."""
        redirects = [
            *test_config.redirects,
            {"from": ["/sitemap.xml", "/api/report"], "to": "/docs/intro"},
        ]
        client = await aiohttp_client(create_app(replace(test_config, redirects=redirects)))

        sitemap = await client.get("/sitemap.xml", allow_redirects=False)
        report = await client.get("/api/report", allow_redirects=False)

        assert sitemap.status == 200
        assert report.status == 200


class TestSitemapRoute:
    """Tests for GET /sitemap.xml."""

    @pytest.mark.asyncio
    async def test__sitemap__served_as_xml(
        self,
        aiohttp_client: Any,
        test_config: Config,
    ) -> None:
        """Serve sitemap with ETag."""
        client = await aiohttp_client(create_app(test_config))
        response = await client.get("/sitemap.xml")

        assert response.status == 200
        assert response.headers["Content-Type"].startswith("application/xml")
        assert "ETag" in response.headers
        body = await response.text()
        assert "<loc>https://example.com/docs/faq</loc>" in body

    @pytest.mark.asyncio
    async def test__matching_etag__not_modified(
        self,
        aiohttp_client: Any,
        test_config: Config,
    ) -> None:
        """Return 304 when ETag matches."""
        client = await aiohttp_client(create_app(test_config))
        first = await client.get("/sitemap.xml")

        response = await client.get(
            "/sitemap.xml",
            headers={"If-None-Match": first.headers["ETag"]},
        )

        assert response.status == 304

    @pytest.mark.asyncio
    async def test__sitemap_disabled__not_found(
        self,
        aiohttp_client: Any,
        test_config: Config,
    ) -> None:
        """Do not serve sitemap when disabled."""
        config = replace(test_config, sitemap=replace(test_config.sitemap, enabled=False))
        client = await aiohttp_client(create_app(config))

        response = await client.get("/sitemap.xml")

        assert response.status == 404
