"""Configuration management for Docnav.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from docnav.sitemap import CHANGEFREQ_VALUES

CONFIG_FILENAME = "docnav.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class DocsConfig:
    """Documentation configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))
    route_base_path: str = "/docs/"
    extensions: list[str] = field(default_factory=lambda: [".md", ".mdx"])
    sidebars_file: Path | None = None


@dataclass
class SiteConfig:
    """Site-wide settings."""

    url: str | None = None
    navbar: list[str] = field(default_factory=list)


@dataclass
class SitemapConfig:
    """Sitemap configuration."""

    enabled: bool = True
    filename: str = "sitemap.xml"
    changefreq: str = "weekly"
    priority: float = 0.5
    ignore_patterns: list[str] = field(default_factory=list)


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class Config:
    """Application configuration.

    Sidebars and redirects are kept as raw declarative data; they are
    validated by the builders so every defect is reported at once.
    """

    server: ServerConfig
    docs: DocsConfig
    site: SiteConfig
    sitemap: SitemapConfig
    live_reload: LiveReloadConfig
    sidebars: dict[str, object] = field(default_factory=dict)
    redirects: list[object] = field(default_factory=list)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for docnav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            docs=DocsConfig(),
            site=SiteConfig(),
            sitemap=SitemapConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        sidebars = data.get("sidebars", {})
        if not isinstance(sidebars, dict):
            raise ValueError("sidebars section must be a dictionary")

        redirects = data.get("redirects", [])
        if not isinstance(redirects, list):
            raise ValueError("redirects must be an array of tables")

        return cls(
            server=cls._parse_server(data.get("server")),
            docs=cls._parse_docs(data.get("docs"), config_dir),
            site=cls._parse_site(data.get("site")),
            sitemap=cls._parse_sitemap(data.get("sitemap")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            sidebars=sidebars,
            redirects=redirects,
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section."""
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(source_dir=config_dir / "docs")

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        source_dir = data.get("source_dir", "docs")
        if not isinstance(source_dir, str):
            raise ValueError("docs.source_dir must be a string")

        route_base_path = data.get("route_base_path", "/docs/")
        if not isinstance(route_base_path, str) or not route_base_path.startswith("/"):
            raise ValueError("docs.route_base_path must be a string starting with '/'")

        extensions = data.get("extensions", [".md", ".mdx"])
        if not isinstance(extensions, list):
            raise ValueError("docs.extensions must be a list")
        for item in extensions:
            if not isinstance(item, str) or not item.startswith("."):
                raise ValueError("docs.extensions items must be strings starting with '.'")

        sidebars_file = data.get("sidebars_file")
        if sidebars_file is not None and not isinstance(sidebars_file, str):
            raise ValueError("docs.sidebars_file must be a string")

        return DocsConfig(
            source_dir=config_dir / source_dir,
            route_base_path=route_base_path,
            extensions=extensions,
            sidebars_file=config_dir / sidebars_file if sidebars_file else None,
        )

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section."""
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        url = data.get("url")
        if url is not None and not isinstance(url, str):
            raise ValueError("site.url must be a string")

        navbar = data.get("navbar", [])
        if not isinstance(navbar, list):
            raise ValueError("site.navbar must be a list")
        for item in navbar:
            if not isinstance(item, str):
                raise ValueError("site.navbar items must be strings")

        return SiteConfig(url=url, navbar=navbar)

    @classmethod
    def _parse_sitemap(cls, data: object) -> SitemapConfig:
        """Parse sitemap configuration section."""
        if data is None:
            return SitemapConfig()

        if not isinstance(data, dict):
            raise ValueError("sitemap section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("sitemap.enabled must be a boolean")

        filename = data.get("filename", "sitemap.xml")
        if not isinstance(filename, str) or not filename or "/" in filename:
            raise ValueError("sitemap.filename must be a plain file name")

        changefreq = data.get("changefreq", "weekly")
        if not isinstance(changefreq, str) or changefreq not in CHANGEFREQ_VALUES:
            raise ValueError(
                f"sitemap.changefreq must be one of: {', '.join(sorted(CHANGEFREQ_VALUES))}",
            )

        priority = data.get("priority", 0.5)
        if not isinstance(priority, (int, float)) or isinstance(priority, bool):
            raise ValueError("sitemap.priority must be a number")
        if not 0.0 <= priority <= 1.0:
            raise ValueError("sitemap.priority must be between 0.0 and 1.0")

        ignore_patterns = data.get("ignore_patterns", [])
        if not isinstance(ignore_patterns, list):
            raise ValueError("sitemap.ignore_patterns must be a list")
        for item in ignore_patterns:
            if not isinstance(item, str):
                raise ValueError("sitemap.ignore_patterns items must be strings")

        return SitemapConfig(
            enabled=enabled,
            filename=filename,
            changefreq=changefreq,
            priority=float(priority),
            ignore_patterns=ignore_patterns,
        )

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        """Parse live_reload configuration section."""
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        watch_patterns: list[str] | None = None
        if watch_patterns_raw is not None:
            if not isinstance(watch_patterns_raw, list):
                raise ValueError("live_reload.watch_patterns must be a list")
            watch_patterns = []
            for item in watch_patterns_raw:
                if not isinstance(item, str):
                    raise ValueError("live_reload.watch_patterns items must be strings")
                watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            source_dir: Override docs.source_dir
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        docs = self.docs
        if source_dir is not None:
            docs = replace(self.docs, source_dir=source_dir)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(self, server=server, docs=docs, live_reload=live_reload)
