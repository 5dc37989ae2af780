"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest
from docnav.config import Config, ServerConfig


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("""
[server]
host = "0.0.0.0"
port = 3000

[docs]
source_dir = "content"
route_base_path = "/handbook/"
extensions = [".md"]
sidebars_file = "sidebars.json"

[site]
url = "https://example.com"
navbar = ["docs", "guides"]

[sitemap]
filename = "map.xml"
changefreq = "daily"
priority = 1
ignore_patterns = ["/handbook/tags/**"]

[live_reload]
enabled = false
watch_patterns = ["**/*.md"]

[sidebars]
docs = ["intro", { type = "category", label = "Guide", items = ["guide/setup"] }]

[[redirects]]
from = ["/docs/old", "/docs/older"]
to = "/handbook/intro"

[[redirects]]
from = "/docs/legacy"
to = "/handbook/guide/setup"
""")

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.docs.source_dir == tmp_path / "content"
        assert config.docs.route_base_path == "/handbook/"
        assert config.docs.extensions == [".md"]
        assert config.docs.sidebars_file == tmp_path / "sidebars.json"
        assert config.site.url == "https://example.com"
        assert config.site.navbar == ["docs", "guides"]
        assert config.sitemap.filename == "map.xml"
        assert config.sitemap.changefreq == "daily"
        assert config.sitemap.priority == 1.0
        assert config.sitemap.ignore_patterns == ["/handbook/tags/**"]
        assert config.live_reload.enabled is False
        assert config.live_reload.watch_patterns == ["**/*.md"]
        assert config.sidebars == {
            "docs": ["intro", {"type": "category", "label": "Guide", "items": ["guide/setup"]}],
        }
        assert config.redirects == [
            {"from": ["/docs/old", "/docs/older"], "to": "/handbook/intro"},
            {"from": "/docs/legacy", "to": "/handbook/guide/setup"},
        ]
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(self, tmp_path: Path) -> None:
        """Load minimal config with defaults relative to config file."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.docs.source_dir == tmp_path / "docs"
        assert config.docs.route_base_path == "/docs/"
        assert config.docs.extensions == [".md", ".mdx"]
        assert config.docs.sidebars_file is None
        assert config.site.url is None
        assert config.site.navbar == []
        assert config.sitemap.enabled is True
        assert config.sitemap.filename == "sitemap.xml"
        assert config.sitemap.changefreq == "weekly"
        assert config.sitemap.priority == 0.5
        assert config.live_reload.enabled is True
        assert config.sidebars == {}
        assert config.redirects == []

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        """Raise FileNotFoundError for missing explicit config file."""
        config_file = tmp_path / "nonexistent.toml"

        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(config_file)

    def test__invalid_toml__raises_error(self, tmp_path: Path) -> None:
        """Raise ValueError for unparsable TOML."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("[server\nport = ")

        with pytest.raises(ValueError, match="Invalid TOML"):
            Config.load(config_file)

    def test__no_path_no_discovery__returns_defaults(self) -> None:
        """Return defaults when no config file found."""
        with patch.object(Config, "_discover_config", return_value=None):
            config = Config.load()

        assert config.server.port == 8080
        assert config.docs.source_dir == Path("docs")
        assert config.config_path is None

    def test__discovered_path__loads_config(self, tmp_path: Path) -> None:
        """Load discovered config file."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("[server]\nport = 9000")

        with patch.object(Config, "_discover_config", return_value=config_file):
            config = Config.load()

        assert config.server.port == 9000
        assert config.config_path == config_file


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test__config_in_current_dir__found(self, tmp_path: Path) -> None:
        """Find config in current directory."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("[server]\nport = 9000")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__config_in_parent_dir__found(self, tmp_path: Path) -> None:
        """Find config in parent directory."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("[server]\nport = 9000")
        subdir = tmp_path / "website" / "docs"
        subdir.mkdir(parents=True)

        with patch("pathlib.Path.cwd", return_value=subdir):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__no_config__returns_none(self, tmp_path: Path) -> None:
        """Return None when no config found."""
        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered is None


class TestSectionValidation:
    """Tests for invalid config values."""

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ("[server]\nhost = 12345", "server.host must be a string"),
            ('[server]\nport = "3000"', "server.port must be an integer"),
            ("[server]\nport = true", "server.port must be an integer"),
            ("[docs]\nsource_dir = 123", "docs.source_dir must be a string"),
            ('[docs]\nroute_base_path = "docs"', "docs.route_base_path must be a string"),
            ('[docs]\nextensions = ".md"', "docs.extensions must be a list"),
            ('[docs]\nextensions = ["md"]', "docs.extensions items must be strings"),
            ("[docs]\nsidebars_file = 1", "docs.sidebars_file must be a string"),
            ("[site]\nurl = 1", "site.url must be a string"),
            ('[site]\nnavbar = "docs"', "site.navbar must be a list"),
            ("[site]\nnavbar = [1]", "site.navbar items must be strings"),
            ('[sitemap]\nenabled = "yes"', "sitemap.enabled must be a boolean"),
            ('[sitemap]\nfilename = "a/b.xml"', "sitemap.filename must be a plain file name"),
            ('[sitemap]\nchangefreq = "sometimes"', "sitemap.changefreq must be one of"),
            ('[sitemap]\npriority = "high"', "sitemap.priority must be a number"),
            ("[sitemap]\npriority = 2.0", "sitemap.priority must be between"),
            ('[sitemap]\nignore_patterns = "/x"', "sitemap.ignore_patterns must be a list"),
            ("[live_reload]\nenabled = 1", "live_reload.enabled must be a boolean"),
            ('[live_reload]\nwatch_patterns = "*.md"', "live_reload.watch_patterns must be a list"),
            ('sidebars = ["docs"]', "sidebars section must be a dictionary"),
            ('redirects = "none"', "redirects must be an array of tables"),
        ],
    )
    def test__invalid_value__raises_error(
        self,
        tmp_path: Path,
        content: str,
        message: str,
    ) -> None:
        """Raise ValueError naming the offending key."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text(content)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)

    def test__malformed_sidebar__left_to_builder(self, tmp_path: Path) -> None:
        """Keep sidebar contents raw so the builder reports every defect."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text('[sidebars]\ndocs = [1, { kind = "widget" }]')

        config = Config.load(config_file)

        assert config.sidebars == {"docs": [1, {"kind": "widget"}]}


class TestWithOverrides:
    """Tests for Config.with_overrides()."""

    def test__no_overrides__returns_equal_config(self, tmp_path: Path) -> None:
        """Return equal config when nothing is overridden."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("")
        config = Config.load(config_file)

        assert config.with_overrides() == config

    def test__overrides__applied_without_mutation(self, tmp_path: Path) -> None:
        """Apply overrides to a copy."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("[server]\nport = 9000")
        config = Config.load(config_file)

        result = config.with_overrides(
            host="0.0.0.0",
            source_dir=tmp_path / "other",
            live_reload_enabled=False,
        )

        assert result.server == ServerConfig(host="0.0.0.0", port=9000)
        assert result.docs.source_dir == tmp_path / "other"
        assert result.live_reload.enabled is False
        assert config.server.host == "127.0.0.1"
        assert config.live_reload.enabled is True
