"""Site composition.

A Site bundles everything built from one configuration: the content
registry, the navigation trees, the compiled redirects and the build
report. Sites are immutable; SiteLoader replaces the whole Site on rebuild
so readers always see a complete old or new site.
"""

import json
import logging
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from docnav.config import Config
from docnav.errors import BuildError, BuildReport, UnknownSidebarError
from docnav.navigation import NavigationTree, build_trees
from docnav.paths import doc_url, normalize_path
from docnav.redirects import ResolutionMap, build_redirects, validate_targets
from docnav.registry import ContentRegistry, DirectoryRegistry
from docnav.sitemap import build_sitemap, collect_urls
from docnav.types import URLPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Site:
    """Validated navigation and redirect data for one documentation site."""

    registry: ContentRegistry
    trees: Mapping[str, NavigationTree]
    redirects: ResolutionMap
    report: BuildReport
    route_base_path: str = "/docs/"

    def get_tree(self, name: str) -> NavigationTree | None:
        """Get sidebar by name."""
        return self.trees.get(name)

    def resolve(self, request_path: str) -> str | None:
        """Look up the redirect target for a legacy path."""
        return self.redirects.resolve(request_path)

    def known_urls(self) -> set[URLPath]:
        """URL paths of every document in the registry."""
        urls = {doc_url(path, self.route_base_path) for path in self.registry.list_all_paths()}
        urls.add(URLPath(normalize_path(self.route_base_path)))
        return urls

    def to_dict(self) -> dict[str, object]:
        """Convert navigation to dictionary for JSON serialization."""
        return {
            "sidebars": [
                tree.to_dict(self.registry, self.route_base_path) for tree in self.trees.values()
            ],
        }


def load_sidebars(config: Config) -> dict[str, object]:
    """Collect sidebar specs from the config file and the sidebars file.

    Args:
        config: Application configuration

    Returns:
        Sidebar name to raw spec, inline sidebars first

    Raises:
        ValueError: If the sidebars file is unreadable or redeclares a sidebar
    """
    sidebars = dict(config.sidebars)
    sidebars_file = config.docs.sidebars_file
    if sidebars_file is None:
        return sidebars

    try:
        if sidebars_file.suffix == ".json":
            data = json.loads(sidebars_file.read_text(encoding="utf-8"))
        elif sidebars_file.suffix == ".toml":
            with sidebars_file.open("rb") as f:
                data = tomllib.load(f)
        else:
            raise ValueError(f"Unsupported sidebars file type: {sidebars_file.suffix}")
    except OSError as e:
        raise ValueError(f"Cannot read sidebars file {sidebars_file}: {e}") from e
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ValueError(f"Invalid sidebars file {sidebars_file}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Sidebars file must contain a mapping: {sidebars_file}")

    for name, spec in data.items():
        if name in sidebars:
            raise ValueError(f"Sidebar '{name}' declared in both config and {sidebars_file}")
        sidebars[name] = spec
    return sidebars


def build_site(config: Config, registry: ContentRegistry | None = None) -> Site:
    """Build a site, collecting every error and warning into its report.

    Sidebars and redirects are validated independently. When either fails,
    that part of the site is left empty and the errors are in the report.

    Args:
        config: Application configuration
        registry: Content registry (default: scan docs.source_dir)

    Returns:
        Site with build report

    Raises:
        ValueError: If the sidebars file cannot be loaded
    """
    if registry is None:
        registry = DirectoryRegistry(config.docs.source_dir, config.docs.extensions)

    report = BuildReport()
    sidebars = load_sidebars(config)

    trees: dict[str, NavigationTree] = {}
    try:
        trees = build_trees(sidebars, registry)
    except BuildError as e:
        report.errors.extend(e.errors)

    for idx, name in enumerate(config.site.navbar):
        if name not in sidebars:
            report.errors.append(UnknownSidebarError(name, location=f"site.navbar[{idx}]"))

    redirects = ResolutionMap(())
    try:
        redirects = build_redirects(config.redirects)
    except BuildError as e:
        report.errors.extend(e.errors)

    site = Site(
        registry=registry,
        trees=MappingProxyType(trees),
        redirects=redirects,
        report=report,
        route_base_path=config.docs.route_base_path,
    )
    report.warnings.extend(validate_targets(redirects, site.known_urls()))

    logger.info(
        f"Built site: {len(trees)} sidebars, {len(redirects)} redirects, "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings",
    )
    return site


def render_sitemap(site: Site, config: Config) -> str:
    """Render sitemap.xml for a site.

    Legacy redirect sources are never listed.
    """
    urls = collect_urls(
        site.trees,
        route_base_path=site.route_base_path,
        ignore_patterns=config.sitemap.ignore_patterns,
        exclude=site.redirects.sources(),
    )
    return build_sitemap(
        urls,
        base_url=config.site.url,
        changefreq=config.sitemap.changefreq,
        priority=config.sitemap.priority,
    )


class SiteLoader:
    """Holds the current Site and rebuilds it on demand.

    A rebuild that reports errors does not replace a previously good site,
    so a typo in a sidebar never takes navigation down.
    """

    def __init__(
        self,
        config: Config,
        *,
        config_loader: Callable[[], Config] | None = None,
    ) -> None:
        """Initialize loader.

        Args:
            config: Initial configuration
            config_loader: Re-reads configuration on reload (default: reuse config)
        """
        self._config = config
        self._config_loader = config_loader
        self._site: Site | None = None
        self._last_report: BuildReport | None = None

    @property
    def config(self) -> Config:
        """Configuration of the current site."""
        return self._config

    @property
    def last_report(self) -> BuildReport | None:
        """Report of the most recent build attempt."""
        return self._last_report

    def load(self) -> Site:
        """Return current site, building it from the initial config on first use."""
        if self._site is None:
            self._site = build_site(self._config)
            self._last_report = self._site.report
        return self._site

    def reload(self) -> BuildReport:
        """Rebuild the site from scratch.

        Returns:
            Report of the new build

        Raises:
            ValueError: If configuration or sidebars file is invalid
            FileNotFoundError: If the config file was removed
        """
        config = self._config_loader() if self._config_loader else self._config
        site = build_site(config)
        self._last_report = site.report

        if site.report.ok or self._site is None or not self._site.report.ok:
            self._site = site
            self._config = config
        else:
            logger.warning(
                f"Rebuild reported {len(site.report.errors)} errors, keeping previous site",
            )
        return site.report
