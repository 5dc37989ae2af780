"""CLI interface for Docnav.

Command-line tool for validating sidebars and redirects, and for serving
the resulting navigation data during development.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from docnav.config import Config
from docnav.errors import BuildReport
from docnav.navigation import flatten_leaves
from docnav.paths import doc_url
from docnav.site import Site, build_site, render_sitemap

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docnav.toml)",
)

source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def cli(verbose: bool) -> None:
    """Docnav - navigation trees and redirects for documentation sites."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--strict",
    is_flag=True,
    help="Treat warnings (e.g., dangling redirect targets) as errors",
)
def check(config_path: Path | None, source_dir: Path | None, strict: bool) -> None:
    """Validate sidebars and redirects, reporting every problem at once."""
    config = _load_config(config_path, source_dir)
    site = _build_site(config)

    _print_report(site.report)

    total_docs = sum(len(flatten_leaves(tree)) for tree in site.trees.values())
    click.echo(
        f"\n{len(site.trees)} sidebars, {total_docs} sidebar entries, "
        f"{len(site.redirects)} redirects",
    )

    if not site.report.ok or (strict and site.report.warnings):
        click.echo(click.style("Check failed", fg="red", bold=True), err=True)
        sys.exit(1)

    click.echo(click.style("Check passed", fg="green", bold=True))


@cli.command()
@click.argument("sidebar")
@config_option
@source_dir_option
@click.option(
    "--urls",
    is_flag=True,
    help="Print URLs instead of document paths",
)
def flatten(
    sidebar: str,
    config_path: Path | None,
    source_dir: Path | None,
    urls: bool,
) -> None:
    """Print documents of SIDEBAR in navigation order."""
    config = _load_config(config_path, source_dir)
    site = _require_valid_site(config)

    tree = site.get_tree(sidebar)
    if tree is None:
        available = ", ".join(site.trees) or "none"
        click.echo(
            click.style(f"Error: unknown sidebar '{sidebar}' (available: {available})", fg="red"),
            err=True,
        )
        sys.exit(1)

    for path in flatten_leaves(tree):
        click.echo(doc_url(path, site.route_base_path) if urls else path)


@cli.command()
@click.argument("request_path")
@config_option
def resolve(request_path: str, config_path: Path | None) -> None:
    """Print the redirect target of a legacy REQUEST_PATH.

    Exits with status 1 when the path is not redirected.
    """
    config = _load_config(config_path, None)
    site = _require_valid_site(config)

    target = site.resolve(request_path)
    if target is None:
        click.echo(f"{request_path} is not a legacy path", err=True)
        sys.exit(1)

    click.echo(target)


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write sitemap to file instead of stdout",
)
def sitemap(config_path: Path | None, source_dir: Path | None, output: Path | None) -> None:
    """Generate sitemap.xml from the sidebars."""
    config = _load_config(config_path, source_dir)
    site = _require_valid_site(config)

    xml = render_sitemap(site, config)
    if output is None:
        click.echo(xml, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(xml, encoding="utf-8")
    click.echo(f"Sitemap written to {output}", err=True)


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live rebuild (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
) -> None:
    """Start the navigation preview server."""
    from docnav.server import run_server

    def load() -> Config:
        return Config.load(config_path).with_overrides(
            host=host,
            port=port,
            source_dir=source_dir,
            live_reload_enabled=live_reload,
        )

    try:
        config = load()
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    # Re-read the config file on rebuild so sidebar and redirect edits apply
    run_server(config, config_loader=load if config.config_path else None)


def _load_config(config_path: Path | None, source_dir: Path | None) -> Config:
    """Load configuration or exit with error.

    Raises:
        SystemExit: If configuration is missing or invalid
    """
    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    return config.with_overrides(source_dir=source_dir)


def _build_site(config: Config) -> Site:
    """Build site or exit with error.

    Raises:
        SystemExit: If the sidebars file cannot be loaded
    """
    try:
        return build_site(config)
    except ValueError as e:
        _fail(str(e))


def _require_valid_site(config: Config) -> Site:
    """Build site and exit with the report if it has errors.

    Raises:
        SystemExit: If the build reported errors
    """
    site = _build_site(config)
    if not site.report.ok:
        _print_report(site.report)
        sys.exit(1)
    return site


def _print_report(report: BuildReport) -> None:
    """Print errors in red and warnings in yellow."""
    for error in report.errors:
        click.echo(click.style(f"error: {error}", fg="red"), err=True)
    for warning in report.warnings:
        click.echo(click.style(f"warning: {warning}", fg="yellow"), err=True)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
