"""Command-line interface for Mobsite.

This module defines the CLI commands using Click framework.

Commands:
- build: Build the site into the output directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from . import __version__

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level_str = os.getenv("MOBSITE_LOG_LEVEL") or ("DEBUG" if verbose else "")
    if not level_str:
        return
    logging.basicConfig(
        level=getattr(logging, level_str.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Logging configured at %s", level_str.upper())


@click.group()
@click.version_option(version=__version__, prog_name="mobsite")
def cli():
    """Mobsite static site builder."""


@cli.command()
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (overrides mobsite.yaml output_dir)",
)
@click.option("--root", help="Prefix applied to every output path")
@click.option("--jobs", type=click.IntRange(min=1), help="Maximum concurrent pages")
@click.option(
    "--allow-partial/--strict",
    default=None,
    help="Succeed even if some assets fail (overrides mobsite.yaml allow_partial)",
)
@click.option("--clean/--no-clean", default=True, help="Wipe the output directory first")
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
def build(
    output_dir: Path | None,
    root: str | None,
    jobs: int | None,
    allow_partial: bool | None,
    clean: bool,
    verbose: bool,
):
    """Build the site into the output directory."""
    _configure_logging(verbose)
    project_root = Path.cwd()
    from .build import build_site
    from .exceptions import BuildError, ConfigError, EnumerationError

    try:
        result = build_site(
            project_root,
            allow_partial=allow_partial,
            clean_output=clean,
            output_dir=str(output_dir) if output_dir else None,
            root=root,
            jobs=jobs,
        )
    except (ConfigError, EnumerationError) as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  Error: {exc}", fg="white"), err=True)
        raise SystemExit(1) from None
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        _echo_failures(exc.failures.items())
        raise SystemExit(1) from None

    if result.report.failed:
        click.echo(click.style("Built with failures:", fg="yellow", bold=True), err=True)
        _echo_failures((o.path, o.error) for o in result.report.failed)
    click.echo(
        f"Built {len(result.report.succeeded)} of {len(result.report)} assets "
        f"into {result.output_dir}"
    )


def _echo_failures(failures) -> None:
    for path, error in failures:
        click.echo(click.style(f"  File: {path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {error}", fg="white"), err=True)


def main():
    """Entry point for the CLI application."""
    cli()
