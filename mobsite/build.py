"""Site building functionality for Mobsite.

A build runs in four steps:

1. Enumerate every asset (static pages and files, one page per mob).
2. Build the target table from the enumerated logical paths.
3. Resolve every asset's content concurrently.
4. Write each successful output at its final path.

Enumeration errors abort the build before anything is written. Per-asset
failures are collected; whether they fail the build is decided here, by the
``allow_partial`` setting.

Key functions:
- build_async: Run the pipeline and return its result.
- build_site: Synchronous wrapper applying the failure policy.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from .config import Site, load_config  # noqa: F401 - re-exported
from .exceptions import BuildError
from .pages import all_assets
from .protocols import MobSource, OutputWriter
from .resolver import ResolutionReport, resolve
from .targets import TargetTable
from .utils import ensure_clean_dir

logger = logging.getLogger(__name__)


class FileSystemWriter:
    """Writes outputs below an output directory.

    Attributes:
        output_dir: Directory final paths are relative to.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def write(self, final_path: PurePosixPath, content: bytes) -> None:
        """Write one output, creating parent directories as needed."""
        target = self.output_dir.joinpath(*final_path.parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        report: Outcome of every asset.
        table: Target table the build resolved against.
        output_dir: Directory where the site was built.
    """

    report: ResolutionReport
    table: TargetTable
    output_dir: Path

    @property
    def ok(self) -> bool:
        return self.report.ok


def write_outputs(report: ResolutionReport, writer: OutputWriter) -> int:
    """Hand every successful outcome to the writer.

    Returns:
        Number of outputs written.
    """
    written = 0
    for outcome in report.succeeded:
        writer.write(outcome.final_path, outcome.content)
        written += 1
    return written


async def build_async(
    site: Site,
    source: MobSource | None = None,
    writer: OutputWriter | None = None,
    clean_output: bool = True,
) -> BuildResult:
    """Run the build pipeline.

    Args:
        site: The site to build.
        source: Optional mob data source overriding the YAML directory.
        writer: Optional output writer overriding the file system writer.
        clean_output: Whether to wipe the output directory before writing.

    Returns:
        BuildResult describing every asset's outcome.

    Raises:
        EnumerationError: If the asset list cannot be determined.
    """
    assets = await all_assets(site, source)
    table = TargetTable.from_assets(assets, root=site.config.get("root") or "")
    logger.info("Resolving %d assets", len(assets))
    report = await resolve(assets, table, jobs=site.config.get("jobs"))

    output_dir = site.output_dir
    if writer is None:
        if clean_output:
            ensure_clean_dir(output_dir)
        else:
            output_dir.mkdir(parents=True, exist_ok=True)
        writer = FileSystemWriter(output_dir)
    written = write_outputs(report, writer)
    logger.info(
        "Wrote %d outputs, %d failed", written, len(report.failed)
    )
    return BuildResult(report=report, table=table, output_dir=output_dir)


def build_site(
    project_root: Path,
    allow_partial: bool | None = None,
    source: MobSource | None = None,
    clean_output: bool = True,
    **overrides: Any,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        allow_partial: Accept builds where some assets failed. Defaults to
            the ``allow_partial`` configuration value.
        source: Optional mob data source.
        clean_output: Whether to wipe the output directory before building.
        **overrides: Configuration overrides (``output_dir``, ``root``,
            ``jobs``); None values are ignored.

    Returns:
        BuildResult containing every asset's outcome.

    Raises:
        ConfigError: If a configuration value is invalid.
        EnumerationError: If the asset list cannot be determined.
        BuildError: If any asset failed and partial builds are not allowed.
            Successful outputs have been written by then.
    """
    site = Site.from_project(project_root, **overrides)
    result = asyncio.run(build_async(site, source=source, clean_output=clean_output))
    if allow_partial is None:
        allow_partial = bool(site.config.get("allow_partial"))
    if not result.ok and not allow_partial:
        raise BuildError({o.path: o.error for o in result.report.failed})
    return result
