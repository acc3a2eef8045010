"""Pages of the Mobsite site.

The site has a fixed structure: a calendar index, a join page, one page per
mob and the static files under the project's assets directory. Every page
is a table-aware asset, so its links point at the final location of the
outputs they reference.

Key functions:
- index_page, join_page, mob_page: Declare one page.
- static_assets: Declare one asset per static file.
- all_assets: Enumerate the whole site.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from functools import partial

from .assets import Asset, TableSource, file_asset
from .calendar import calendar
from .config import Site
from .enumeration import enumerate_assets
from .mobs import Mob, YamlMobSource
from .protocols import MobSource
from .renderers import markdown_to_html
from .targets import Targets, logical_path

logger = logging.getLogger(__name__)

INDEX_PATH = logical_path("index.html")
JOIN_PATH = logical_path("join.html")

DEFAULT_JOIN_COPY = """\
# Join a mob

Every mob is open to newcomers. Pick a session from the calendar, say hello
in the chat and show up. No preparation is needed.
"""


def index_page(site: Site, mobs: Sequence[Mob]) -> Asset:
    """Declare the calendar page listing every mob's sessions."""
    mobs = tuple(mobs)

    def render(targets: Targets) -> str:
        events = [event for mob in mobs for event in mob.events(targets, True)]
        calendar_html, calendar_stylesheet = calendar(site.engine, targets, events)
        return site.engine.render_document(
            "index.html.jinja",
            targets,
            title="Calendar",
            stylesheets=[calendar_stylesheet],
            content_classes="gap-6",
            calendar=calendar_html,
            mobs=[{"title": mob.title, "href": mob.page_path} for mob in mobs],
        )

    return Asset(INDEX_PATH, TableSource(render))


def join_page(site: Site) -> Asset:
    """Declare the page explaining how to join a mob.

    The copy comes from ``join.md`` in the project root when present.
    """
    copy_path = site.join_copy_path

    async def render(targets: Targets) -> str:
        if copy_path.exists():
            text = await asyncio.to_thread(copy_path.read_text, encoding="utf-8")
        else:
            text = DEFAULT_JOIN_COPY
        return site.engine.render_document(
            "join.html.jinja",
            targets,
            title="Join",
            copy=markdown_to_html(text),
        )

    return Asset(JOIN_PATH, TableSource(render))


def mob_page(site: Site, mob: Mob) -> Asset:
    """Declare the page of one mob at ``mobs/<id>.html``."""

    def render(targets: Targets) -> str:
        calendar_html, calendar_stylesheet = calendar(
            site.engine, targets, mob.events(targets, False)
        )
        return site.engine.render_document(
            "mob.html.jinja",
            targets,
            title=mob.title,
            stylesheets=[calendar_stylesheet],
            content_classes="gap-6",
            mob=mob,
            copy=markdown_to_html(mob.freeform_copy_markdown),
            calendar=calendar_html,
        )

    return Asset(mob.page_path, TableSource(render))


def static_assets(site: Site) -> list[Asset]:
    """Declare one asset per file under the assets directory.

    Each file keeps its path relative to the assets directory, so
    ``assets/fullcalendar.js`` is published as ``fullcalendar.js``. Hidden
    files are skipped.
    """
    assets_dir = site.assets_dir
    if not assets_dir.is_dir():
        return []
    assets = []
    for item in sorted(assets_dir.rglob("*")):
        if item.is_dir():
            continue
        rel = item.relative_to(assets_dir)
        if any(part.startswith(".") for part in rel.parts):
            continue
        assets.append(file_asset(rel.as_posix(), item))
    logger.debug("Found %d static files in %s", len(assets), assets_dir)
    return assets


async def all_assets(site: Site, source: MobSource | None = None) -> list[Asset]:
    """Enumerate every asset of the site.

    Args:
        site: The site being built.
        source: Where mob records come from; defaults to the YAML files in
            the configured data directory.

    Returns:
        Index, join page and static files, followed by one page per mob.

    Raises:
        EnumerationError: If the records cannot be fetched or two assets
            share a logical path.
    """
    source = source or YamlMobSource(site.data_dir)

    def static(mobs: Sequence[Mob]) -> list[Asset]:
        return [index_page(site, mobs), join_page(site), *static_assets(site)]

    return await enumerate_assets(source.fetch, partial(mob_page, site), static)
