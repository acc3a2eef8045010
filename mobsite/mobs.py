"""Mob records for Mobsite.

A mob is a recurring mob-programming group. Each one is described by a YAML
file in the project's data directory and gets its own page on the site.

Key items:
- Mob, Person, MobParticipant, Occurrence: Record types.
- parse_mob: Build a Mob from a parsed YAML mapping.
- YamlMobSource: Data source reading every mob file asynchronously.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

import yaml

from .calendar import Event
from .exceptions import DataSourceError
from .targets import logical_path
from .utils import slugify

if TYPE_CHECKING:
    from .targets import Targets

logger = logging.getLogger(__name__)

MOBS_DIR = "mobs"


@dataclass(frozen=True)
class Person:
    name: str
    social_url: str


@dataclass(frozen=True)
class MobParticipant:
    """A participant of a mob; ``person`` is None for anonymous participants."""

    person: Person | None = None

    @property
    def hidden(self) -> bool:
        return self.person is None


@dataclass(frozen=True)
class Occurrence:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Mob:
    """A mob record.

    Attributes:
        id: Stable identifier; the mob's page lives at ``mobs/<id>.html``.
        title: Name of the mob.
        subtitle: Optional tagline.
        participants: Public and anonymous participants.
        freeform_copy_markdown: Description in Markdown.
        schedule: Upcoming sessions.
        background_color: Optional calendar color for the mob's sessions.
    """

    id: str
    title: str
    subtitle: str | None = None
    participants: tuple[MobParticipant, ...] = field(default_factory=tuple)
    freeform_copy_markdown: str = ""
    schedule: tuple[Occurrence, ...] = field(default_factory=tuple)
    background_color: str | None = None

    @property
    def page_path(self) -> PurePosixPath:
        return mob_page_path(self.id)

    def participant_names(self) -> tuple[str, ...]:
        return tuple(p.person.name for p in self.participants if p.person)

    def events(self, targets: Targets, link_to_mob: bool) -> list[Event]:
        """Return the calendar events for this mob's sessions.

        Args:
            targets: Target table view of the page showing the events.
            link_to_mob: Whether each event links to this mob's page.

        Returns:
            One event per scheduled occurrence.

        Raises:
            TableLookupError: If ``link_to_mob`` is set but the mob's page
                is not part of the build.
        """
        url = targets.relative(self.page_path) if link_to_mob else None
        names = self.participant_names()
        return [
            Event(
                start=occurrence.start,
                end=occurrence.end,
                title=self.title,
                url=url,
                participants=names,
                background_color=self.background_color,
            )
            for occurrence in self.schedule
        ]


def mob_page_path(mob_id: str) -> PurePosixPath:
    """Return the logical path of a mob's page."""
    return logical_path(MOBS_DIR, f"{mob_id}.html")


def _parse_datetime(value: Any, source: Path) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    raise DataSourceError(f"Invalid timestamp: {value!r}", source)


def _parse_participant(value: Any, source: Path) -> MobParticipant:
    if value == "hidden" or value is None:
        return MobParticipant()
    if isinstance(value, dict) and "name" in value:
        return MobParticipant(
            Person(
                name=str(value["name"]),
                social_url=str(value.get("social_url", "")),
            )
        )
    raise DataSourceError(f"Invalid participant: {value!r}", source)


def parse_mob(payload: Any, source: Path) -> Mob:
    """Build a Mob from a parsed YAML document.

    Args:
        payload: Parsed YAML content.
        source: File the content came from; its stem is the default id.

    Returns:
        The mob record.

    Raises:
        DataSourceError: If the document is not a valid mob.
    """
    if not isinstance(payload, dict):
        raise DataSourceError("Expected a mapping", source)
    raw_id = payload["id"] if "id" in payload else source.stem
    mob_id = slugify(str(raw_id)) if raw_id is not None else ""
    if not mob_id:
        raise DataSourceError(f"Invalid mob id: {raw_id!r}", source)
    if "title" not in payload:
        raise DataSourceError("Missing required field 'title'", source)

    schedule = []
    for entry in payload.get("schedule") or []:
        if not isinstance(entry, dict) or "start" not in entry or "end" not in entry:
            raise DataSourceError(f"Invalid schedule entry: {entry!r}", source)
        start = _parse_datetime(entry["start"], source)
        end = _parse_datetime(entry["end"], source)
        if end <= start:
            raise DataSourceError(f"Session ends before it starts: {entry!r}", source)
        schedule.append(Occurrence(start=start, end=end))

    subtitle = payload.get("subtitle")
    return Mob(
        id=mob_id,
        title=str(payload["title"]),
        subtitle=str(subtitle) if subtitle else None,
        participants=tuple(
            _parse_participant(p, source) for p in payload.get("participants") or []
        ),
        freeform_copy_markdown=str(payload.get("freeform_copy_markdown") or ""),
        schedule=tuple(schedule),
        background_color=payload.get("background_color"),
    )


class YamlMobSource:
    """Reads mob records from ``*.yaml`` files in a directory.

    Attributes:
        directory: Directory holding one YAML file per mob.
    """

    def __init__(self, directory: Path):
        self.directory = directory

    async def fetch(self) -> list[Mob]:
        """Read every mob file, in filename order.

        Returns:
            All mob records; empty if the directory does not exist.

        Raises:
            DataSourceError: If a file cannot be read or parsed.
        """
        if not self.directory.is_dir():
            logger.info("No mob directory at %s", self.directory)
            return []
        files = sorted(self.directory.glob("*.yaml"))
        return list(await asyncio.gather(*(self._read(path) for path in files)))

    async def _read(self, path: Path) -> Mob:
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            payload = yaml.safe_load(text)
        except (OSError, yaml.YAMLError) as exc:
            raise DataSourceError(str(exc), path) from exc
        return parse_mob(payload, path)
