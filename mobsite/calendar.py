"""Calendar embedding for Mobsite.

Pages show their events with FullCalendar. The events are serialized to JSON
and inlined into the page, next to links to the FullCalendar script and
stylesheet resolved through the target table.

Key items:
- Event: One calendar entry.
- events_payload: Deterministic JSON safe to inline in a script element.
- calendar: Render the calendar markup for a page.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from jinja2.utils import htmlsafe_json_dumps
from markupsafe import Markup

if TYPE_CHECKING:
    from .targets import Targets
    from .templates import TemplateEngine

CALENDAR_SCRIPT = "fullcalendar.js"
CALENDAR_STYLESHEET = "fullcalendar.css"


@dataclass(frozen=True)
class Event:
    """A single calendar entry.

    Attributes:
        start: When the event starts.
        end: When the event ends.
        title: Text shown on the calendar.
        url: Optional link opened when the event is clicked.
        participants: Names of the participants.
        background_color: Optional CSS color for the entry.
    """

    start: datetime
    end: datetime
    title: str
    url: str | None = None
    participants: tuple[str, ...] = field(default_factory=tuple)
    background_color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the FullCalendar event object for this entry."""
        data: dict[str, Any] = {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "title": self.title,
            "participants": list(self.participants),
        }
        if self.url is not None:
            data["url"] = self.url
        if self.background_color is not None:
            data["backgroundColor"] = self.background_color
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        return cls(
            start=datetime.fromisoformat(data["start"]),
            end=datetime.fromisoformat(data["end"]),
            title=data["title"],
            url=data.get("url"),
            participants=tuple(data.get("participants", ())),
            background_color=data.get("backgroundColor"),
        )


def events_payload(events: Iterable[Event]) -> Markup:
    """Serialize events for inlining into a script element.

    Keys are sorted and events keep their given order, so the same events
    always produce the same bytes. Characters that could end the script
    element or open markup (``<``, ``>``, ``&``, ``'``) are emitted as JSON
    unicode escapes, which any JSON parser decodes back to the original text.

    Args:
        events: Events to serialize.

    Returns:
        JSON array literal, safe to embed verbatim.
    """
    data = [event.to_dict() for event in events]
    return htmlsafe_json_dumps(
        data,
        dumps=json.dumps,
        sort_keys=True,
        separators=(",", ":"),
    )


def calendar(
    engine: TemplateEngine, targets: Targets, events: Iterable[Event]
) -> tuple[Markup, str]:
    """Render the calendar for a page.

    Args:
        engine: Template engine used for the calendar partial.
        targets: Target table view of the page embedding the calendar.
        events: Events to show.

    Returns:
        Tuple of (calendar markup, href of the calendar stylesheet). The
        caller adds the stylesheet to the page head.

    Raises:
        TableLookupError: If the calendar script or stylesheet is not part
            of the build.
    """
    markup = engine.render_partial(
        "calendar.html.jinja",
        script_src=targets.relative(CALENDAR_SCRIPT),
        events=events_payload(events),
    )
    stylesheet = targets.relative(CALENDAR_STYLESHEET)
    return markup, stylesheet
