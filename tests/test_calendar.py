import json
from datetime import datetime, timedelta, timezone

import pytest

from mobsite.calendar import Event, calendar, events_payload
from mobsite.exceptions import TableLookupError
from mobsite.targets import TargetTable
from mobsite.templates import TemplateEngine

START = datetime(2024, 3, 4, 16, 0, tzinfo=timezone.utc)


def sample_events():
    return [
        Event(
            start=START,
            end=START + timedelta(hours=2),
            title="Rust </script><script>alert('x')</script>",
            url="../mobs/rust.html",
            participants=("Ada & Grace", "Linus"),
            background_color="#ff0000",
        ),
        Event(
            start=START + timedelta(days=1),
            end=START + timedelta(days=1, hours=1),
            title="Haskell \u2028 line",
        ),
    ]


def engine():
    return TemplateEngine({"name": "Test", "description": "", "fonts": []})


def test_payload_round_trips_field_values():
    events = sample_events()
    decoded = json.loads(str(events_payload(events)))
    assert decoded == [event.to_dict() for event in events]
    assert [Event.from_dict(item) for item in decoded] == events


def test_payload_is_deterministic():
    assert events_payload(sample_events()) == events_payload(sample_events())


def test_payload_is_safe_to_embed():
    payload = str(events_payload(sample_events()))
    assert "<" not in payload
    assert ">" not in payload
    assert "&" not in payload
    assert "'" not in payload
    assert "\u2028" not in payload
    assert "\\u003c/script\\u003e" in payload


def test_payload_omits_unset_optional_fields():
    decoded = json.loads(str(events_payload(sample_events())))
    assert "url" not in decoded[1]
    assert "backgroundColor" not in decoded[1]
    assert decoded[0]["backgroundColor"] == "#ff0000"


def test_empty_payload():
    assert str(events_payload([])) == "[]"


def test_calendar_links_script_and_stylesheet():
    table = TargetTable.from_paths(["mobs/rust.html", "fullcalendar.js", "fullcalendar.css"])
    markup, stylesheet = calendar(engine(), table.for_asset("mobs/rust.html"), sample_events())
    assert stylesheet == "../fullcalendar.css"
    assert 'src="../fullcalendar.js"' in markup
    assert str(events_payload(sample_events())) in markup
    assert "FullCalendar.Calendar" in markup


def test_calendar_without_script_asset_fails():
    table = TargetTable.from_paths(["index.html", "fullcalendar.css"])
    with pytest.raises(TableLookupError):
        calendar(engine(), table.for_asset("index.html"), [])
