from __future__ import annotations

from datetime import date

import pytest

from prompt_planner.dates import split_range
from prompt_planner.errors import MalformedInputError, NotFoundError
from prompt_planner.services import CalendarService

from .support import CALENDAR


def test_split_in_the_middle():
    plan = split_range(date(2026, 3, 2), date(2026, 3, 11), date(2026, 3, 7))
    assert plan.before == (date(2026, 3, 2), date(2026, 3, 6))
    assert plan.after == (date(2026, 3, 8), date(2026, 3, 11))
    assert len(plan.segments) == 2


def test_split_on_the_edges_omits_empty_segments():
    first = split_range(date(2026, 3, 2), date(2026, 3, 11), date(2026, 3, 2))
    assert first.before is None and first.after == (date(2026, 3, 3), date(2026, 3, 11))
    last = split_range(date(2026, 3, 2), date(2026, 3, 11), date(2026, 3, 11))
    assert last.after is None and last.before == (date(2026, 3, 2), date(2026, 3, 10))
    single = split_range(date(2026, 3, 2), date(2026, 3, 2), date(2026, 3, 2))
    assert single.segments == []


def test_split_outside_the_range_is_rejected():
    with pytest.raises(MalformedInputError):
        split_range(date(2026, 3, 2), date(2026, 3, 11), date(2026, 3, 12))


def test_split_event_drops_the_clicked_day(context):
    calendars = CalendarService(context)
    event_type = calendars.create_event_type(CALENDAR, "Training", "#ff0000")
    event = calendars.create_event(
        CALENDAR,
        title="Formation",
        start_date="2026-03-02",
        end_date="2026-03-11",
        notes="room 4",
        color="#123456",
        event_type_id=event_type.id,
    )
    outcome = calendars.split_event(CALENDAR, event.id, "2026-03-07")

    assert outcome.deleted_event_id == event.id
    assert outcome.edited_event is None
    events = calendars.list_events(CALENDAR)
    assert [(item.start_date, item.end_date) for item in events] == [
        (date(2026, 3, 2), date(2026, 3, 6)),
        (date(2026, 3, 8), date(2026, 3, 11)),
    ]
    for item in events:
        assert (item.title, item.notes, item.color, item.event_type_id) == ("Formation", "room 4", "#123456", event_type.id)


def test_split_event_with_day_edit(context):
    calendars = CalendarService(context)
    event = calendars.create_event(CALENDAR, title="Formation", start_date="2026-03-02", end_date="2026-03-06")
    outcome = calendars.split_event(CALENDAR, event.id, date(2026, 3, 4), new_title="Exam")

    assert outcome.edited_event is not None
    assert outcome.edited_event.title == "Exam"
    titles = [(item.title, item.start_date) for item in calendars.list_events(CALENDAR)]
    assert titles == [
        ("Formation", date(2026, 3, 2)),
        ("Exam", date(2026, 3, 4)),
        ("Formation", date(2026, 3, 5)),
    ]


def test_split_unknown_event(context):
    with pytest.raises(NotFoundError):
        CalendarService(context).split_event(CALENDAR, "event_0404", date(2026, 3, 4))
