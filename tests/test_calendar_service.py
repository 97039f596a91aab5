from __future__ import annotations

from datetime import date

import pytest

from prompt_planner.core import CalendarStore
from prompt_planner.errors import MalformedInputError, NotFoundError, StorageConflictError
from prompt_planner.services import CalendarService, ServiceContext

from .support import CALENDAR


def test_create_event_requires_title_and_dates(context):
    calendars = CalendarService(context)
    with pytest.raises(MalformedInputError):
        calendars.create_event(CALENDAR, title="", start_date="2026-01-01", end_date="2026-01-01")
    with pytest.raises(MalformedInputError):
        calendars.create_event(CALENDAR, title="No end", start_date="2026-01-01", end_date=None)
    with pytest.raises(MalformedInputError):
        calendars.create_event(CALENDAR, title="Reversed", start_date="2026-01-05", end_date="2026-01-01")
    with pytest.raises(MalformedInputError):
        calendars.create_event(CALENDAR, title="Bad", start_date="soon", end_date="2026-01-01")
    assert calendars.list_events(CALENDAR) == []


def test_partial_update(context):
    calendars = CalendarService(context)
    event = calendars.create_event(CALENDAR, title="Meeting", start_date="2026-01-05", end_date="2026-01-05",
                                   notes="agenda")
    updated = calendars.update_event(CALENDAR, event.id, {"title": "Board meeting"})
    assert (updated.title, updated.notes, updated.start_date) == ("Board meeting", "agenda", date(2026, 1, 5))
    with pytest.raises(MalformedInputError):
        calendars.update_event(CALENDAR, event.id, {"end_date": "2026-01-01"})
    with pytest.raises(MalformedInputError):
        calendars.update_event(CALENDAR, event.id, {"location": "Paris"})
    with pytest.raises(NotFoundError):
        calendars.update_event(CALENDAR, "event_0404", {"title": "x"})


def test_delete_event(context):
    calendars = CalendarService(context)
    event = calendars.create_event(CALENDAR, title="Gone", start_date="2026-01-05", end_date="2026-01-05")
    calendars.delete_event(CALENDAR, event.id)
    assert calendars.list_events(CALENDAR) == []
    with pytest.raises(NotFoundError):
        calendars.delete_event(CALENDAR, event.id)


def test_reorder_sets_order_by_position(context):
    calendars = CalendarService(context)
    first = calendars.create_event(CALENDAR, title="A", start_date="2026-01-05", end_date="2026-01-05")
    second = calendars.create_event(CALENDAR, title="B", start_date="2026-01-05", end_date="2026-01-05")
    events = calendars.reorder_events(CALENDAR, [second.id, first.id])
    assert [(event.title, event.order) for event in events] == [("B", 0), ("A", 1)]


def test_reorder_can_be_undone_on_its_own(context):
    calendars = CalendarService(context)
    first = calendars.create_event(CALENDAR, title="A", start_date="2026-01-05", end_date="2026-01-05")
    second = calendars.create_event(CALENDAR, title="B", start_date="2026-01-05", end_date="2026-01-05")
    calendars.reorder_events(CALENDAR, [second.id, first.id])

    outcome = context.undo.undo(CALENDAR)
    assert outcome.description == "Reorder events"
    events = calendars.list_events(CALENDAR)
    assert [(event.title, event.order) for event in events] == [("A", None), ("B", None)]


def test_event_type_lifecycle(context):
    calendars = CalendarService(context)
    training = calendars.create_event_type(CALENDAR, "Training", "#ff0000")
    calendars.create_event_type(CALENDAR, "Travel", "#00ff00")
    with pytest.raises(StorageConflictError):
        calendars.create_event_type(CALENDAR, "Training", "#0000ff")
    with pytest.raises(StorageConflictError):
        calendars.update_event_type(CALENDAR, training.id, name="Travel")
    with pytest.raises(MalformedInputError):
        calendars.create_event_type(CALENDAR, "Colourless", None)

    event = calendars.create_event(CALENDAR, title="Course", start_date="2026-01-05", end_date="2026-01-06",
                                   event_type_id=training.id)
    assert event.event_type is not None and event.event_type.name == "Training"

    renamed = calendars.update_event_type(CALENDAR, training.id, name="Formation")
    assert renamed.name == "Formation"
    calendars.delete_event_type(CALENDAR, training.id)
    survivor = calendars.get_event(CALENDAR, event.id)
    assert survivor.event_type_id is None
    assert [item.name for item in calendars.list_event_types(CALENDAR)] == ["Travel"]
    with pytest.raises(NotFoundError):
        calendars.delete_event_type(CALENDAR, training.id)


def test_type_names_are_unique_per_calendar_only(context):
    calendars = CalendarService(context)
    calendars.create_event_type("cal_one", "Training", "#ff0000")
    calendars.create_event_type("cal_two", "Training", "#ff0000")
    assert len(calendars.list_event_types("cal_two")) == 1


def test_state_survives_a_new_store_instance(context, settings):
    CalendarService(context).create_event(CALENDAR, title="Persisted", start_date="2026-01-05", end_date="2026-01-05")
    reloaded = ServiceContext(settings=settings, store=CalendarStore(settings.storage.state_file))
    assert [event.title for event in CalendarService(reloaded).list_events(CALENDAR)] == ["Persisted"]
