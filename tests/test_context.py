from __future__ import annotations

from datetime import date

from prompt_planner.domain import Event, EventType, SchoolZone
from prompt_planner.interpreter import build_prompt_context, describe_event, render_system_prompt

TODAY = date(2026, 1, 15)


def _event(event_id: str, start: date, end: date, **extra) -> Event:
    return Event(id=event_id, calendar_id="cal", title=f"Event {event_id}", start_date=start, end_date=end, **extra)


def test_reference_table_covers_fourteen_months():
    context = build_prompt_context(TODAY, [], [], SchoolZone.B)
    months = context.reference_months
    assert len(months) == 14
    assert (months[0].year, months[0].month) == (2026, 1)
    assert (months[-1].year, months[-1].month) == (2027, 2)
    january = months[0]
    assert january.first_weekday == "jeudi"
    assert january.mondays == (5, 12, 19, 26)
    assert january.fridays == (2, 9, 16, 23, 30)
    assert january.saturdays == (3, 10, 17, 24, 31)
    assert january.render().startswith("janvier 2026: 1st = jeudi")


def test_event_line_flags_holidays_and_weekends():
    line = describe_event(_event("e1", date(2026, 5, 13), date(2026, 5, 18)))
    assert line.holidays == ("Ascension (2026-05-14)",)
    assert line.weekends == ("samedi 2026-05-16", "dimanche 2026-05-17")
    rendered = line.render()
    assert "⚠️ INCLUDES HOLIDAY(S): Ascension (2026-05-14)" in rendered
    assert "⚠️ INCLUDES WEEKEND(S): samedi 2026-05-16, dimanche 2026-05-17" in rendered
    assert "from mercredi 2026-05-13 to lundi 2026-05-18" in rendered


def test_plain_weekday_event_has_no_warning():
    line = describe_event(_event("e2", date(2026, 3, 2), date(2026, 3, 6)))
    assert not line.has_special_days
    assert "⚠️" not in line.render()


def test_context_contents():
    training = EventType(id="type_0001", calendar_id="cal", name="Training", color="#ff0000")
    events = [_event("e1", date(2026, 3, 2), date(2026, 3, 11), event_type_id="type_0001")]
    context = build_prompt_context(TODAY, events, [training], SchoolZone.B)

    assert context.today_weekday == "jeudi"
    assert context.school_zone is SchoolZone.B
    assert len(context.holidays) == 22
    assert context.school_holidays
    assert all(SchoolZone.B in item.zones for item in context.school_holidays)
    assert context.event_lines[0].event_type == "Training"

    prompt = render_system_prompt(context)
    assert "jeudi 2026-01-15" in prompt
    assert "(type: Training)" in prompt
    assert "janvier 2026: 1st = jeudi" in prompt
    assert "- Training (#ff0000)" in prompt
    assert "get_nth_weekday_of_month" in prompt


def test_building_context_does_not_mutate_inputs():
    events = [_event("e1", date(2026, 3, 2), date(2026, 3, 11))]
    snapshot = [event.to_record() for event in events]
    build_prompt_context(TODAY, events, [], SchoolZone.A)
    assert [event.to_record() for event in events] == snapshot
