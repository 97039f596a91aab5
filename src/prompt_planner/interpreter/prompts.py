from __future__ import annotations

from collections import OrderedDict
from datetime import date
from typing import Iterable, List, Sequence

from ..dates.names import month_name, weekday_name
from ..domain import Event, EventType
from .context import EventLine, PromptContext

RESPONSE_FORMAT = """RESPONSE FORMAT (JSON only, no markdown):
{
  "interpretation": "Clear explanation of what you understood and what you are going to do",
  "actions": [
    {"action": "create", "event": {"title": "Event title", "startDate": "YYYY-MM-DD", "endDate": "YYYY-MM-DD", "eventType": "type name (optional)", "notes": "optional"}},
    {"action": "update", "event": {"id": "id of the existing event (REQUIRED)", "title": "New title", "startDate": "YYYY-MM-DD", "endDate": "YYYY-MM-DD", "eventType": "type name (optional)"}},
    {"action": "delete", "event": {"id": "id of the event to delete (REQUIRED)", "title": "title for reference"}}
  ],
  "newEventTypes": [{"name": "New type", "suggestedColor": "#3b82f6"}],
  "warnings": ["Warning about a conflict or an ambiguity"],
  "questions": ["Question when clarification is needed"]
}"""

SPLITTING_RULES = """MULTI-DAY EVENTS, WEEKENDS AND HOLIDAYS:
- An event with startDate and endDate covers EVERY day in between, weekends and public holidays INCLUDED.
- Events flagged with ⚠️ contain special days that may have to be split out.
- To "remove weekends" or "exclude holidays", SPLIT the event into segments avoiding those days:
  create the new segments with "create" AND delete the original event with "delete".
- Example: "Formation" from 2 to 11 March becomes "Formation" 2-6 March and "Formation" 9-11 March.
- Example: "Pont Ascension" from 14 to 18 May (Ascension on the 14th) becomes "Pont Ascension" 15-18 May."""


def _or_placeholder(lines: Sequence[str], placeholder: str) -> str:
    return "\n".join(lines) if lines else placeholder


def _render_types(event_types: Iterable[EventType]) -> str:
    return _or_placeholder([f"- {item.name} ({item.color})" for item in event_types], "No event type defined")


def _render_events(event_lines: Iterable[EventLine]) -> str:
    return _or_placeholder([line.render() for line in event_lines], "No events")


def render_system_prompt(context: PromptContext) -> str:
    reference = "\n".join(month.render() for month in context.reference_months)
    holidays = _or_placeholder(
        [f"- {holiday.date.isoformat()}: {holiday.name}" for holiday in context.holidays],
        "None",
    )
    school_holidays = _or_placeholder(
        [
            f"- {item.name}: from {item.start_date.isoformat()} to {item.end_date.isoformat()} "
            f"(zones {', '.join(zone.value for zone in item.zones)})"
            for item in context.school_holidays
        ],
        "None",
    )

    return f"""You are a calendar planning assistant. You receive natural-language instructions to create, modify or delete events.

CURRENT CONTEXT:
- Today: {context.today_weekday} {context.today.isoformat()}
- Current year: {context.today.year}
- School zone: {context.school_zone.value}

REFERENCE CALENDAR - MANDATORY:
{reference}

IMPORTANT: use this reference calendar to determine dates. NEVER rely on your own estimate of weekdays, it is often wrong.
For "the 2nd Friday of January 2026", read the "janvier 2026" line above and take the 2nd number of the fridays list.

EXISTING EVENTS:
{_render_events(context.event_lines)}

AVAILABLE EVENT TYPES:
{_render_types(context.event_types)}

FRENCH PUBLIC HOLIDAYS:
{holidays}

SCHOOL HOLIDAYS (zone {context.school_zone.value}):
{school_holidays}

DEFAULT RULES:
- Events run Monday to Friday unless told otherwise.
- Avoid public holidays unless explicitly requested.
- Take school holidays into account when planning.
- "Week" = 5 working days (Monday-Friday). "Fortnight" = 2 weeks.
- Without an explicit year, use the current year, or next year when the date has already passed.

{SPLITTING_RULES}

DATE INTERPRETATION:
- "early January" = 1-10 January, "mid-January" = 10-20 January, "late January" = 20-31 January.
- "week of the 15th" = from the Monday of the week containing the 15th to the Friday.
- "after the February holidays" or "during the X holidays" = use the school holiday dates above.

INSTRUCTIONS:
1. Interpret the user request precisely.
2. ALWAYS use the date tools to compute exact dates. NEVER guess a date.
   - "the 2nd Friday of January 2026" -> get_nth_weekday_of_month
   - "3 weeks before 15 March" -> get_relative_date
   - checking which weekday a date falls on -> get_day_of_week
3. Create or reuse event types when needed.
4. Return ONLY valid JSON, with no text before or after.

{RESPONSE_FORMAT}"""


def render_synthesis_prompt(today: date, event_lines: Sequence[EventLine], event_types: Iterable[EventType]) -> str:
    return f"""You are an assistant that edits a calendar following the user's instructions.
Today is {weekday_name(today)} {today.isoformat()}; without an explicit year, use {today.year}.
The user sends back a rewritten month-by-month synthesis of the calendar; turn the differences into actions.

CURRENT CALENDAR STATE:
{_render_events(event_lines)}

AVAILABLE EVENT TYPES:
{_render_types(event_types)}

RULES:
1. To DELETE: "delete" action with the exact id.
2. To MODIFY: "update" action with the exact id.
3. To CREATE: "create" action without id.
4. Use the date tools to resolve any relative date.

{SPLITTING_RULES}

{RESPONSE_FORMAT}"""


def render_synthesis_request(synthesis_text: str) -> str:
    return f"Here is the new synthesis of the calendar:\n\n{synthesis_text}"


def _short_date(day: date) -> str:
    return f"{day.day} {month_name(day.month)}"


def render_synthesis(events: Iterable[Event]) -> str:
    """Month-grouped text view of a calendar that the user can edit and send back."""

    grouped: "OrderedDict[tuple[int, int], List[Event]]" = OrderedDict()
    for event in sorted(events, key=lambda item: (item.start_date, item.end_date, item.title)):
        grouped.setdefault((event.start_date.year, event.start_date.month), []).append(event)

    blocks: List[str] = []
    for (year, month), month_events in grouped.items():
        lines = [f"{month_name(month).capitalize()} {year}"]
        for event in month_events:
            when = _short_date(event.start_date)
            if event.is_multi_day:
                when = f"{when} → {_short_date(event.end_date)}"
            suffix = f" [{event.event_type.name}]" if event.event_type else ""
            lines.append(f"- {event.title}: {when}{suffix}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


__all__ = [
    "RESPONSE_FORMAT",
    "render_synthesis",
    "render_synthesis_prompt",
    "render_synthesis_request",
    "render_system_prompt",
]
