"""Grounding context handed to the reasoning backend.

Everything here is pure data derived from ``today`` and the calendar content;
building a context never touches the store or the backend.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from ..config import get_settings
from ..dates.holidays import find_holiday, holidays_for_range, is_weekend, school_holidays_for_range
from ..dates.names import month_name, weekday_name
from ..domain import Event, EventType, Holiday, SchoolHoliday, SchoolZone

REFERENCE_MONTHS = 14


@dataclass(frozen=True, slots=True)
class MonthReference:
    year: int
    month: int
    first_weekday: str
    mondays: tuple[int, ...]
    fridays: tuple[int, ...]
    saturdays: tuple[int, ...]

    def render(self) -> str:
        return (
            f"{month_name(self.month)} {self.year}: 1st = {self.first_weekday}, "
            f"mondays = {_join(self.mondays)}, fridays = {_join(self.fridays)}, "
            f"saturdays = {_join(self.saturdays)}"
        )


@dataclass(frozen=True, slots=True)
class EventLine:
    id: str
    title: str
    start_date: date
    end_date: date
    event_type: Optional[str] = None
    notes: Optional[str] = None
    holidays: tuple[str, ...] = ()
    weekends: tuple[str, ...] = ()

    @property
    def has_special_days(self) -> bool:
        return bool(self.holidays or self.weekends)

    def render(self) -> str:
        line = (
            f'- [id: {self.id}] "{self.title}" from {weekday_name(self.start_date)} {self.start_date.isoformat()}'
            f" to {weekday_name(self.end_date)} {self.end_date.isoformat()}"
        )
        if self.event_type:
            line += f" (type: {self.event_type})"
        if self.holidays:
            line += f" ⚠️ INCLUDES HOLIDAY(S): {', '.join(self.holidays)}"
        if self.weekends:
            line += f" ⚠️ INCLUDES WEEKEND(S): {', '.join(self.weekends)}"
        return line


@dataclass(frozen=True, slots=True)
class PromptContext:
    today: date
    today_weekday: str
    school_zone: SchoolZone
    reference_months: tuple[MonthReference, ...]
    event_lines: tuple[EventLine, ...]
    event_types: tuple[EventType, ...]
    holidays: tuple[Holiday, ...]
    school_holidays: tuple[SchoolHoliday, ...]


def _join(days: Iterable[int]) -> str:
    return ", ".join(str(day) for day in days)


def month_reference(year: int, month: int) -> MonthReference:
    mondays: List[int] = []
    fridays: List[int] = []
    saturdays: List[int] = []
    current = date(year, month, 1)
    while current.month == month:
        weekday = current.weekday()
        if weekday == 0:
            mondays.append(current.day)
        elif weekday == 4:
            fridays.append(current.day)
        elif weekday == 5:
            saturdays.append(current.day)
        current += timedelta(days=1)
    return MonthReference(
        year=year,
        month=month,
        first_weekday=weekday_name(date(year, month, 1)),
        mondays=tuple(mondays),
        fridays=tuple(fridays),
        saturdays=tuple(saturdays),
    )


def reference_months(today: date, count: int = REFERENCE_MONTHS) -> List[MonthReference]:
    """Weekday table for ``count`` months starting with the month of ``today``."""

    months: List[MonthReference] = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append(month_reference(year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def describe_event(event: Event, holidays: Optional[Sequence[Holiday]] = None) -> EventLine:
    """Summarize an event, listing every weekend day and public holiday it covers."""

    if holidays is None:
        holidays = holidays_for_range(event.start_date.year, event.end_date.year)
    found_holidays: List[str] = []
    found_weekends: List[str] = []
    current = event.start_date
    while current <= event.end_date:
        holiday = find_holiday(current, holidays)
        if holiday is not None:
            found_holidays.append(f"{holiday.name} ({current.isoformat()})")
        if is_weekend(current):
            found_weekends.append(f"{weekday_name(current)} {current.isoformat()}")
        current += timedelta(days=1)
    return EventLine(
        id=event.id,
        title=event.title,
        start_date=event.start_date,
        end_date=event.end_date,
        event_type=event.event_type.name if event.event_type else None,
        notes=event.notes,
        holidays=tuple(found_holidays),
        weekends=tuple(found_weekends),
    )


def describe_events(events: Iterable[Event], event_types: Iterable[EventType]) -> List[EventLine]:
    type_names = {event_type.id: event_type.name for event_type in event_types}
    lines: List[EventLine] = []
    for event in events:
        line = describe_event(event)
        if line.event_type is None and event.event_type_id in type_names:
            line = replace(line, event_type=type_names[event.event_type_id])
        lines.append(line)
    return lines


def build_prompt_context(
    today: date,
    events: Iterable[Event],
    event_types: Iterable[EventType],
    school_zone: Optional[SchoolZone] = None,
    *,
    months: int = REFERENCE_MONTHS,
) -> PromptContext:
    zone = SchoolZone(school_zone or get_settings().planner.school_zone)
    types = tuple(event_types)
    lines = describe_events(events, types)

    return PromptContext(
        today=today,
        today_weekday=weekday_name(today),
        school_zone=zone,
        reference_months=tuple(reference_months(today, months)),
        event_lines=tuple(lines),
        event_types=types,
        holidays=tuple(holidays_for_range(today.year, today.year + 1)),
        school_holidays=tuple(school_holidays_for_range(today.year, today.year + 1, zone)),
    )


__all__ = [
    "EventLine",
    "MonthReference",
    "PromptContext",
    "REFERENCE_MONTHS",
    "build_prompt_context",
    "describe_event",
    "describe_events",
    "month_reference",
    "reference_months",
]
