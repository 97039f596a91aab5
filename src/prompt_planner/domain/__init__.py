"""Domain models for calendar planning."""

from __future__ import annotations

from .actions import (
    CreateAction,
    DeleteAction,
    NewEventType,
    PromptAction,
    PromptResult,
    RejectedAction,
    UpdateAction,
    action_to_dict,
)
from .enums import DateUnit, DayKind, SchoolZone
from .models import (
    CalendarState,
    Event,
    EventType,
    Holiday,
    MergedSchoolHoliday,
    Prompt,
    SchoolHoliday,
    parse_day,
)

__all__ = [
    "CalendarState",
    "CreateAction",
    "DateUnit",
    "DayKind",
    "DeleteAction",
    "Event",
    "EventType",
    "Holiday",
    "MergedSchoolHoliday",
    "NewEventType",
    "Prompt",
    "PromptAction",
    "PromptResult",
    "RejectedAction",
    "SchoolHoliday",
    "SchoolZone",
    "UpdateAction",
    "action_to_dict",
    "parse_day",
]
