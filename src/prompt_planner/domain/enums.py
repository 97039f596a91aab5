from __future__ import annotations

from enum import Enum


class SchoolZone(str, Enum):
    A = "A"
    B = "B"
    C = "C"


class DayKind(str, Enum):
    ORDINARY = "ordinary"
    WEEKEND = "weekend"
    PUBLIC_HOLIDAY = "public_holiday"
    WEEKEND_HOLIDAY = "weekend_holiday"


class DateUnit(str, Enum):
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
