"""Deterministic date arithmetic exposed to the reasoning backend as tools.

Every operation validates its inputs and returns a :class:`DateToolResult`; no
operation raises on bad input and none of them guesses.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Literal, Mapping, Optional

from ..api.registry import get_api_function, get_api_functions, register_api
from ..domain import DateUnit
from .names import parse_weekday, weekday_name

logger = logging.getLogger(__name__)

TOOL_CATEGORY = "dates"

_WEEKDAY_DOC = "Day of the week, in French (lundi … dimanche) or English (monday … sunday)."
_DATE_DOC = "A date in YYYY-MM-DD format."


@dataclass(frozen=True)
class DateToolResult:
    success: bool
    date: Optional[str] = None
    day_of_week: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: date) -> "DateToolResult":
        return cls(success=True, date=value.isoformat(), day_of_week=weekday_name(value))

    @classmethod
    def fail(cls, message: str) -> "DateToolResult":
        return cls(success=False, error=message)

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {"success": True, "date": self.date, "dayOfWeek": self.day_of_week}


class _InvalidArgument(ValueError):
    pass


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise _InvalidArgument(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise _InvalidArgument(f"{name} must be an integer, got {value!r}")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "oui"}
    return bool(value)


def _as_date(value: Any) -> date:
    if not isinstance(value, str):
        raise _InvalidArgument(f"Invalid date: {value!r}")
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise _InvalidArgument(f"Invalid date: {value}") from exc


def _as_weekday(value: Any) -> int:
    index = parse_weekday(value)
    if index is None:
        raise _InvalidArgument(f"Invalid weekday: {value}")
    return index


def _as_month(value: Any) -> int:
    month = _as_int(value, "month")
    if not 1 <= month <= 12:
        raise _InvalidArgument(f"Invalid month: {month} (expected 1-12)")
    return month


def _as_year(value: Any) -> int:
    year = _as_int(value, "year")
    if not date.min.year <= year <= date.max.year:
        raise _InvalidArgument(f"Invalid year: {year}")
    return year


@register_api(
    "get_nth_weekday_of_month",
    description="Compute the Nth occurrence of a weekday in a month, e.g. the 2nd Friday of January 2026.",
    category=TOOL_CATEGORY,
    tags=("dates", "read"),
    parameters={
        "year": "The year, e.g. 2026.",
        "month": "The month, 1-12.",
        "weekday": _WEEKDAY_DOC,
        "nth": "Which occurrence: 1 for the first, 2 for the second, and so on.",
    },
)
def nth_weekday_of_month(year: int, month: int, weekday: str, nth: int) -> DateToolResult:
    try:
        year = _as_year(year)
        month = _as_month(month)
        target = _as_weekday(weekday)
        nth = _as_int(nth, "nth")
    except _InvalidArgument as exc:
        return DateToolResult.fail(str(exc))

    first = date(year, month, 1)
    day = 1 + (target - first.weekday()) % 7 + 7 * (nth - 1)
    if nth >= 1 and day <= calendar.monthrange(year, month)[1]:
        return DateToolResult.ok(first.replace(day=day))
    return DateToolResult.fail(f"There is no occurrence #{nth} of {weekday} in {month:02d}/{year}")


@register_api(
    "get_last_weekday_of_month",
    description="Compute the last occurrence of a weekday in a month, e.g. the last Friday of March 2026.",
    category=TOOL_CATEGORY,
    tags=("dates", "read"),
    parameters={
        "year": "The year, e.g. 2026.",
        "month": "The month, 1-12.",
        "weekday": _WEEKDAY_DOC,
    },
)
def last_weekday_of_month(year: int, month: int, weekday: str) -> DateToolResult:
    try:
        year = _as_year(year)
        month = _as_month(month)
        target = _as_weekday(weekday)
    except _InvalidArgument as exc:
        return DateToolResult.fail(str(exc))

    current = date(year, month, calendar.monthrange(year, month)[1])
    while current.weekday() != target:
        current -= timedelta(days=1)
    return DateToolResult.ok(current)


@register_api(
    "get_day_of_week",
    description="Return the day of the week for a given date.",
    category=TOOL_CATEGORY,
    tags=("dates", "read"),
    parameters={"date": _DATE_DOC},
)
def day_of_week(date: str) -> DateToolResult:  # noqa: A002 - tool argument name
    try:
        value = _as_date(date)
    except _InvalidArgument as exc:
        return DateToolResult.fail(str(exc))
    return DateToolResult.ok(value)


def _add_months(base: date, offset: int) -> date:
    # Standard rollover: Jan 31 + 1 month lands in early March, never clamped.
    year, month_index = divmod(base.year * 12 + base.month - 1 + offset, 12)
    return date(year, month_index + 1, 1) + timedelta(days=base.day - 1)


@register_api(
    "get_relative_date",
    description="Shift a base date by a number of days, weeks or months, e.g. 3 weeks before 2026-03-15.",
    category=TOOL_CATEGORY,
    tags=("dates", "read"),
    parameters={
        "base_date": "The reference date in YYYY-MM-DD format.",
        "offset": "The shift: positive for after, negative for before.",
        "unit": "The unit of the shift.",
    },
)
def relative_date(base_date: str, offset: int, unit: Literal["days", "weeks", "months"]) -> DateToolResult:
    try:
        base = _as_date(base_date)
        offset = _as_int(offset, "offset")
        resolved_unit = DateUnit(unit)
    except _InvalidArgument as exc:
        return DateToolResult.fail(str(exc))
    except ValueError:
        return DateToolResult.fail(f"Invalid unit: {unit} (expected days, weeks or months)")

    try:
        if resolved_unit is DateUnit.DAYS:
            result = base + timedelta(days=offset)
        elif resolved_unit is DateUnit.WEEKS:
            result = base + timedelta(weeks=offset)
        else:
            result = _add_months(base, offset)
    except (OverflowError, ValueError):
        return DateToolResult.fail(f"Date out of range: {base_date} {offset:+d} {resolved_unit.value}")
    return DateToolResult.ok(result)


@register_api(
    "get_next_weekday",
    description="Find the next given weekday starting from a date.",
    category=TOOL_CATEGORY,
    tags=("dates", "read"),
    parameters={
        "from_date": "The start date in YYYY-MM-DD format.",
        "weekday": _WEEKDAY_DOC,
        "include_today": "Return the start date itself when it already falls on the weekday.",
    },
)
def next_weekday(from_date: str, weekday: str, include_today: bool = False) -> DateToolResult:
    try:
        current = _as_date(from_date)
        target = _as_weekday(weekday)
    except _InvalidArgument as exc:
        return DateToolResult.fail(str(exc))

    try:
        if not _as_bool(include_today):
            current += timedelta(days=1)
        current += timedelta(days=(target - current.weekday()) % 7)
    except OverflowError:
        return DateToolResult.fail(f"Date out of range: no {weekday} after {from_date}")
    return DateToolResult.ok(current)


@register_api(
    "get_monday_of_week",
    description="Find the Monday of the (ISO, Monday-first) week containing a date.",
    category=TOOL_CATEGORY,
    tags=("dates", "read"),
    parameters={"date": _DATE_DOC},
)
def monday_of_week(date: str) -> DateToolResult:  # noqa: A002 - tool argument name
    try:
        value = _as_date(date)
    except _InvalidArgument as exc:
        return DateToolResult.fail(str(exc))
    # weekday() is 6 on Sunday, so Sunday goes back six days.
    return DateToolResult.ok(value - timedelta(days=value.weekday()))


def date_tool_specs() -> list[Dict[str, Any]]:
    """Tool catalogue in chat-completions format."""

    return [func.as_tool() for func in get_api_functions(TOOL_CATEGORY)]


def execute_date_tool(name: str, arguments: Optional[Mapping[str, Any]]) -> DateToolResult:
    try:
        api_function = get_api_function(name)
    except KeyError:
        return DateToolResult.fail(f"Unknown tool: {name}")
    if api_function.category != TOOL_CATEGORY:
        return DateToolResult.fail(f"Unknown tool: {name}")
    try:
        bound = api_function.bind(arguments or {})
    except TypeError as exc:
        return DateToolResult.fail(f"Invalid arguments for {name}: {exc}")
    try:
        result = api_function.func(*bound.args, **bound.kwargs)
    except (OverflowError, ValueError) as exc:
        logger.warning("Tool %s failed on %s: %s", name, dict(arguments or {}), exc)
        return DateToolResult.fail(f"{name} could not compute a date: {exc}")
    logger.debug("Tool %s(%s) -> %s", name, dict(arguments or {}), result)
    return result


__all__ = [
    "DateToolResult",
    "TOOL_CATEGORY",
    "date_tool_specs",
    "day_of_week",
    "execute_date_tool",
    "last_weekday_of_month",
    "monday_of_week",
    "next_weekday",
    "nth_weekday_of_month",
    "relative_date",
]
