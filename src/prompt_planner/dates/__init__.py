"""Calendar arithmetic: French holidays, date tools and range splitting."""

from __future__ import annotations

from .date_tools import DateToolResult, date_tool_specs, execute_date_tool
from .holidays import (
    classify_day,
    compute_easter,
    find_holiday,
    find_school_holiday,
    holidays_for_range,
    is_weekend,
    merged_school_holiday_for_date,
    public_holidays,
    school_holidays,
    school_holidays_for_range,
)
from .names import month_name, parse_weekday, weekday_name
from .splitting import SplitPlan, split_range

__all__ = [
    "DateToolResult",
    "SplitPlan",
    "classify_day",
    "compute_easter",
    "date_tool_specs",
    "execute_date_tool",
    "find_holiday",
    "find_school_holiday",
    "holidays_for_range",
    "is_weekend",
    "merged_school_holiday_for_date",
    "month_name",
    "parse_weekday",
    "public_holidays",
    "school_holidays",
    "school_holidays_for_range",
    "split_range",
    "weekday_name",
]
