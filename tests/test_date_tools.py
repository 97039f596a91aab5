from __future__ import annotations

import pytest

from prompt_planner.dates.date_tools import (
    date_tool_specs,
    day_of_week,
    execute_date_tool,
    last_weekday_of_month,
    monday_of_week,
    next_weekday,
    nth_weekday_of_month,
    relative_date,
)


def test_second_friday_of_january_2026():
    result = nth_weekday_of_month(2026, 1, "vendredi", 2)
    assert result.to_dict() == {"success": True, "date": "2026-01-09", "dayOfWeek": "vendredi"}


def test_last_friday_of_march_2026():
    assert last_weekday_of_month(2026, 3, "friday").date == "2026-03-27"


def test_monday_of_week_maps_sunday_back_six_days():
    result = monday_of_week("2026-03-15")
    assert result.success
    assert result.date == "2026-03-09"
    assert result.day_of_week == "lundi"


def test_nth_weekday_fails_when_occurrence_missing():
    result = nth_weekday_of_month(2026, 2, "vendredi", 5)
    assert not result.success
    assert result.error


@pytest.mark.parametrize("weekday", ["Funday", "", None])
def test_invalid_weekday_is_reported(weekday):
    result = next_weekday("2026-03-15", weekday)
    assert result.to_dict()["success"] is False


@pytest.mark.parametrize("value", ["2026-02-30", "15/03/2026", "", 20260315])
def test_invalid_dates_are_reported(value):
    assert day_of_week(value).success is False


def test_invalid_month_is_reported():
    assert nth_weekday_of_month(2026, 13, "lundi", 1).success is False


def test_relative_date_uses_month_rollover():
    assert relative_date("2026-01-31", 1, "months").date == "2026-03-03"
    assert relative_date("2026-03-15", -3, "weeks").date == "2026-02-22"
    assert relative_date("2026-03-15", 10, "days").date == "2026-03-25"
    assert relative_date("2026-03-15", 1, "fortnights").success is False


def test_next_weekday_include_today():
    assert next_weekday("2026-03-15", "dimanche").date == "2026-03-22"
    assert next_weekday("2026-03-15", "dimanche", include_today=True).date == "2026-03-15"
    assert next_weekday("2026-03-15", "Monday").date == "2026-03-16"


def test_day_of_week_accepts_datetime_strings():
    assert day_of_week("2026-07-14T10:00:00").day_of_week == "mardi"


def test_execute_date_tool_dispatches_and_coerces():
    result = execute_date_tool("get_nth_weekday_of_month", {"year": "2026", "month": 1.0, "weekday": "VENDREDI", "nth": 2})
    assert result.date == "2026-01-09"


def test_execute_date_tool_reports_unknown_tools_and_bad_arguments():
    assert execute_date_tool("get_moon_phase", {}).to_dict() == {"success": False, "error": "Unknown tool: get_moon_phase"}
    missing = execute_date_tool("get_day_of_week", {})
    assert missing.success is False
    unexpected = execute_date_tool("get_day_of_week", {"date": "2026-03-15", "zone": "B"})
    assert unexpected.success is False


def test_tool_catalogue_lists_the_six_tools():
    names = {spec["function"]["name"] for spec in date_tool_specs()}
    assert names == {
        "get_nth_weekday_of_month",
        "get_last_weekday_of_month",
        "get_day_of_week",
        "get_relative_date",
        "get_next_weekday",
        "get_monday_of_week",
    }


def test_last_day_representable_is_handled():
    assert nth_weekday_of_month(9999, 12, "vendredi", 5).date == "9999-12-31"
    assert not nth_weekday_of_month(9999, 12, "lundi", 5).success
    assert not next_weekday("9999-12-31", "lundi").success
    assert next_weekday("9999-12-31", "vendredi", include_today=True).date == "9999-12-31"
    assert not execute_date_tool("get_next_weekday", {"from_date": "9999-12-30", "weekday": "samedi"}).success


def test_execute_date_tool_reports_nth_below_one():
    arguments = {"year": 2026, "month": 1, "weekday": "lundi", "nth": 0}
    assert not execute_date_tool("get_nth_weekday_of_month", arguments).success
