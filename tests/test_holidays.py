from __future__ import annotations

from datetime import date, timedelta

import pytest

from prompt_planner.dates import (
    classify_day,
    compute_easter,
    find_holiday,
    is_weekend,
    merged_school_holiday_for_date,
    public_holidays,
    school_holidays,
)
from prompt_planner.domain import DayKind, SchoolZone
from prompt_planner.errors import MalformedInputError


@pytest.mark.parametrize(
    ("year", "expected"),
    [
        (1913, date(1913, 3, 23)),
        (2000, date(2000, 4, 23)),
        (2024, date(2024, 3, 31)),
        (2025, date(2025, 4, 20)),
        (2026, date(2026, 4, 5)),
        (2038, date(2038, 4, 25)),
        (2285, date(2285, 3, 22)),
    ],
)
def test_known_easter_dates(year, expected):
    assert compute_easter(year) == expected


def test_easter_is_a_sunday_between_march_22_and_april_25():
    for year in range(1900, 2101):
        easter = compute_easter(year)
        assert easter.weekday() == 6
        assert date(year, 3, 22) <= easter <= date(year, 4, 25)


def test_easter_rejects_pre_gregorian_years():
    with pytest.raises(MalformedInputError):
        compute_easter(1500)


def test_public_holidays_2026():
    holidays = {holiday.date: holiday.name for holiday in public_holidays(2026)}
    assert len(holidays) == 11
    assert holidays[date(2026, 4, 6)] == "Lundi de Pâques"
    assert holidays[date(2026, 5, 14)] == "Ascension"
    assert holidays[date(2026, 5, 25)] == "Lundi de Pentecôte"
    assert holidays[date(2026, 7, 14)] == "Fête Nationale"
    assert date(2026, 4, 5) not in holidays


def test_day_classification_partitions_the_year():
    holidays = public_holidays(2026)
    current = date(2026, 1, 1)
    while current.year == 2026:
        kind = classify_day(current, holidays)
        weekend = is_weekend(current)
        holiday = find_holiday(current, holidays) is not None
        expected = {
            (False, False): DayKind.ORDINARY,
            (True, False): DayKind.WEEKEND,
            (False, True): DayKind.PUBLIC_HOLIDAY,
            (True, True): DayKind.WEEKEND_HOLIDAY,
        }[(weekend, holiday)]
        assert kind is expected
        current += timedelta(days=1)


def test_classification_examples():
    holidays = public_holidays(2026)
    assert classify_day(date(2026, 5, 14), holidays) is DayKind.PUBLIC_HOLIDAY
    assert classify_day(date(2026, 11, 1), holidays) is DayKind.WEEKEND_HOLIDAY
    assert classify_day(date(2026, 3, 7), holidays) is DayKind.WEEKEND
    assert classify_day(date(2026, 3, 9), holidays) is DayKind.ORDINARY


def test_school_holidays_filtered_by_zone():
    zone_b = school_holidays(2026, SchoolZone.B)
    assert zone_b
    assert all(SchoolZone.B in holiday.zones for holiday in zone_b)
    assert {holiday.name for holiday in zone_b} >= {"Hiver", "Printemps", "Été", "Toussaint", "Noël"}
    assert school_holidays(2040) == []


def test_merged_school_holiday_unions_overlapping_zones():
    table = school_holidays(2026)
    merged = merged_school_holiday_for_date(date(2026, 2, 21), table)
    assert merged is not None
    assert merged.name == "Hiver"
    assert merged.zones == (SchoolZone.A, SchoolZone.B, SchoolZone.C)

    only_b = merged_school_holiday_for_date(date(2026, 3, 5), table)
    assert only_b is not None and only_b.zones == (SchoolZone.B,)

    assert merged_school_holiday_for_date(date(2026, 3, 20), table) is None
