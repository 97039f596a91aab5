"""French public holidays and school-vacation windows."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from ..domain import DayKind, Holiday, MergedSchoolHoliday, SchoolHoliday, SchoolZone
from ..errors import MalformedInputError

_A, _B, _C = SchoolZone.A, SchoolZone.B, SchoolZone.C
_ALL_ZONES = (_A, _B, _C)


def compute_easter(year: int) -> date:
    """Gregorian Easter Sunday (Meeus/Jones/Butcher), integer arithmetic only."""

    if year < 1583:
        raise MalformedInputError(f"Gregorian Easter is undefined before 1583 (got {year}).")
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def public_holidays(year: int) -> List[Holiday]:
    easter = compute_easter(year)
    return [
        Holiday(date(year, 1, 1), "Jour de l'An"),
        Holiday(easter + timedelta(days=1), "Lundi de Pâques"),
        Holiday(date(year, 5, 1), "Fête du Travail"),
        Holiday(date(year, 5, 8), "Victoire 1945"),
        Holiday(easter + timedelta(days=39), "Ascension"),
        Holiday(easter + timedelta(days=50), "Lundi de Pentecôte"),
        Holiday(date(year, 7, 14), "Fête Nationale"),
        Holiday(date(year, 8, 15), "Assomption"),
        Holiday(date(year, 11, 1), "Toussaint"),
        Holiday(date(year, 11, 11), "Armistice 1918"),
        Holiday(date(year, 12, 25), "Noël"),
    ]


def holidays_for_range(start_year: int, end_year: int) -> List[Holiday]:
    holidays: List[Holiday] = []
    for year in range(start_year, end_year + 1):
        holidays.extend(public_holidays(year))
    return holidays


def find_holiday(day: date, holidays: Iterable[Holiday]) -> Optional[Holiday]:
    for holiday in holidays:
        if holiday.date == day:
            return holiday
    return None


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def classify_day(day: date, holidays: Iterable[Holiday]) -> DayKind:
    weekend = is_weekend(day)
    holiday = find_holiday(day, holidays) is not None
    if weekend and holiday:
        return DayKind.WEEKEND_HOLIDAY
    if holiday:
        return DayKind.PUBLIC_HOLIDAY
    if weekend:
        return DayKind.WEEKEND
    return DayKind.ORDINARY


# Published by the French education ministry, keyed by the year each table was
# issued for. Curated data: extend by adding a year, never computed.
SCHOOL_HOLIDAYS: Dict[int, List[SchoolHoliday]] = {
    2025: [
        SchoolHoliday("Noël", date(2024, 12, 21), date(2025, 1, 6), _ALL_ZONES),
        SchoolHoliday("Hiver", date(2025, 2, 8), date(2025, 2, 24), (_A,)),
        SchoolHoliday("Hiver", date(2025, 2, 22), date(2025, 3, 10), (_B,)),
        SchoolHoliday("Hiver", date(2025, 2, 15), date(2025, 3, 3), (_C,)),
        SchoolHoliday("Printemps", date(2025, 4, 5), date(2025, 4, 22), (_A,)),
        SchoolHoliday("Printemps", date(2025, 4, 19), date(2025, 5, 5), (_B,)),
        SchoolHoliday("Printemps", date(2025, 4, 12), date(2025, 4, 28), (_C,)),
        SchoolHoliday("Ascension", date(2025, 5, 29), date(2025, 6, 2), _ALL_ZONES),
        SchoolHoliday("Été", date(2025, 7, 5), date(2025, 9, 1), _ALL_ZONES),
        SchoolHoliday("Toussaint", date(2025, 10, 18), date(2025, 11, 3), _ALL_ZONES),
        SchoolHoliday("Noël", date(2025, 12, 20), date(2026, 1, 5), _ALL_ZONES),
    ],
    2026: [
        SchoolHoliday("Hiver", date(2026, 2, 7), date(2026, 2, 23), (_A,)),
        SchoolHoliday("Hiver", date(2026, 2, 21), date(2026, 3, 9), (_B,)),
        SchoolHoliday("Hiver", date(2026, 2, 14), date(2026, 3, 2), (_C,)),
        SchoolHoliday("Printemps", date(2026, 4, 4), date(2026, 4, 20), (_A,)),
        SchoolHoliday("Printemps", date(2026, 4, 18), date(2026, 5, 4), (_B,)),
        SchoolHoliday("Printemps", date(2026, 4, 11), date(2026, 4, 27), (_C,)),
        SchoolHoliday("Ascension", date(2026, 5, 14), date(2026, 5, 18), _ALL_ZONES),
        SchoolHoliday("Été", date(2026, 7, 4), date(2026, 9, 1), _ALL_ZONES),
        SchoolHoliday("Toussaint", date(2026, 10, 17), date(2026, 11, 2), _ALL_ZONES),
        SchoolHoliday("Noël", date(2026, 12, 19), date(2027, 1, 4), _ALL_ZONES),
    ],
}


def school_holidays(year: int, zone: Optional[SchoolZone] = None) -> List[SchoolHoliday]:
    holidays = SCHOOL_HOLIDAYS.get(year, [])
    if zone is None:
        return list(holidays)
    zone = SchoolZone(zone)
    return [holiday for holiday in holidays if zone in holiday.zones]


def school_holidays_for_range(
    start_year: int,
    end_year: int,
    zone: Optional[SchoolZone] = None,
) -> List[SchoolHoliday]:
    holidays: List[SchoolHoliday] = []
    for year in range(start_year, end_year + 1):
        holidays.extend(school_holidays(year, zone))
    return holidays


def find_school_holiday(day: date, holidays: Iterable[SchoolHoliday]) -> Optional[SchoolHoliday]:
    for holiday in holidays:
        if holiday.covers(day):
            return holiday
    return None


def merged_school_holiday_for_date(
    day: date,
    holidays: Iterable[SchoolHoliday],
) -> Optional[MergedSchoolHoliday]:
    """Merge every zone whose window covers ``day`` under the first matching name."""

    matching = [holiday for holiday in holidays if holiday.covers(day)]
    if not matching:
        return None
    zones = {zone for holiday in matching for zone in holiday.zones}
    return MergedSchoolHoliday(
        name=matching[0].name,
        zones=tuple(sorted(zones, key=lambda zone: zone.value)),
    )


__all__ = [
    "SCHOOL_HOLIDAYS",
    "classify_day",
    "compute_easter",
    "find_holiday",
    "find_school_holiday",
    "holidays_for_range",
    "is_weekend",
    "merged_school_holiday_for_date",
    "public_holidays",
    "school_holidays",
    "school_holidays_for_range",
]
