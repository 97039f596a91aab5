from __future__ import annotations

from datetime import date
from typing import Optional

# Indexed by date.weekday(): Monday == 0.
WEEKDAYS_FR = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")
WEEKDAYS_EN = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MONTHS_FR = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)

_WEEKDAY_LOOKUP = {name: idx for idx, name in enumerate(WEEKDAYS_FR)}
_WEEKDAY_LOOKUP.update({name: idx for idx, name in enumerate(WEEKDAYS_EN)})


def weekday_name(day: date) -> str:
    return WEEKDAYS_FR[day.weekday()]


def month_name(month: int) -> str:
    return MONTHS_FR[month - 1]


def parse_weekday(name: object) -> Optional[int]:
    """Return the ``date.weekday()`` index for a French or English day name."""

    if not isinstance(name, str):
        return None
    return _WEEKDAY_LOOKUP.get(name.strip().lower())
