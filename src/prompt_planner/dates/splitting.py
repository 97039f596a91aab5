from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple

from ..errors import MalformedInputError

DateRange = Tuple[date, date]


@dataclass(frozen=True, slots=True)
class SplitPlan:
    """Segments left over once ``clicked`` is carved out of an inclusive range."""

    clicked: date
    before: Optional[DateRange] = None
    after: Optional[DateRange] = None

    @property
    def segments(self) -> List[DateRange]:
        return [segment for segment in (self.before, self.after) if segment is not None]


def split_range(start: date, end: date, clicked: date) -> SplitPlan:
    if start > end:
        raise MalformedInputError(f"Invalid range: {start} is after {end}.")
    if not start <= clicked <= end:
        raise MalformedInputError(f"{clicked} is outside the event range {start} to {end}.")

    one_day = timedelta(days=1)
    before = (start, clicked - one_day) if clicked > start else None
    after = (clicked + one_day, end) if clicked < end else None
    return SplitPlan(clicked=clicked, before=before, after=after)


__all__ = ["DateRange", "SplitPlan", "split_range"]
