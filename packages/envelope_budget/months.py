"""Calendar month value types used to bucket allocations and summaries."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from typing import Protocol

_MONTH_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")


class DateLike(Protocol):
    @property
    def year(self) -> int: ...

    @property
    def month(self) -> int: ...


class Month(IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    def increment(self) -> Month:
        """Return the following month; DECEMBER wraps to JANUARY."""
        return Month(self.value % 12 + 1)

    def decrement(self) -> Month:
        """Return the preceding month; JANUARY wraps to DECEMBER."""
        return Month((self.value - 2) % 12 + 1)


@dataclass(frozen=True, order=True, slots=True)
class CalendarMonth:
    """A (year, month) pair, ordered by year first and then month of year.

    Instances are hashable and serve as the time component of every
    allocation and summary key.
    """

    year: int
    month: Month

    def __post_init__(self) -> None:
        if not isinstance(self.month, Month):
            # Month(13) raises ValueError, which is what callers should see.
            object.__setattr__(self, "month", Month(int(self.month)))

    @classmethod
    def from_date(cls, value: DateLike) -> CalendarMonth:
        """Bucket any date-like value (``date``, ``datetime``, ...) by month."""
        return cls(value.year, Month(value.month))

    @classmethod
    def parse(cls, text: str) -> CalendarMonth:
        """Parse ``"YYYY-MM"``."""
        m = _MONTH_RE.match(text)
        if m is None:
            raise ValueError(f"Invalid calendar month {text!r}; expected YYYY-MM")
        return cls(int(m.group(1)), Month(int(m.group(2))))

    def increment(self) -> CalendarMonth:
        """Return the next calendar month, rolling the year after December."""
        if self.month is Month.DECEMBER:
            return CalendarMonth(self.year + 1, Month.JANUARY)
        return CalendarMonth(self.year, self.month.increment())

    def decrement(self) -> CalendarMonth:
        if self.month is Month.JANUARY:
            return CalendarMonth(self.year - 1, Month.DECEMBER)
        return CalendarMonth(self.year, self.month.decrement())

    def first_day(self) -> date:
        return date(self.year, self.month.value, 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month.value:02d}"


def as_calendar_month(value: CalendarMonth | DateLike) -> CalendarMonth:
    """Accept either a ``CalendarMonth`` or a date-like value."""

    if isinstance(value, CalendarMonth):
        return value
    return CalendarMonth.from_date(value)


__all__ = ["CalendarMonth", "DateLike", "Month", "as_calendar_month"]
