"""Day-only calendar arithmetic - no I/O dependencies."""

import calendar
from datetime import date, datetime, timedelta
from enum import IntEnum
from typing import Iterator


class Weekday(IntEnum):
    """Day of the week, Sunday first (column order of the calendar grids)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, d: date) -> "Weekday":
        """Weekday of a date (date.weekday() is Monday-first)."""
        return cls((d.weekday() + 1) % 7)

    @classmethod
    def parse(cls, code: str) -> "Weekday":
        """Parse an English or Portuguese weekday abbreviation."""
        key = code.strip().lower()[:3]
        try:
            return _WEEKDAY_CODES[key]
        except KeyError:
            raise ValueError(f"Unknown weekday code: {code!r}") from None

    @property
    def short_label(self) -> str:
        return _SHORT_LABELS[self]


_WEEKDAY_CODES = {
    "sun": Weekday.SUNDAY,
    "mon": Weekday.MONDAY,
    "tue": Weekday.TUESDAY,
    "wed": Weekday.WEDNESDAY,
    "thu": Weekday.THURSDAY,
    "fri": Weekday.FRIDAY,
    "sat": Weekday.SATURDAY,
    # Codes used by the school backend
    "dom": Weekday.SUNDAY,
    "seg": Weekday.MONDAY,
    "ter": Weekday.TUESDAY,
    "qua": Weekday.WEDNESDAY,
    "qui": Weekday.THURSDAY,
    "sex": Weekday.FRIDAY,
    "sab": Weekday.SATURDAY,
    "sáb": Weekday.SATURDAY,
}

_SHORT_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

CalendarDate = date


def as_calendar_date(value: date | datetime) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def days_in_month(d: date) -> int:
    return calendar.monthrange(d.year, d.month)[1]


def last_of_month(d: date) -> date:
    return d.replace(day=days_in_month(d))


def shift_months(d: date, months: int) -> date:
    """
    Move by whole months, clamping the day to the target month's length.

    Jan 31 + 1 month is Feb 28/29, never a day in March.
    """
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def start_of_week(d: date) -> date:
    """Sunday on or before the given date."""
    return d - timedelta(days=Weekday.of(d))


def week_of(d: date) -> list[date]:
    """The seven days (Sunday..Saturday) of the week containing d."""
    start = start_of_week(d)
    return [start + timedelta(days=i) for i in range(7)]


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every day in [start, end], inclusive. Empty if start > end."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
