"""Month and week calendar grids - pure, no I/O dependencies."""

import calendar
import logging
from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Iterable

from .dates import Weekday, first_of_month, last_of_month, week_of
from .events import EventInstance

logger = logging.getLogger(__name__)

MONTH_GRID_SIZE = 42  # 6 weeks x 7 days
DEFAULT_FIRST_HOUR = 7
DEFAULT_LAST_HOUR = 19


@dataclass(frozen=True)
class DisciplineFilter:
    """
    Which disciplines are visible on the calendar.

    Either every discipline (selected is None) or an explicit, non-empty
    subset of discipline ids.
    """

    selected: frozenset[str] | None = None

    @classmethod
    def all(cls) -> "DisciplineFilter":
        return cls()

    @classmethod
    def subset(cls, ids: Iterable[str]) -> "DisciplineFilter":
        ids = frozenset(ids)
        return cls(ids) if ids else cls()

    @property
    def is_all(self) -> bool:
        return self.selected is None

    def allows(self, discipline_id: str | None) -> bool:
        if self.selected is None:
            return True
        return discipline_id is not None and discipline_id in self.selected

    def is_selected(self, discipline_id: str) -> bool:
        """Whether the discipline's toggle shows as checked."""
        return self.allows(discipline_id)

    def toggle(self, discipline_id: str) -> "DisciplineFilter":
        if self.selected is None:
            return DisciplineFilter.subset({discipline_id})
        return DisciplineFilter.subset(self.selected ^ {discipline_id})

    def reset(self) -> "DisciplineFilter":
        return DisciplineFilter.all()


ALL_DISCIPLINES = DisciplineFilter.all()


@dataclass(frozen=True)
class DayCell:
    """One square of the month grid."""

    date: date
    is_current_month: bool
    events: tuple[EventInstance, ...]

    @property
    def day(self) -> int:
        return self.date.day


@dataclass(frozen=True)
class DayColumn:
    """One column of the week grid."""

    date: date
    weekday: Weekday
    events: tuple[EventInstance, ...]

    @property
    def label(self) -> str:
        return self.weekday.short_label


@dataclass(frozen=True)
class WeekSlot:
    """One hour row of the week grid: a slot per weekday column."""

    hour: str
    events: tuple[EventInstance | None, ...]


@dataclass(frozen=True)
class WeekGrid:
    days: tuple[DayColumn, ...]
    hours: tuple[WeekSlot, ...]


def events_on(
    day: date,
    events: Iterable[EventInstance],
    discipline_filter: DisciplineFilter = ALL_DISCIPLINES,
) -> tuple[EventInstance, ...]:
    """Events dated `day` that pass the discipline filter, in input order."""
    return tuple(
        e for e in events if e.date == day and discipline_filter.allows(e.discipline_id)
    )


def build_month_grid(
    reference_date: date,
    events: Iterable[EventInstance],
    discipline_filter: DisciplineFilter = ALL_DISCIPLINES,
) -> list[DayCell]:
    """
    Build the 42-cell month grid for the month containing reference_date.

    Pure function - no I/O. Leading cells come from the previous month so that
    the 1st lands in its weekday column (Sunday first); trailing cells from the
    next month pad the grid to exactly 42.
    """
    events = list(events)
    first = first_of_month(reference_date)
    last = last_of_month(reference_date)

    leading = Weekday.of(first)
    start = first - timedelta(days=leading)

    cells = []
    for offset in range(MONTH_GRID_SIZE):
        d = start + timedelta(days=offset)
        cells.append(
            DayCell(
                date=d,
                is_current_month=first <= d <= last,
                events=events_on(d, events, discipline_filter),
            )
        )
    return cells


def build_week_grid(
    reference_date: date,
    events: Iterable[EventInstance],
    discipline_filter: DisciplineFilter = ALL_DISCIPLINES,
    first_hour: int = DEFAULT_FIRST_HOUR,
    last_hour: int = DEFAULT_LAST_HOUR,
) -> WeekGrid:
    """
    Build the Sunday-first week grid containing reference_date.

    Pure function - no I/O. Hour rows run first_hour..last_hour inclusive. A slot
    holds the first event of that day starting exactly on the hour; any other
    event starting at the same hour is left out of the slot.
    """
    events = list(events)
    days = tuple(
        DayColumn(date=d, weekday=Weekday.of(d), events=events_on(d, events, discipline_filter))
        for d in week_of(reference_date)
    )

    hours = []
    for hour in range(first_hour, last_hour + 1):
        slot_time = time(hour, 0)
        slot_events = []
        for column in days:
            matches = [e for e in column.events if e.start_time == slot_time]
            if len(matches) > 1:
                logger.debug(
                    f"{len(matches)} events start at {slot_time.strftime('%H:%M')} "
                    f"on {column.date}; showing {matches[0].title}"
                )
            slot_events.append(matches[0] if matches else None)
        hours.append(WeekSlot(hour=slot_time.strftime("%H:%M"), events=tuple(slot_events)))

    return WeekGrid(days=days, hours=tuple(hours))


def month_label(reference_date: date) -> str:
    return f"{calendar.month_name[reference_date.month]} {reference_date.year}"


def week_period_label(week: WeekGrid, reference_date: date) -> str:
    """Label like '1 - 7 October 2023', named after the reference month."""
    first = week.days[0].date.day
    last = week.days[-1].date.day
    return f"{first} - {last} {month_label(reference_date)}"
