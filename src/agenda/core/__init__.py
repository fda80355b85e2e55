"""Functional core - pure business logic with no I/O."""

from .dates import Weekday, CalendarDate, as_calendar_date, shift_months, start_of_week
from .disciplines import AttendanceLevel, Discipline, DisciplineStatus, filter_disciplines
from .events import EventKind, EventTemplate, EventInstance
from .recurrence import InvalidRange, expand
from .grid import (
    DisciplineFilter,
    DayCell,
    DayColumn,
    WeekSlot,
    WeekGrid,
    build_month_grid,
    build_week_grid,
)
from .activities import (
    Activity,
    ActivityGroups,
    ActivityCounts,
    StatusFilter,
    filter_and_group,
    toggle_completed,
)

__all__ = [
    # Dates
    "Weekday",
    "CalendarDate",
    "as_calendar_date",
    "shift_months",
    "start_of_week",
    # Disciplines
    "AttendanceLevel",
    "Discipline",
    "DisciplineStatus",
    "filter_disciplines",
    # Events
    "EventKind",
    "EventTemplate",
    "EventInstance",
    # Recurrence
    "InvalidRange",
    "expand",
    # Grids
    "DisciplineFilter",
    "DayCell",
    "DayColumn",
    "WeekSlot",
    "WeekGrid",
    "build_month_grid",
    "build_week_grid",
    # Activities
    "Activity",
    "ActivityGroups",
    "ActivityCounts",
    "StatusFilter",
    "filter_and_group",
    "toggle_completed",
]
