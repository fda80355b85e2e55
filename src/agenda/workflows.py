"""Shared workflow layer between the CLI and the storage adapters.

Views are always recomputed from a snapshot of the raw templates and the
current CalendarState; generated occurrences are never stored.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import Iterable

from .adapters.api_client import AgendaApiClient
from .adapters.file_store import JsonFileStore
from .config import Config
from .core.activities import (
    Activity,
    ActivityGroups,
    StatusFilter,
    filter_and_group,
    new_activity,
    toggle_completed,
    update_activity,
)
from .core.dates import first_of_month, shift_months, week_of
from .core.disciplines import Discipline, DisciplineStatus, filter_disciplines
from .core.events import EventInstance, EventTemplate
from .core.grid import (
    DayCell,
    DisciplineFilter,
    WeekGrid,
    build_month_grid,
    build_week_grid,
    MONTH_GRID_SIZE,
)
from .core.recurrence import expand
from .ports import ActivityRepository, DisciplineCatalog

logger = logging.getLogger(__name__)


def get_store(config: Config) -> AgendaApiClient | JsonFileStore:
    """Resolve the storage backend from config."""
    if config.api_base_url:
        return AgendaApiClient(config)
    return JsonFileStore(config.data_path)


class CalendarView(str, Enum):
    MONTH = "month"
    WEEK = "week"


@dataclass(frozen=True)
class CalendarState:
    """Snapshot of what the calendar screen is showing."""

    reference_date: date
    view: CalendarView = CalendarView.MONTH
    discipline_filter: DisciplineFilter = DisciplineFilter()

    def previous(self) -> "CalendarState":
        if self.view is CalendarView.WEEK:
            return replace(self, reference_date=self.reference_date - timedelta(days=7))
        return replace(self, reference_date=shift_months(self.reference_date, -1))

    def next(self) -> "CalendarState":
        if self.view is CalendarView.WEEK:
            return replace(self, reference_date=self.reference_date + timedelta(days=7))
        return replace(self, reference_date=shift_months(self.reference_date, 1))

    def go_to_today(self, today: date | None = None) -> "CalendarState":
        return replace(self, reference_date=today or date.today())

    def switch_view(self, view: CalendarView) -> "CalendarState":
        return replace(self, view=view)

    def toggle_discipline(self, discipline_id: str) -> "CalendarState":
        return replace(self, discipline_filter=self.discipline_filter.toggle(discipline_id))

    def show_all_disciplines(self) -> "CalendarState":
        return replace(self, discipline_filter=self.discipline_filter.reset())

    def visible_range(self) -> tuple[date, date]:
        """First and last day drawn on screen for the current view."""
        if self.view is CalendarView.WEEK:
            days = week_of(self.reference_date)
            return days[0], days[-1]
        first = first_of_month(self.reference_date)
        start = week_of(first)[0]
        return start, start + timedelta(days=MONTH_GRID_SIZE - 1)


def occurrences_for(templates: Iterable[EventTemplate], state: CalendarState) -> list[EventInstance]:
    """Expand templates over everything the current view draws."""
    start, end = state.visible_range()
    return expand(templates, start, end)


@lru_cache(maxsize=32)
def _month_grid(
    reference_date: date,
    templates: tuple[EventTemplate, ...],
    discipline_filter: DisciplineFilter,
) -> tuple[DayCell, ...]:
    state = CalendarState(reference_date, CalendarView.MONTH, discipline_filter)
    events = occurrences_for(templates, state)
    return tuple(build_month_grid(reference_date, events, discipline_filter))


@lru_cache(maxsize=32)
def _week_grid(
    reference_date: date,
    templates: tuple[EventTemplate, ...],
    discipline_filter: DisciplineFilter,
    first_hour: int,
    last_hour: int,
) -> WeekGrid:
    state = CalendarState(reference_date, CalendarView.WEEK, discipline_filter)
    events = occurrences_for(templates, state)
    return build_week_grid(reference_date, events, discipline_filter, first_hour, last_hour)


def month_view(templates: Iterable[EventTemplate], state: CalendarState) -> list[DayCell]:
    """
    42-cell month grid for the state's reference month.

    Cached on the full input tuple, so any change to templates, date or filter
    is a fresh computation.
    """
    return list(_month_grid(state.reference_date, tuple(templates), state.discipline_filter))


def week_view(
    templates: Iterable[EventTemplate],
    state: CalendarState,
    config: Config | None = None,
) -> WeekGrid:
    """Week grid for the state's reference week, hour rows from config."""
    config = config or Config()
    return _week_grid(
        state.reference_date,
        tuple(templates),
        state.discipline_filter,
        config.week_first_hour,
        config.week_last_hour,
    )


def clear_view_cache() -> None:
    _month_grid.cache_clear()
    _week_grid.cache_clear()


def activity_groups(
    activities: Iterable[Activity],
    query: str = "",
    status_filter: StatusFilter = StatusFilter.ALL,
    config: Config | None = None,
    as_of: date | None = None,
) -> ActivityGroups:
    config = config or Config()
    return filter_and_group(activities, query, status_filter, as_of, config.due_soon_days)


def toggle_activity(
    repo: ActivityRepository,
    activity_id: str,
    now: datetime | None = None,
) -> Activity:
    """
    Flip an activity between done and to-do and persist it.

    Raises:
        KeyError: no activity has that id.
    """
    updated = toggle_completed(repo.fetch_all(), activity_id, now)
    activity = next(a for a in updated if a.id == activity_id)
    repo.save(activity)
    logger.info(f"Activity {activity_id} is now {activity.status.value}")
    return activity


def find_discipline(catalog: DisciplineCatalog, discipline_id: str) -> Discipline:
    """
    Raises:
        KeyError: no discipline has that id.
    """
    for discipline in catalog.fetch_disciplines():
        if discipline.id == discipline_id:
            return discipline
    raise KeyError(discipline_id)


def add_activity(
    repo: ActivityRepository,
    title: str,
    now: datetime | None = None,
    **fields,
) -> Activity:
    """
    Create an activity with the next free id and persist it.

    Raises:
        ValueError: blank title.
    """
    activity = new_activity(repo.fetch_all(), title, now, **fields)
    repo.save(activity)
    logger.info(f"Added activity {activity.id}: {activity.title}")
    return activity


def edit_activity(
    repo: ActivityRepository,
    activity_id: str,
    now: datetime | None = None,
    **changes,
) -> Activity:
    """
    Apply changes to one activity and persist it.

    Raises:
        KeyError: no activity has that id.
        ValueError: blank title.
    """
    current = next((a for a in repo.fetch_all() if a.id == activity_id), None)
    if current is None:
        raise KeyError(activity_id)
    activity = update_activity(current, now, **changes)
    repo.save(activity)
    logger.info(f"Updated activity {activity_id}")
    return activity


def delete_activity(repo: ActivityRepository, activity_id: str) -> Activity:
    """
    Remove an activity and return what was removed.

    Raises:
        KeyError: no activity has that id.
    """
    removed = next((a for a in repo.fetch_all() if a.id == activity_id), None)
    if removed is None:
        raise KeyError(activity_id)
    repo.delete(activity_id)
    logger.info(f"Deleted activity {activity_id}")
    return removed


def discipline_legend(
    catalog: DisciplineCatalog,
    discipline_filter: DisciplineFilter,
    query: str = "",
    status: DisciplineStatus | None = None,
) -> list[tuple[Discipline, bool]]:
    """Matching disciplines, sorted by name, with their checkbox state."""
    disciplines = filter_disciplines(catalog.fetch_disciplines(), query, status)
    disciplines = sorted(disciplines, key=lambda d: d.name.casefold())
    return [(d, discipline_filter.is_selected(d.id)) for d in disciplines]
