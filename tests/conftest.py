"""Shared fixtures."""

from datetime import date, time

import pytest

from agenda.core.dates import Weekday
from agenda.core.disciplines import Discipline
from agenda.core.events import EventKind, EventTemplate


@pytest.fixture
def calculo():
    return Discipline(id="1", name="Cálculo I", color="blue")


@pytest.fixture
def algoritmos():
    return Discipline(id="4", name="Algoritmos", color="emerald")


@pytest.fixture
def make_template():
    """Factory for event templates."""

    def _make(
        id: str,
        start_date: date,
        start_hour: int = 8,
        discipline: Discipline | None = None,
        weekdays: set[Weekday] | None = None,
        recurring: bool | None = None,
        kind: EventKind = EventKind.CLASS,
        title: str | None = None,
    ) -> EventTemplate:
        weekdays = frozenset(weekdays or ())
        return EventTemplate(
            id=id,
            title=title or f"Event {id}",
            kind=kind,
            start_date=start_date,
            end_date=start_date,
            start_time=time(start_hour, 0),
            end_time=time(start_hour + 2, 0),
            discipline=discipline,
            recurring=bool(weekdays) if recurring is None else recurring,
            recurrence_weekdays=weekdays,
        )

    return _make
