"""Ports - interfaces/protocols for external dependencies."""

from .event_repo import EventRepository
from .activity_repo import ActivityRepository
from .discipline_catalog import DisciplineCatalog

__all__ = [
    "EventRepository",
    "ActivityRepository",
    "DisciplineCatalog",
]
