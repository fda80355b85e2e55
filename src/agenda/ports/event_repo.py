"""Event template repository interface."""

from typing import Protocol

from agenda.core.events import EventTemplate


class EventRepository(Protocol):
    """Interface for fetching stored event templates from any backend."""

    def fetch_templates(self) -> list[EventTemplate]:
        """Fetch every event template (recurring and one-off)."""
        ...
