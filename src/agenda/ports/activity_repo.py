"""Activity repository interface."""

from typing import Protocol

from agenda.core.activities import Activity


class ActivityRepository(Protocol):
    """Interface for reading, updating and removing activities."""

    def fetch_all(self) -> list[Activity]:
        """Fetch all activities."""
        ...

    def save(self, activity: Activity) -> None:
        """Create or replace an activity by id."""
        ...

    def delete(self, activity_id: str) -> None:
        """Remove an activity by id."""
        ...
