"""JSON file storage adapter."""

import json
import logging
from pathlib import Path
from typing import Callable, TypeVar

from agenda.core.activities import Activity
from agenda.core.disciplines import Discipline
from agenda.core.events import EventTemplate

logger = logging.getLogger(__name__)

T = TypeVar("T")

EVENTS_FILE = "events.json"
ACTIVITIES_FILE = "activities.json"
DISCIPLINES_FILE = "disciplines.json"


class JsonFileStore:
    """
    File-based storage, one JSON array per collection.

    Implements EventRepository, ActivityRepository and DisciplineCatalog.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _read_records(self, filename: str) -> list[dict]:
        path = self.data_dir / filename
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Expected a JSON array in {path}, got {type(data).__name__}")
            return []
        return data

    def _load(self, filename: str, parse: Callable[[dict], T]) -> list[T]:
        items = []
        for record in self._read_records(filename):
            try:
                items.append(parse(record))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed record in {filename}: {e!r}")
        return items

    def fetch_templates(self) -> list[EventTemplate]:
        return self._load(EVENTS_FILE, EventTemplate.from_api)

    def fetch_all(self) -> list[Activity]:
        return self._load(ACTIVITIES_FILE, Activity.from_api)

    def fetch_disciplines(self) -> list[Discipline]:
        return self._load(DISCIPLINES_FILE, Discipline.from_api)

    def _write_records(self, filename: str, records: list) -> None:
        path = self.data_dir / filename
        path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")

    @staticmethod
    def _has_id(record, activity_id: str) -> bool:
        # Records that are not objects are left in the file untouched
        return isinstance(record, dict) and str(record.get("id")) == activity_id

    def save(self, activity: Activity) -> None:
        """Replace the activity with the same id, or append it."""
        records = [r for r in self._read_records(ACTIVITIES_FILE) if not self._has_id(r, activity.id)]
        records.append(activity.to_api())
        self._write_records(ACTIVITIES_FILE, records)

    def delete(self, activity_id: str) -> None:
        """
        Remove the activity with this id.

        Raises:
            KeyError: no activity has that id.
        """
        records = self._read_records(ACTIVITIES_FILE)
        kept = [r for r in records if not self._has_id(r, activity_id)]
        if len(kept) == len(records):
            raise KeyError(activity_id)
        self._write_records(ACTIVITIES_FILE, kept)
