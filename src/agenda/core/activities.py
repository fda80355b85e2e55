"""Pure activity (to-do) logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable

from .disciplines import Discipline
from .events import discipline_from_api, parse_date, parse_time
from .text import contains

DUE_SOON_DAYS = 7


class ActivityKind(str, Enum):
    EXAM = "exam"
    ASSIGNMENT = "assignment"
    STUDY = "study"
    SEMINAR = "seminar"
    OTHER = "other"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActivityStatus(str, Enum):
    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class StatusFilter(str, Enum):
    ALL = "all"
    TODO = "todo"
    DONE = "done"


_ALIASES = {
    # Values used by the school backend
    "prova": ActivityKind.EXAM,
    "trabalho": ActivityKind.ASSIGNMENT,
    "estudo": ActivityKind.STUDY,
    "seminario": ActivityKind.SEMINAR,
    "outro": ActivityKind.OTHER,
    "baixa": Priority.LOW,
    "media": Priority.MEDIUM,
    "alta": Priority.HIGH,
    "a-fazer": ActivityStatus.TODO,
    "em-andamento": ActivityStatus.DOING,
    "concluida": ActivityStatus.DONE,
}


def _parse_enum(enum_cls, value, default):
    if not value:
        return default
    value = str(value).strip().lower()
    alias = _ALIASES.get(value)
    if isinstance(alias, enum_cls):
        return alias
    return enum_cls(value)


def _parse_timestamp(value) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class Activity:
    """A to-do item: exam, assignment, study session..."""

    id: str
    title: str
    kind: ActivityKind = ActivityKind.OTHER
    priority: Priority = Priority.MEDIUM
    status: ActivityStatus = ActivityStatus.TODO
    description: str | None = None
    discipline: Discipline | None = None
    due_date: date | None = None
    due_time: time | None = None
    notes: str | None = None
    ai_reminder: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def completed(self) -> bool:
        return self.status is ActivityStatus.DONE

    @property
    def discipline_name(self) -> str:
        return self.discipline.name if self.discipline else ""

    def matches(self, query: str) -> bool:
        """Case- and accent-insensitive substring match on title, discipline, description."""
        return contains(query, self.title, self.discipline_name, self.description)

    def days_until_due(self, as_of: date | None = None) -> int | None:
        """Days until due date (negative if overdue)."""
        if not self.due_date:
            return None
        as_of = as_of or date.today()
        return (self.due_date - as_of).days

    def is_overdue(self, as_of: date | None = None) -> bool:
        days = self.days_until_due(as_of)
        return not self.completed and days is not None and days < 0

    def with_completed(self, completed: bool, now: datetime | None = None) -> "Activity":
        status = ActivityStatus.DONE if completed else ActivityStatus.TODO
        return replace(self, status=status, updated_at=now or datetime.now())

    @classmethod
    def from_api(cls, data: dict) -> "Activity":
        """Create Activity from a backend record."""
        status = _parse_enum(ActivityStatus, data.get("status"), ActivityStatus.TODO)
        # An explicit completion flag wins over the status field
        completed = data.get("completed", data.get("concluida"))
        if completed is True:
            status = ActivityStatus.DONE
        elif completed is False and status is ActivityStatus.DONE:
            status = ActivityStatus.TODO

        due = data.get("due_date") or data.get("dataEntrega")
        due_time = data.get("due_time") or data.get("horaEntrega")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or data.get("titulo") or "",
            kind=_parse_enum(ActivityKind, data.get("kind") or data.get("tipo"), ActivityKind.OTHER),
            priority=_parse_enum(
                Priority, data.get("priority") or data.get("prioridade"), Priority.MEDIUM
            ),
            status=status,
            description=data.get("description") or data.get("descricao"),
            discipline=discipline_from_api(data),
            due_date=parse_date(due) if due else None,
            due_time=parse_time(due_time) if due_time else None,
            notes=data.get("notes") or data.get("anotacoes"),
            ai_reminder=bool(data.get("ai_reminder", data.get("lembreteIA", False))),
            created_at=_parse_timestamp(data.get("created_at") or data.get("createdAt")),
            updated_at=_parse_timestamp(data.get("updated_at") or data.get("updatedAt")),
        )

    def to_api(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "discipline": (
                {
                    "id": self.discipline.id,
                    "name": self.discipline.name,
                    "color": self.discipline.color,
                }
                if self.discipline
                else None
            ),
            "kind": self.kind.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "due_time": self.due_time.strftime("%H:%M") if self.due_time else None,
            "priority": self.priority.value,
            "status": self.status.value,
            "completed": self.completed,
            "notes": self.notes,
            "ai_reminder": self.ai_reminder,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class ActivityCounts:
    total: int
    todo: int
    done: int


@dataclass(frozen=True)
class ActivityGroups:
    """Activities split into disjoint due-date buckets."""

    due_today: list[Activity] = field(default_factory=list)
    due_next_week: list[Activity] = field(default_factory=list)
    completed: list[Activity] = field(default_factory=list)
    other: list[Activity] = field(default_factory=list)
    counts: ActivityCounts = field(default_factory=lambda: ActivityCounts(0, 0, 0))

    def buckets(self) -> dict[str, list[Activity]]:
        return {
            "due_today": self.due_today,
            "due_next_week": self.due_next_week,
            "completed": self.completed,
            "other": self.other,
        }


def filter_activities(
    activities: Iterable[Activity],
    query: str = "",
    status_filter: StatusFilter = StatusFilter.ALL,
) -> list[Activity]:
    """
    Apply the search box and the status tabs.

    Pure function - no I/O.
    """
    result = list(activities)
    if query:
        result = [a for a in result if a.matches(query)]

    if status_filter is StatusFilter.TODO:
        result = [a for a in result if not a.completed]
    elif status_filter is StatusFilter.DONE:
        result = [a for a in result if a.completed]

    return result


def count_activities(activities: Iterable[Activity]) -> ActivityCounts:
    activities = list(activities)
    done = sum(1 for a in activities if a.completed)
    return ActivityCounts(total=len(activities), todo=len(activities) - done, done=done)


def group_by_due_date(
    activities: Iterable[Activity],
    as_of: date | None = None,
    window_days: int = DUE_SOON_DAYS,
) -> tuple[list[Activity], list[Activity], list[Activity], list[Activity]]:
    """
    Split activities into (due_today, due_next_week, completed, other).

    Completed activities always land in `completed`. Open ones are bucketed by
    due date: today, within the next `window_days`, or anything else (no due
    date, overdue, or further out).
    Pure function - no I/O.
    """
    today = as_of or date.today()
    horizon = today + timedelta(days=window_days)

    due_today, due_next_week, completed, other = [], [], [], []
    for activity in activities:
        if activity.completed:
            completed.append(activity)
        elif activity.due_date is None:
            other.append(activity)
        elif activity.due_date == today:
            due_today.append(activity)
        elif today < activity.due_date <= horizon:
            due_next_week.append(activity)
        else:
            other.append(activity)

    return due_today, due_next_week, completed, other


def filter_and_group(
    activities: Iterable[Activity],
    query: str = "",
    status_filter: StatusFilter = StatusFilter.ALL,
    as_of: date | None = None,
    window_days: int = DUE_SOON_DAYS,
) -> ActivityGroups:
    """
    Filter by search text and status, then bucket by due date.

    Counts always describe the whole, unfiltered collection.
    Pure function - no I/O.
    """
    activities = list(activities)
    filtered = filter_activities(activities, query, status_filter)
    due_today, due_next_week, completed, other = group_by_due_date(filtered, as_of, window_days)
    return ActivityGroups(
        due_today=due_today,
        due_next_week=due_next_week,
        completed=completed,
        other=other,
        counts=count_activities(activities),
    )


def toggle_completed(
    activities: Iterable[Activity],
    activity_id: str,
    now: datetime | None = None,
) -> list[Activity]:
    """
    Return a new list with one activity's completion flipped.

    Raises:
        KeyError: no activity has that id.
    """
    activities = list(activities)
    for i, activity in enumerate(activities):
        if activity.id == activity_id:
            activities[i] = activity.with_completed(not activity.completed, now)
            return activities
    raise KeyError(activity_id)


EDITABLE_FIELDS = frozenset(
    {
        "title",
        "kind",
        "priority",
        "status",
        "description",
        "discipline",
        "due_date",
        "due_time",
        "notes",
        "ai_reminder",
    }
)


def next_activity_id(activities: Iterable[Activity]) -> str:
    """One past the highest numeric id ("1" for an empty list)."""
    numeric = [int(a.id) for a in activities if a.id.isdigit()]
    return str(max(numeric, default=0) + 1)


def new_activity(
    activities: Iterable[Activity],
    title: str,
    now: datetime | None = None,
    **fields,
) -> Activity:
    """
    Build a new to-do activity with the next free id.

    Raises:
        ValueError: blank title, or a field that cannot be set.
    """
    now = now or datetime.now()
    draft = Activity(id=next_activity_id(activities), title="", created_at=now, updated_at=now)
    return update_activity(draft, now=now, title=title, **fields)


def update_activity(activity: Activity, now: datetime | None = None, **changes) -> Activity:
    """
    Return a copy of the activity with the given fields changed.

    Fields passed as None are left as they are.

    Raises:
        ValueError: blank title, or a field that cannot be set.
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot set {', '.join(sorted(unknown))}")
    changes = {k: v for k, v in changes.items() if v is not None}
    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise ValueError("Title is required")
    return replace(activity, updated_at=now or datetime.now(), **changes)


def format_due_date(due: date, as_of: date | None = None) -> str:
    """'Today', 'Tomorrow', or a short day + month like '5 Oct'."""
    as_of = as_of or date.today()
    if due == as_of:
        return "Today"
    if due == as_of + timedelta(days=1):
        return "Tomorrow"
    return f"{due.day} {due.strftime('%b')}"
