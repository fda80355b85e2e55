"""Calendar event records - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, time
from enum import Enum

from .dates import Weekday, as_calendar_date
from .disciplines import Discipline


class EventKind(str, Enum):
    CLASS = "class"
    EXAM = "exam"
    DELIVERY = "delivery"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> "EventKind":
        if not value:
            return cls.OTHER
        value = value.strip().lower()
        return _EVENT_KIND_ALIASES.get(value) or cls(value)


_EVENT_KIND_ALIASES = {
    "aula": EventKind.CLASS,
    "prova": EventKind.EXAM,
    "entrega": EventKind.DELIVERY,
    "outro": EventKind.OTHER,
}


def parse_date(value: str | date) -> date:
    """Parse 'YYYY-MM-DD' or an ISO datetime, keeping only the day."""
    if isinstance(value, date):
        return as_calendar_date(value)
    return date.fromisoformat(value.split("T")[0])


def parse_time(value: str | time) -> time:
    """Parse 'HH:MM' (or 'HH:MM:SS')."""
    if isinstance(value, time):
        return value
    return time.fromisoformat(value.strip())


def discipline_from_api(data: dict) -> Discipline | None:
    """Build the embedded discipline reference of an event or activity record."""
    nested = data.get("discipline")
    if isinstance(nested, dict):
        return Discipline.from_api(nested)
    discipline_id = data.get("discipline_id") or data.get("disciplinaId")
    if not discipline_id:
        return None
    return Discipline(
        id=str(discipline_id),
        name=data.get("discipline_name") or data.get("disciplinaNome") or "",
        color=data.get("discipline_color") or data.get("disciplinaCor") or "blue",
    )


@dataclass(frozen=True)
class EventTemplate:
    """
    A stored event definition.

    A template with recurring=True and a non-empty weekday set repeats on those
    weekdays; anything else happens once, on start_date.
    """

    id: str
    title: str
    kind: EventKind
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    discipline: Discipline | None = None
    location: str = ""
    room: str = ""
    description: str = ""
    recurring: bool = False
    recurrence_weekdays: frozenset[Weekday] = field(default_factory=frozenset)

    @property
    def discipline_id(self) -> str | None:
        return self.discipline.id if self.discipline else None

    @property
    def is_recurring(self) -> bool:
        """Recurring flag set AND at least one weekday to recur on."""
        return self.recurring and bool(self.recurrence_weekdays)

    def recurs_on(self, d: date) -> bool:
        return self.is_recurring and Weekday.of(d) in self.recurrence_weekdays

    @classmethod
    def from_api(cls, data: dict) -> "EventTemplate":
        """Create from a backend record (English snake_case or the legacy camelCase keys)."""
        start = parse_date(data.get("start_date") or data["dataInicio"])
        end_raw = data.get("end_date") or data.get("dataFim")
        weekdays = data.get("recurrence_weekdays") or data.get("recorrenciaDias") or []
        return cls(
            id=str(data["id"]),
            title=data.get("title") or data.get("titulo") or "",
            kind=EventKind.parse(data.get("kind") or data.get("tipo")),
            start_date=start,
            end_date=parse_date(end_raw) if end_raw else start,
            start_time=parse_time(data.get("start_time") or data["horaInicio"]),
            end_time=parse_time(data.get("end_time") or data["horaFim"]),
            discipline=discipline_from_api(data),
            location=data.get("location") or data.get("local") or "",
            room=data.get("room") or data.get("sala") or "",
            description=data.get("description") or data.get("descricao") or "",
            recurring=bool(data.get("recurring", data.get("recorrente", False))),
            recurrence_weekdays=frozenset(Weekday.parse(w) for w in weekdays),
        )


@dataclass(frozen=True)
class EventInstance:
    """One concrete occurrence of a template on a calendar day."""

    id: str
    template_id: str
    title: str
    kind: EventKind
    date: date
    start_time: time
    end_time: time
    discipline: Discipline | None = None
    location: str = ""
    room: str = ""
    description: str = ""

    @property
    def discipline_id(self) -> str | None:
        return self.discipline.id if self.discipline else None

    @property
    def dedup_key(self) -> tuple[str | None, date, time]:
        """Two instances with the same key are the same class meeting."""
        return (self.discipline_id, self.date, self.start_time)

    @property
    def identity(self) -> tuple[str, date]:
        return (self.template_id, self.date)

    def format_time(self) -> str:
        return f"{self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}"

    def moved_to(self, d: date) -> "EventInstance":
        return replace(self, id=f"{self.template_id}-{d.isoformat()}", date=d)

    @classmethod
    def origin_of(cls, template: EventTemplate) -> "EventInstance":
        """The occurrence on the template's own start date."""
        return cls(
            id=template.id,
            template_id=template.id,
            title=template.title,
            kind=template.kind,
            date=template.start_date,
            start_time=template.start_time,
            end_time=template.end_time,
            discipline=template.discipline,
            location=template.location,
            room=template.room,
            description=template.description,
        )
