"""Discipline records, search and attendance - no I/O dependencies."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .text import contains

SAFE_ATTENDANCE = 80
WARNING_ATTENDANCE = 60


class DisciplineStatus(str, Enum):
    ACTIVE = "active"
    THIS_SEMESTER = "this-semester"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, value: str | None) -> "DisciplineStatus":
        if not value:
            return cls.ACTIVE
        value = value.strip().lower()
        return _STATUS_ALIASES.get(value) or cls(value)


_STATUS_ALIASES = {
    "ativa": DisciplineStatus.ACTIVE,
    "ativas": DisciplineStatus.ACTIVE,
    "este-semestre": DisciplineStatus.THIS_SEMESTER,
    "arquivada": DisciplineStatus.ARCHIVED,
    "arquivadas": DisciplineStatus.ARCHIVED,
}


class AttendanceLevel(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        return _ATTENDANCE_LABELS[self]


_ATTENDANCE_LABELS = {
    AttendanceLevel.SAFE: "Attendance OK",
    AttendanceLevel.WARNING: "Watch your absences",
    AttendanceLevel.CRITICAL: "Critical absences",
}


def classify_attendance(percent: float) -> AttendanceLevel:
    """80% or more is safe, 60% or more needs attention, anything lower is critical."""
    if percent >= SAFE_ATTENDANCE:
        return AttendanceLevel.SAFE
    if percent >= WARNING_ATTENDANCE:
        return AttendanceLevel.WARNING
    return AttendanceLevel.CRITICAL


@dataclass(frozen=True)
class Discipline:
    """A course the student is enrolled in."""

    id: str
    name: str
    color: str = "blue"
    code: str = ""
    professor: str = ""
    workload_hours: int | None = None
    attendance: float | None = None
    absences: int | None = None
    status: DisciplineStatus = DisciplineStatus.ACTIVE

    @property
    def attendance_level(self) -> AttendanceLevel | None:
        if self.attendance is None:
            return None
        return classify_attendance(self.attendance)

    def matches(self, query: str) -> bool:
        return contains(query, self.name, self.code, self.professor)

    @classmethod
    def from_api(cls, data: dict) -> "Discipline":
        attendance = data.get("attendance", data.get("frequencia"))
        absences = data.get("absences", data.get("faltas"))
        workload = data.get("workload_hours", data.get("cargaHoraria"))
        return cls(
            id=str(data["id"]),
            name=data.get("name") or data.get("nome") or "",
            color=data.get("color") or data.get("cor") or "blue",
            code=data.get("code") or data.get("codigo") or "",
            professor=data.get("professor") or "",
            workload_hours=int(workload) if workload is not None else None,
            attendance=float(attendance) if attendance is not None else None,
            absences=int(absences) if absences is not None else None,
            status=DisciplineStatus.parse(data.get("status")),
        )


def filter_disciplines(
    disciplines: Iterable[Discipline],
    query: str = "",
    status: DisciplineStatus | None = None,
) -> list[Discipline]:
    """
    Apply the status tab, then the search box (name, code or professor).

    status=None keeps every discipline.
    Pure function - no I/O.
    """
    result = list(disciplines)
    if status is not None:
        result = [d for d in result if d.status is status]
    if query:
        result = [d for d in result if d.matches(query)]
    return result
