"""Tests for discipline records, search and attendance."""

import pytest

from agenda.core.disciplines import (
    AttendanceLevel,
    Discipline,
    DisciplineStatus,
    classify_attendance,
    filter_disciplines,
)


@pytest.fixture
def disciplines():
    return [
        Discipline(
            "1", "Introdução às Técnicas de Programação", "blue",
            code="IMD1012", professor="Prof. Carlos Silva", attendance=85,
        ),
        Discipline(
            "2", "Cálculo Diferencial e Integral I", "amber",
            code="MAT001", professor="Prof. Ana Santos", attendance=65,
        ),
        Discipline(
            "4", "Física Mecânica", "red",
            code="FIS101", professor="Prof. Julia Mendes", attendance=50,
            status=DisciplineStatus.ARCHIVED,
        ),
    ]


class TestAttendance:
    @pytest.mark.parametrize(
        "percent, level",
        [
            (100, AttendanceLevel.SAFE),
            (80, AttendanceLevel.SAFE),
            (79.9, AttendanceLevel.WARNING),
            (60, AttendanceLevel.WARNING),
            (59, AttendanceLevel.CRITICAL),
            (0, AttendanceLevel.CRITICAL),
        ],
    )
    def test_thresholds(self, percent, level):
        assert classify_attendance(percent) is level

    def test_unknown_attendance_has_no_level(self):
        assert Discipline("1", "Algoritmos").attendance_level is None

    def test_level_from_record(self, disciplines):
        assert [d.attendance_level for d in disciplines] == [
            AttendanceLevel.SAFE,
            AttendanceLevel.WARNING,
            AttendanceLevel.CRITICAL,
        ]


class TestFromApi:
    def test_legacy_record(self):
        discipline = Discipline.from_api(
            {
                "id": "5",
                "codigo": "SOC042",
                "nome": "Sociologia do Trabalho",
                "professor": "Prof. Eduardo Lima",
                "cargaHoraria": 45,
                "cor": "emerald",
                "frequencia": 95,
                "faltas": 2,
                "status": "este-semestre",
            }
        )
        assert discipline.code == "SOC042"
        assert discipline.workload_hours == 45
        assert discipline.attendance == 95
        assert discipline.absences == 2
        assert discipline.status is DisciplineStatus.THIS_SEMESTER

    def test_minimal_record(self):
        discipline = Discipline.from_api({"id": 3, "name": "Algoritmos"})
        assert discipline.id == "3"
        assert discipline.color == "blue"
        assert discipline.status is DisciplineStatus.ACTIVE
        assert discipline.attendance is None

    @pytest.mark.parametrize(
        "raw, status",
        [
            ("ativa", DisciplineStatus.ACTIVE),
            ("arquivada", DisciplineStatus.ARCHIVED),
            ("archived", DisciplineStatus.ARCHIVED),
            ("this-semester", DisciplineStatus.THIS_SEMESTER),
        ],
    )
    def test_status_aliases(self, raw, status):
        assert DisciplineStatus.parse(raw) is status

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            DisciplineStatus.parse("paused")


class TestFilterDisciplines:
    def test_no_filters_keeps_all(self, disciplines):
        assert filter_disciplines(disciplines) == disciplines

    def test_search_name_is_accent_insensitive(self, disciplines):
        assert [d.id for d in filter_disciplines(disciplines, "calculo")] == ["2"]

    def test_search_code_and_professor(self, disciplines):
        assert [d.id for d in filter_disciplines(disciplines, "imd")] == ["1"]
        assert [d.id for d in filter_disciplines(disciplines, "julia")] == ["4"]

    def test_status_tab(self, disciplines):
        active = filter_disciplines(disciplines, status=DisciplineStatus.ACTIVE)
        assert [d.id for d in active] == ["1", "2"]
        archived = filter_disciplines(disciplines, "prof", DisciplineStatus.ARCHIVED)
        assert [d.id for d in archived] == ["4"]
