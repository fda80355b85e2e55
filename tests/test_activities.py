"""Tests for activity filtering and due-date grouping."""

from datetime import date, datetime, time, timedelta

import pytest

from agenda.core.activities import (
    Activity,
    ActivityKind,
    ActivityStatus,
    Priority,
    StatusFilter,
    count_activities,
    filter_activities,
    filter_and_group,
    format_due_date,
    group_by_due_date,
    new_activity,
    next_activity_id,
    toggle_completed,
    update_activity,
)
from agenda.core.disciplines import Discipline


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def make_activity(today):
    def _make(
        id: str,
        due_in: int | None = None,
        status: ActivityStatus = ActivityStatus.TODO,
        title: str | None = None,
        description: str | None = None,
        discipline: Discipline | None = None,
    ) -> Activity:
        return Activity(
            id=id,
            title=title or f"Activity {id}",
            status=status,
            description=description,
            discipline=discipline,
            due_date=today + timedelta(days=due_in) if due_in is not None else None,
        )

    return _make


@pytest.fixture
def sample_activities(make_activity):
    return [
        make_activity("today", 0),
        make_activity("in3", 3),
        make_activity("in7", 7),
        make_activity("in10", 10),
        make_activity("yesterday", -1),
        make_activity("nodate"),
        make_activity("done-today", 0, ActivityStatus.DONE),
        make_activity("doing", 2, ActivityStatus.DOING),
    ]


def _ids(items):
    return [a.id for a in items]


class TestActivity:
    def test_completed_follows_status(self):
        assert Activity(id="1", title="x", status=ActivityStatus.DONE).completed is True
        assert Activity(id="1", title="x", status=ActivityStatus.DOING).completed is False

    def test_with_completed(self):
        now = datetime(2025, 1, 15, 9, 0)
        a = Activity(id="1", title="x").with_completed(True, now)
        assert a.status is ActivityStatus.DONE
        assert a.completed
        assert a.updated_at == now
        assert a.with_completed(False, now).status is ActivityStatus.TODO

    def test_is_overdue(self, make_activity, today):
        assert make_activity("1", -1).is_overdue(today) is True
        assert make_activity("1", 0).is_overdue(today) is False
        assert make_activity("1").is_overdue(today) is False
        assert make_activity("1", -1, ActivityStatus.DONE).is_overdue(today) is False

    def test_days_until_due(self, make_activity, today):
        assert make_activity("1", 4).days_until_due(today) == 4
        assert make_activity("1").days_until_due(today) is None

    def test_matches_title_discipline_description(self):
        a = Activity(
            id="1",
            title="Relatório",
            description="Experimentos de laboratório",
            discipline=Discipline("1", "Física III"),
        )
        assert a.matches("RELAT")
        assert a.matches("fisica")
        assert a.matches("laboratorio")
        assert not a.matches("quimica")


class TestFromApi:
    def test_legacy_record(self):
        a = Activity.from_api(
            {
                "id": "1",
                "titulo": "Relatório de Física Quântica",
                "descricao": "Elaborar relatório.",
                "disciplinaId": "1",
                "disciplinaNome": "Física III",
                "disciplinaCor": "red",
                "tipo": "trabalho",
                "dataEntrega": "2024-10-05T03:00:00.000Z",
                "horaEntrega": "23:59",
                "prioridade": "alta",
                "status": "a-fazer",
                "concluida": False,
                "createdAt": "2024-10-02T10:00:00Z",
            }
        )
        assert a.kind is ActivityKind.ASSIGNMENT
        assert a.priority is Priority.HIGH
        assert a.status is ActivityStatus.TODO
        assert a.due_date == date(2024, 10, 5)
        assert a.due_time == time(23, 59)
        assert a.discipline == Discipline("1", "Física III", "red")
        assert a.created_at.year == 2024

    def test_completed_flag_wins_over_status(self):
        a = Activity.from_api({"id": "1", "title": "x", "status": "doing", "completed": True})
        assert a.status is ActivityStatus.DONE

    def test_status_done_without_flag_is_kept(self):
        a = Activity.from_api({"id": "1", "title": "x", "status": "done"})
        assert a.completed

    def test_false_flag_reopens_done_status(self):
        a = Activity.from_api({"id": "1", "title": "x", "status": "concluida", "concluida": False})
        assert a.status is ActivityStatus.TODO

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            Activity.from_api({"id": "1", "title": "x", "kind": "party"})

    def test_to_api_round_trips_key_fields(self):
        a = Activity(id="7", title="Lista 3", due_date=date(2025, 1, 20), status=ActivityStatus.DONE)
        data = a.to_api()
        assert data["completed"] is True
        assert data["status"] == "done"
        assert Activity.from_api(data) == a


class TestGroupByDueDate:
    def test_buckets(self, sample_activities, today):
        due_today, next_week, completed, other = group_by_due_date(sample_activities, today)

        assert _ids(due_today) == ["today"]
        assert _ids(next_week) == ["in3", "in7", "doing"]
        assert _ids(completed) == ["done-today"]
        assert _ids(other) == ["in10", "yesterday", "nodate"]

    def test_partition_is_exact(self, sample_activities, today):
        buckets = group_by_due_date(sample_activities, today)
        seen = [a.id for bucket in buckets for a in bucket]
        assert sorted(seen) == sorted(_ids(sample_activities))

    def test_custom_window(self, sample_activities, today):
        _, next_week, _, _ = group_by_due_date(sample_activities, today, window_days=3)
        assert _ids(next_week) == ["in3", "doing"]


class TestFilterActivities:
    def test_status_todo(self, sample_activities):
        result = filter_activities(sample_activities, status_filter=StatusFilter.TODO)
        assert "done-today" not in _ids(result)
        assert len(result) == 7

    def test_status_done(self, sample_activities):
        assert _ids(filter_activities(sample_activities, status_filter=StatusFilter.DONE)) == [
            "done-today"
        ]

    def test_missing_description_is_empty(self, make_activity):
        a = make_activity("1", title="Leitura", description=None)
        assert filter_activities([a], query="capitulo") == []


class TestFilterAndGroup:
    def test_search_scenario(self, make_activity, today):
        activities = [
            make_activity("1", 3, title="Cálculo I - Lista 3"),
            make_activity("2", 0, title="Seminário"),
            make_activity("3", None, ActivityStatus.DONE, title="Quiz"),
        ]
        groups = filter_and_group(activities, "calc", StatusFilter.ALL, today)

        assert _ids(groups.due_next_week) == ["1"]
        assert groups.due_today == []
        assert groups.other == []
        assert groups.completed == []
        assert groups.counts.total == 3
        assert groups.counts.todo == 2
        assert groups.counts.done == 1

    def test_counts_ignore_filters(self, sample_activities, today):
        groups = filter_and_group(sample_activities, "", StatusFilter.DONE, today)
        assert groups.counts.total == len(sample_activities)
        assert groups.counts.todo + groups.counts.done == groups.counts.total
        assert _ids(groups.completed) == ["done-today"]
        assert groups.due_today == groups.due_next_week == groups.other == []

    def test_does_not_mutate_input(self, sample_activities, today):
        before = list(sample_activities)
        filter_and_group(sample_activities, "activity", StatusFilter.TODO, today)
        assert sample_activities == before

    def test_empty(self, today):
        groups = filter_and_group([], as_of=today)
        assert groups.counts.total == 0
        assert all(items == [] for items in groups.buckets().values())


class TestToggleCompleted:
    def test_flips_only_target(self, sample_activities):
        now = datetime(2025, 1, 15, 12, 0)
        updated = toggle_completed(sample_activities, "in3", now)

        assert next(a for a in updated if a.id == "in3").completed
        assert sample_activities[1].completed is False
        assert [a.id for a in updated] == _ids(sample_activities)

    def test_unknown_id(self, sample_activities):
        with pytest.raises(KeyError):
            toggle_completed(sample_activities, "missing")


def test_count_activities(sample_activities):
    counts = count_activities(sample_activities)
    assert (counts.total, counts.todo, counts.done) == (8, 7, 1)


def test_format_due_date(today):
    assert format_due_date(today, today) == "Today"
    assert format_due_date(today + timedelta(days=1), today) == "Tomorrow"
    assert format_due_date(date(2025, 10, 5), today) == "5 Oct"


class TestNewActivity:
    def test_next_id_skips_non_numeric(self):
        activities = [Activity(id="2", title="a"), Activity(id="abc", title="b"), Activity(id="10", title="c")]
        assert next_activity_id(activities) == "11"
        assert next_activity_id([]) == "1"

    def test_defaults_and_timestamps(self):
        now = datetime(2025, 1, 15, 9, 30)
        activity = new_activity([Activity(id="1", title="a")], "  Resumo cap. 4 ", now, kind=ActivityKind.STUDY)
        assert activity.id == "2"
        assert activity.title == "Resumo cap. 4"
        assert activity.kind is ActivityKind.STUDY
        assert activity.status is ActivityStatus.TODO
        assert activity.created_at == now
        assert activity.updated_at == now

    def test_blank_title_rejected(self):
        with pytest.raises(ValueError, match="Title"):
            new_activity([], "   ")


class TestUpdateActivity:
    def test_changes_given_fields_only(self):
        original = Activity(id="1", title="Lista", priority=Priority.LOW, notes="keep")
        now = datetime(2025, 1, 16, 8, 0)

        updated = update_activity(original, now, priority=Priority.HIGH, due_date=date(2025, 1, 20), notes=None)

        assert updated.priority is Priority.HIGH
        assert updated.due_date == date(2025, 1, 20)
        assert updated.notes == "keep"
        assert updated.updated_at == now
        assert original.priority is Priority.LOW

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="id"):
            update_activity(Activity(id="1", title="Lista"), id="2")
