"""Agenda CLI - academic calendar and activities."""

import json
import logging
import sys
from datetime import date, time

import click

from . import __version__
from .adapters.api_client import ApiError
from .config import load_config
from .core.activities import (
    Activity,
    ActivityKind,
    ActivityStatus,
    Priority,
    StatusFilter,
    format_due_date,
)
from .core.dates import Weekday
from .core.disciplines import Discipline, DisciplineStatus
from .core.events import EventInstance, parse_time
from .core.grid import DisciplineFilter, month_label, week_period_label
from .core.recurrence import InvalidRange, expand
from .workflows import (
    CalendarState,
    CalendarView,
    activity_groups,
    add_activity,
    delete_activity,
    discipline_legend,
    edit_activity,
    find_discipline,
    get_store,
    month_view,
    toggle_activity,
    week_view,
)


def _parse_date(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a YYYY-MM-DD date")


def _load_store():
    config = load_config()
    try:
        return config, get_store(config)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _event_json(e: EventInstance) -> dict:
    return {
        "id": e.id,
        "template_id": e.template_id,
        "title": e.title,
        "kind": e.kind.value,
        "date": e.date.isoformat(),
        "start_time": e.start_time.strftime("%H:%M"),
        "end_time": e.end_time.strftime("%H:%M"),
        "discipline_id": e.discipline_id,
        "location": e.location,
        "room": e.room,
    }


def _event_line(e: EventInstance) -> str:
    where = e.room or e.location
    loc = f" @ {where}" if where else ""
    return f"  {e.format_time():11} {e.title}{loc}"


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Agenda - academic calendar and activities."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _state(target_date: str | None, view: CalendarView, disciplines: tuple[str, ...]) -> CalendarState:
    return CalendarState(
        reference_date=_parse_date(target_date),
        view=view,
        discipline_filter=DisciplineFilter.subset(disciplines),
    )


@main.command()
@click.option("--date", "-d", "target_date", default=None, help="Any day of the month (YYYY-MM-DD)")
@click.option("--discipline", "disciplines", multiple=True, help="Only show this discipline id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def month(target_date: str | None, disciplines: tuple[str, ...], as_json: bool):
    """Show the month grid."""
    config, store = _load_store()
    state = _state(target_date, CalendarView.MONTH, disciplines)
    try:
        cells = month_view(store.fetch_templates(), state)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "date": c.date.isoformat(),
                        "is_current_month": c.is_current_month,
                        "events": [_event_json(e) for e in c.events],
                    }
                    for c in cells
                ],
                indent=2,
            )
        )
        return

    click.echo(f"### {month_label(state.reference_date)}\n")
    click.echo(" ".join(f"{w.short_label:>4}" for w in Weekday))
    for row in range(0, len(cells), 7):
        line = []
        for cell in cells[row : row + 7]:
            mark = "*" if cell.events else " "
            day = f"{cell.day}{mark}" if cell.is_current_month else "."
            line.append(f"{day:>4}")
        click.echo(" ".join(line))

    busy = [c for c in cells if c.is_current_month and c.events]
    for cell in busy:
        click.echo(f"\n{cell.date.strftime('%A, %B %d')}")
        for event in cell.events:
            click.echo(_event_line(event))


@main.command()
@click.option("--date", "-d", "target_date", default=None, help="Any day of the week (YYYY-MM-DD)")
@click.option("--discipline", "disciplines", multiple=True, help="Only show this discipline id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def week(target_date: str | None, disciplines: tuple[str, ...], as_json: bool):
    """Show the week grid."""
    config, store = _load_store()
    state = _state(target_date, CalendarView.WEEK, disciplines)
    try:
        grid = week_view(store.fetch_templates(), state, config)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "days": [
                        {"date": d.date.isoformat(), "weekday": d.label} for d in grid.days
                    ],
                    "hours": [
                        {
                            "hour": slot.hour,
                            "events": [_event_json(e) if e else None for e in slot.events],
                        }
                        for slot in grid.hours
                    ],
                },
                indent=2,
            )
        )
        return

    click.echo(f"### {week_period_label(grid, state.reference_date)}\n")
    click.echo("      " + " ".join(f"{d.label} {d.date.day:<2}".ljust(14) for d in grid.days))
    for slot in grid.hours:
        cells = [(e.title[:14] if e else "").ljust(14) for e in slot.events]
        click.echo(f"{slot.hour} " + " ".join(cells).rstrip())


@main.command("expand")
@click.option("--start", required=True, help="First day (YYYY-MM-DD)")
@click.option("--end", required=True, help="Last day (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def expand_cmd(start: str, end: str, as_json: bool):
    """List every occurrence between two dates."""
    config, store = _load_store()
    try:
        instances = expand(store.fetch_templates(), _parse_date(start), _parse_date(end))
    except (InvalidRange, ApiError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([_event_json(e) for e in instances], indent=2))
        return

    if not instances:
        click.echo("No events.")
        return

    current_date = None
    for event in instances:
        if event.date != current_date:
            if current_date is not None:
                click.echo()
            click.echo(f"### {event.date.strftime('%A, %B %d')}")
            current_date = event.date
        click.echo(_event_line(event))


def _activity_line(a: Activity, today: date) -> str:
    check = "x" if a.completed else " "
    due = ""
    if a.due_date:
        due = f" (due {format_due_date(a.due_date, today)}"
        due += ", OVERDUE)" if a.is_overdue(today) else ")"
    discipline = f" [{a.discipline_name}]" if a.discipline_name else ""
    return f"  [{check}] {a.title}{discipline}{due}"


@main.command()
@click.option("--query", "-q", default="", help="Search title, discipline and description")
@click.option(
    "--status",
    type=click.Choice([s.value for s in StatusFilter]),
    default=StatusFilter.ALL.value,
    help="Filter by completion",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def activities(query: str, status: str, as_json: bool):
    """List activities grouped by due date."""
    config, store = _load_store()
    today = date.today()
    try:
        groups = activity_groups(store.fetch_all(), query, StatusFilter(status), config, today)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        payload = {name: [a.to_api() for a in items] for name, items in groups.buckets().items()}
        payload["counts"] = {
            "total": groups.counts.total,
            "todo": groups.counts.todo,
            "done": groups.counts.done,
        }
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    counts = groups.counts
    click.echo(f"All: {counts.total}  To do: {counts.todo}  Done: {counts.done}")

    sections = [
        ("Due today", groups.due_today),
        ("Next 7 days", groups.due_next_week),
        ("Other", groups.other),
        ("Completed", groups.completed),
    ]
    shown = False
    for heading, items in sections:
        if not items:
            continue
        shown = True
        click.echo(f"\n### {heading}")
        for activity in items:
            click.echo(_activity_line(activity, today))

    if not shown:
        click.echo("\nNo activities.")


@main.command()
@click.argument("activity_id")
def done(activity_id: str):
    """Toggle an activity between done and to-do."""
    config, store = _load_store()
    try:
        activity = toggle_activity(store, activity_id)
    except KeyError:
        click.echo(f"Error: no activity with id {activity_id}", err=True)
        sys.exit(1)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    state = "done" if activity.completed else "to do"
    click.echo(f"✓ {activity.title} marked {state}")


def _parse_time(value: str) -> time:
    try:
        return parse_time(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a HH:MM time")


def _activity_options(f):
    """Fields shared by `add` and `edit`."""
    options = [
        click.option("--kind", type=click.Choice([k.value for k in ActivityKind]), default=None),
        click.option("--priority", type=click.Choice([p.value for p in Priority]), default=None),
        click.option("--due", default=None, help="Due date (YYYY-MM-DD)"),
        click.option("--time", "due_time", default=None, help="Due time (HH:MM)"),
        click.option("--discipline", "discipline_id", default=None, help="Discipline id"),
        click.option("--description", default=None),
        click.option("--notes", default=None),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _activity_fields(store, kind, priority, due, due_time, discipline_id, description, notes) -> dict:
    """
    Turn CLI option values into activity fields.

    Raises:
        KeyError: unknown discipline id.
    """
    return {
        "kind": ActivityKind(kind) if kind else None,
        "priority": Priority(priority) if priority else None,
        "due_date": _parse_date(due) if due else None,
        "due_time": _parse_time(due_time) if due_time else None,
        "discipline": find_discipline(store, discipline_id) if discipline_id else None,
        "description": description,
        "notes": notes,
    }


@main.command()
@click.argument("title")
@_activity_options
def add(title: str, kind, priority, due, due_time, discipline_id, description, notes):
    """Add an activity."""
    config, store = _load_store()
    try:
        kind = kind or ActivityKind.ASSIGNMENT.value
        fields = _activity_fields(
            store, kind, priority, due, due_time, discipline_id, description, notes
        )
        activity = add_activity(store, title, **fields)
    except KeyError:
        click.echo(f"Error: no discipline with id {discipline_id}", err=True)
        sys.exit(1)
    except (ValueError, ApiError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Added {activity.id}: {activity.title}")


@main.command()
@click.argument("activity_id")
@click.option("--title", default=None)
@click.option("--status", type=click.Choice([s.value for s in ActivityStatus]), default=None)
@_activity_options
def edit(activity_id: str, title, status, kind, priority, due, due_time, discipline_id, description, notes):
    """Change fields of an activity."""
    config, store = _load_store()
    try:
        fields = _activity_fields(
            store, kind, priority, due, due_time, discipline_id, description, notes
        )
    except KeyError:
        click.echo(f"Error: no discipline with id {discipline_id}", err=True)
        sys.exit(1)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        activity = edit_activity(
            store,
            activity_id,
            title=title,
            status=ActivityStatus(status) if status else None,
            **fields,
        )
    except KeyError:
        click.echo(f"Error: no activity with id {activity_id}", err=True)
        sys.exit(1)
    except (ValueError, ApiError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Updated {activity.id}: {activity.title}")


@main.command()
@click.argument("activity_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def rm(activity_id: str, yes: bool):
    """Delete an activity."""
    if not yes and not click.confirm(f"Delete activity {activity_id}?"):
        return
    config, store = _load_store()
    try:
        activity = delete_activity(store, activity_id)
    except KeyError:
        click.echo(f"Error: no activity with id {activity_id}", err=True)
        sys.exit(1)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Deleted {activity.title}")


def _discipline_line(discipline: Discipline, selected: bool) -> str:
    check = "x" if selected else " "
    line = f"  [{check}] {discipline.id:>4}  {discipline.name} ({discipline.color})"
    details = [d for d in (discipline.code, discipline.professor) if d]
    if details:
        line += f" - {', '.join(details)}"
    if discipline.attendance_level:
        line += f" [{discipline.attendance:.0f}% {discipline.attendance_level.label}]"
    return line


@main.command()
@click.option("--discipline", "disciplines", multiple=True, help="Mark this discipline id as selected")
@click.option("--query", "-q", default="", help="Search name, code and professor")
@click.option(
    "--status",
    type=click.Choice(["all"] + [s.value for s in DisciplineStatus]),
    default="all",
    help="Filter by discipline status",
)
def disciplines(disciplines: tuple[str, ...], query: str, status: str):
    """List disciplines, their attendance and whether the calendar shows them."""
    config, store = _load_store()
    state = _state(None, CalendarView.MONTH, disciplines)
    status_filter = None if status == "all" else DisciplineStatus(status)
    try:
        legend = discipline_legend(store, state.discipline_filter, query, status_filter)
    except ApiError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not legend:
        click.echo("No disciplines.")
        return

    for discipline, selected in legend:
        click.echo(_discipline_line(discipline, selected))


if __name__ == "__main__":
    main()
