"""Recurring event expansion - pure, no I/O dependencies."""

import logging
from datetime import date
from typing import Iterable

from .dates import iter_days
from .events import EventInstance, EventTemplate

logger = logging.getLogger(__name__)


class InvalidRange(ValueError):
    """Raised when an expansion range ends before it starts."""

    def __init__(self, range_start: date, range_end: date):
        super().__init__(f"Range start {range_start} is after range end {range_end}")
        self.range_start = range_start
        self.range_end = range_end


def sort_instances(instances: Iterable[EventInstance]) -> list[EventInstance]:
    """Sort by date, then start time, then template id."""
    return sorted(instances, key=lambda e: (e.date, e.start_time, e.template_id))


def expand(
    templates: Iterable[EventTemplate],
    range_start: date,
    range_end: date,
) -> list[EventInstance]:
    """
    Expand templates into the concrete occurrences visible in [range_start, range_end].

    Pure function - no I/O. Always computed from the raw templates, so calling it
    again with the same inputs yields the same instances.

    1. Every template contributes its origin occurrence (its own start date) when
       that date is in range.
    2. Recurring templates contribute one derived occurrence per matching weekday
       in range, skipping the origin date.
    3. An occurrence whose (discipline, date, start time) is already taken is
       dropped; the first template in input order wins.

    Raises:
        InvalidRange: range_start is after range_end.
    """
    if range_start > range_end:
        raise InvalidRange(range_start, range_end)

    templates = list(templates)
    emitted: list[EventInstance] = []
    taken: set = set()

    def _emit(instance: EventInstance) -> None:
        if instance.dedup_key in taken:
            logger.debug(f"Skipping {instance.template_id} on {instance.date}: slot already taken")
            return
        taken.add(instance.dedup_key)
        emitted.append(instance)

    for template in templates:
        if range_start <= template.start_date <= range_end:
            _emit(EventInstance.origin_of(template))

    for template in templates:
        if not template.is_recurring:
            continue
        origin = EventInstance.origin_of(template)
        for d in iter_days(range_start, range_end):
            if d == template.start_date or not template.recurs_on(d):
                continue
            _emit(origin.moved_to(d))

    logger.debug(
        f"Expanded {len(templates)} templates into {len(emitted)} instances "
        f"for {range_start}..{range_end}"
    )
    return sort_instances(emitted)
