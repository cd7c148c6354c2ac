"""Section grouping - Pure functions.

Splits an already ordered event list into labeled sections. Grouping never
reorders or drops events: concatenating the sections gives back the input.
"""

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Sequence

from eventfeed.core.event import Event
from eventfeed.core.labels import resolve_label
from eventfeed.core.sorting import OrderingMode


@dataclass(frozen=True)
class EventGroup:
    """A labeled section of events.

    Attributes:
        label: Section header
        events: Events in display order
        day: Calendar day of the section (date modes only)
    """
    label: str
    events: tuple[Event, ...]
    day: date | None = None


def local_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar day of a timestamp at local midnight boundaries.

    Aware timestamps are converted to tz (the system zone when tz is None).
    Naive timestamps are taken as already local.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def group_by_day(
    events: Sequence[Event],
    tz: tzinfo | None = None,
) -> list[tuple[date, list[Event]]]:
    """Bucket events by local calendar day.

    Pure function. Buckets appear in order of first appearance, so an
    ascending input gives earliest day first and a descending input gives
    latest day first.
    """
    buckets: dict[date, list[Event]] = {}

    for event in events:
        buckets.setdefault(local_day(event.date, tz), []).append(event)

    return list(buckets.items())


def group_events(
    events: Sequence[Event],
    mode: OrderingMode,
    tz: tzinfo | None = None,
    today: date | None = None,
) -> list[EventGroup]:
    """Group sorted events into labeled sections.

    Pure function.

    Date modes get one section per distinct day; every other mode gets a
    single section with a fixed caption. Empty input gives no sections.

    Args:
        events: Events already ordered for mode
        mode: Active ordering mode
        tz: Zone defining day boundaries
        today: Current calendar day for "Today"/"Tomorrow" labels

    Returns:
        List of EventGroup
    """
    if not events:
        return []

    if not mode.is_date_mode:
        return [EventGroup(label=resolve_label(mode), events=tuple(events))]

    if today is None:
        today = datetime.now(tz).date()

    return [
        EventGroup(
            label=resolve_label(mode, day, today),
            events=tuple(bucket),
            day=day,
        )
        for day, bucket in group_by_day(events, tz)
    ]


def flatten_groups(groups: Sequence[EventGroup]) -> list[Event]:
    """Concatenate section events in section order."""
    return [event for group in groups for event in group.events]
