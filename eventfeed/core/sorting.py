"""Event ordering - Pure functions.

Each ordering mode maps to a sort key. Python's sort is stable, including
with reverse=True, so events with equal keys keep their input order and
sorting an already sorted list is a no-op.
"""

import logging
from enum import Enum
from typing import Any, Callable, Sequence

from eventfeed.core.errors import InvalidCriteria
from eventfeed.core.event import Event
from eventfeed.core.geo import Coordinate, distance_to
from eventfeed.core.participation import effective_count


logger = logging.getLogger(__name__)


class OrderingMode(str, Enum):
    """How the event list is ordered. Values are the wire names."""
    DATE_ASC = "date-asc"
    DATE_DESC = "date-desc"
    DISTANCE = "distance"
    RECENT = "recent"
    OLDEST = "oldest"
    CAPACITY = "capacity"
    POPULARITY = "popularity"

    @property
    def is_date_mode(self) -> bool:
        """True for the modes that bucket events by day."""
        return self in (OrderingMode.DATE_ASC, OrderingMode.DATE_DESC)


def parse_ordering(value: str | OrderingMode) -> OrderingMode:
    """Parse an ordering mode from its wire name.

    Raises:
        InvalidCriteria: If the value is not a known mode
    """
    try:
        return OrderingMode(value)
    except ValueError as e:
        known = ", ".join(m.value for m in OrderingMode)
        raise InvalidCriteria(f"Unknown ordering '{value}' (expected one of: {known})") from e


def _capacity_key(event: Event) -> tuple[int, Any]:
    """Unlimited capacity first (by date), then largest capacity first."""
    if event.capacity is None:
        return (0, event.date)
    return (1, -event.capacity)


# (key function, reverse) per mode; distance is handled separately
_SORT_KEYS: dict[OrderingMode, tuple[Callable[[Event], Any], bool]] = {
    OrderingMode.DATE_ASC: (lambda e: e.date, False),
    OrderingMode.DATE_DESC: (lambda e: e.date, True),
    OrderingMode.RECENT: (lambda e: e.recency_timestamp, True),
    OrderingMode.OLDEST: (lambda e: e.recency_timestamp, False),
    OrderingMode.CAPACITY: (_capacity_key, False),
    OrderingMode.POPULARITY: (effective_count, True),
}


def sort_events(
    events: Sequence[Event],
    mode: OrderingMode,
    reference: Coordinate | None = None,
) -> list[Event]:
    """Order events for the given mode.

    Pure function: returns a new list, never mutates the input.

    Distance ordering needs a reference point. Without one the input order
    is returned unchanged.

    Args:
        events: Events to order
        mode: Ordering mode
        reference: Reference point for distance ordering

    Returns:
        New list of events in display order
    """
    if mode == OrderingMode.DISTANCE:
        if reference is None:
            logger.debug("Distance ordering without a reference point, keeping input order")
            return list(events)
        return sorted(events, key=lambda e: distance_to(e, reference))

    key, reverse = _SORT_KEYS[mode]
    return sorted(events, key=key, reverse=reverse)
