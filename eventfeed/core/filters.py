"""Event matching against retrieval constraints - Pure functions.

These predicates implement a RetrievalRequest for sources that filter in
process. All functions are pure with no side effects.
"""

from datetime import datetime
from typing import Sequence

from eventfeed.core.criteria import RetrievalRequest
from eventfeed.core.event import Event
from eventfeed.core.geo import Coordinate, is_within_radius


def matches_text(event: Event, query: str) -> bool:
    """Case-insensitive substring match on title, description and address.

    Pure function. An empty query matches everything.
    """
    needle = query.strip().lower()
    if not needle:
        return True

    haystack = (event.title, event.description, event.address)
    return any(needle in text.lower() for text in haystack)


def matches_date_window(
    event: Event,
    start: datetime | None = None,
    end: datetime | None = None,
) -> bool:
    """Check the event date against an inclusive, possibly open window.

    Pure function.
    """
    if start is not None and event.date < start:
        return False

    if end is not None and event.date > end:
        return False

    return True


def matches_category(
    event: Event,
    category: str | None,
    sub_categories: frozenset[str] = frozenset(),
) -> bool:
    """Check category and, if any are selected, sub-category.

    Pure function.
    """
    if category is None:
        return True

    if event.category != category:
        return False

    return not sub_categories or event.sub_category in sub_categories


def matches_location(
    event: Event,
    coordinate: Coordinate | None,
    radius_km: float | None,
) -> bool:
    """Check the venue is within radius of coordinate.

    Pure function. No coordinate (or no radius) means no constraint.
    """
    if coordinate is None or radius_km is None:
        return True

    return is_within_radius(event, coordinate, radius_km)


def matches_request(event: Event, request: RetrievalRequest) -> bool:
    """Check an event against every constraint of a request."""
    return (
        matches_text(event, request.search_query)
        and matches_date_window(event, request.start, request.end)
        and matches_category(event, request.category, request.sub_categories)
        and matches_location(event, request.coordinate, request.radius_km)
    )


def filter_events(
    events: Sequence[Event],
    request: RetrievalRequest,
) -> list[Event]:
    """Filter events to those matching a retrieval request.

    Pure function. Preserves input order.

    Args:
        events: Events to filter
        request: Retrieval constraints

    Returns:
        Matching events
    """
    return [e for e in events if matches_request(e, request)]
