"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Event data parsing
- Geo/distance calculations
- Participation counting
- Ordering and grouping
- Filter criteria validation

All functions here are deterministic and have no I/O.
"""

from eventfeed.core.event import Event, Participant, parse_events
from eventfeed.core.geo import Coordinate, calculate_distance
from eventfeed.core.participation import effective_count
from eventfeed.core.sorting import OrderingMode, sort_events
from eventfeed.core.grouping import EventGroup, group_events
from eventfeed.core.labels import resolve_label
from eventfeed.core.criteria import DateRange, FilterCriteria, RetrievalRequest
from eventfeed.core.errors import (
    EventFeedError,
    InvalidCriteria,
    LocationUnavailable,
    RetrievalFailure,
)

__all__ = [
    # Event
    "Event",
    "Participant",
    "parse_events",
    # Geo
    "Coordinate",
    "calculate_distance",
    # Participation
    "effective_count",
    # Ordering / grouping
    "OrderingMode",
    "sort_events",
    "EventGroup",
    "group_events",
    "resolve_label",
    # Criteria
    "DateRange",
    "FilterCriteria",
    "RetrievalRequest",
    # Errors
    "EventFeedError",
    "InvalidCriteria",
    "LocationUnavailable",
    "RetrievalFailure",
]
