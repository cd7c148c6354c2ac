"""Query Coordinator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core (ordering, grouping) and the I/O-performing shell components
(event retrieval, location lookup). It owns the feed's loading state.
"""

import asyncio
import dataclasses
import inspect
import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Any, Callable, Protocol, Sequence

from eventfeed.core.criteria import FilterCriteria, RetrievalRequest
from eventfeed.core.errors import EventFeedError, LocationUnavailable, RetrievalFailure
from eventfeed.core.event import Event
from eventfeed.core.geo import Coordinate
from eventfeed.core.grouping import EventGroup, group_events
from eventfeed.core.sorting import OrderingMode, sort_events


logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """Retrieval collaborator. fetch_events may be sync or async."""

    def fetch_events(self, request: RetrievalRequest) -> Any: ...


class LocationProvider(Protocol):
    """Location collaborator. current_location may be sync or async."""

    def current_location(self) -> Any: ...


class QueryState(str, Enum):
    """Loading state of the feed."""
    IDLE = "idle"
    LOADING = "loading"
    REFRESHING = "refreshing"
    READY = "ready"


@dataclass(frozen=True)
class FeedSnapshot:
    """What the presentation layer sees after every state change.

    Attributes:
        state: Loading state
        groups: Labeled sections in display order
        criteria: Criteria the feed reflects (or is loading)
        error: Last retrieval or location error, None if none
        sequence: Sequence number of the latest issued request
    """
    state: QueryState
    groups: tuple[EventGroup, ...]
    criteria: FilterCriteria
    error: EventFeedError | None = None
    sequence: int = 0

    @property
    def is_busy(self) -> bool:
        """True while a request is outstanding."""
        return self.state in (QueryState.LOADING, QueryState.REFRESHING)

    @property
    def event_count(self) -> int:
        return sum(len(g.events) for g in self.groups)


Listener = Callable[[FeedSnapshot], None]


async def _call(func: Callable[..., Any], *args: Any) -> Any:
    """Await async collaborators; run sync ones off the event loop."""
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    return await asyncio.to_thread(func, *args)


class QueryCoordinator:
    """Coordinates event retrieval, ordering and grouping.

    State machine: IDLE -> LOADING -> READY, with REFRESHING entered from
    READY by refresh(). Every retrieval is tagged with a sequence number;
    responses for anything but the latest request are discarded.
    """

    def __init__(
        self,
        source: EventSource,
        location_provider: LocationProvider | None = None,
        criteria: FilterCriteria | None = None,
        tz: tzinfo | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        """Initialize coordinator.

        Args:
            source: Event retrieval collaborator
            location_provider: Location collaborator (optional)
            criteria: Initial criteria (defaults if not provided)
            tz: Zone defining day boundaries (system zone if None)
            clock: Returns today's date, for section labels
        """
        self.source = source
        self.location_provider = location_provider
        self.tz = tz
        self.clock = clock or (lambda: datetime.now(tz).date())

        self._criteria = criteria or FilterCriteria()
        self._state = QueryState.IDLE
        self._events: tuple[Event, ...] = ()
        self._groups: tuple[EventGroup, ...] = ()
        self._error: EventFeedError | None = None
        self._sequence = 0
        self._listeners: list[Listener] = []

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def snapshot(self) -> FeedSnapshot:
        """Current published view of the feed."""
        return FeedSnapshot(
            state=self._state,
            groups=self._groups,
            criteria=self._criteria,
            error=self._error,
            sequence=self._sequence,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with a snapshot on every change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> FeedSnapshot:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot

    def _build_groups(self, events: Sequence[Event]) -> tuple[EventGroup, ...]:
        """Sort and group events with the current criteria (pure core calls)."""
        ordered = sort_events(
            events,
            self._criteria.ordering,
            self._criteria.coordinate,
        )
        return tuple(group_events(
            ordered,
            self._criteria.ordering,
            tz=self.tz,
            today=self.clock(),
        ))

    def _apply_events(self, events: Sequence[Event]) -> None:
        """Store events and their sections.

        Events the core cannot order (mixed naive and aware dates, no
        recency timestamp) leave an empty feed with the error attached.
        """
        try:
            groups = self._build_groups(events)
        except (TypeError, ValueError) as e:
            error = RetrievalFailure(f"Could not order events: {e}")
            error.__cause__ = e
            logger.error("%s", error)
            self._events = ()
            self._groups = ()
            self._error = error
            return

        self._events = tuple(events)
        self._groups = groups

    async def _load(self, state: QueryState) -> FeedSnapshot:
        """Run one retrieval for the current criteria.

        Args:
            state: LOADING or REFRESHING

        Returns:
            Snapshot after the request resolved (or the newer snapshot if
            this request was superseded)
        """
        self._sequence += 1
        sequence = self._sequence
        request = self._criteria.to_request()

        self._state = state
        self._error = None
        self._publish()

        logger.info("Request #%d: %s", sequence, request)

        events: Sequence[Event] = []
        error: RetrievalFailure | None = None
        try:
            events = await _call(self.source.fetch_events, request)
        except RetrievalFailure as e:
            error = e
        except Exception as e:
            error = RetrievalFailure(f"Event retrieval failed: {e}")
            error.__cause__ = e

        if sequence != self._sequence:
            logger.info(
                "Discarding response for request #%d (latest is #%d)",
                sequence,
                self._sequence,
            )
            return self.snapshot

        if error is not None:
            logger.error("Request #%d failed: %s", sequence, error)
            self._events = ()
            self._groups = ()
            self._error = error
        else:
            self._apply_events(events)
            logger.info(
                "Request #%d returned %d events in %d groups",
                sequence,
                len(self._events),
                len(self._groups),
            )

        self._state = QueryState.READY
        return self._publish()

    async def set_criteria(self, criteria: FilterCriteria) -> FeedSnapshot:
        """Replace the criteria and reload the feed.

        Args:
            criteria: New, already validated criteria

        Returns:
            Snapshot after the reload
        """
        self._criteria = criteria
        return await self._load(QueryState.LOADING)

    async def refresh(self) -> FeedSnapshot:
        """Reload the feed with the current criteria.

        Shows as REFRESHING once something has loaded; before that it is
        an ordinary load.
        """
        if self._state == QueryState.IDLE:
            return await self._load(QueryState.LOADING)
        return await self._load(QueryState.REFRESHING)

    def reorder(self, ordering: OrderingMode) -> FeedSnapshot:
        """Change only the ordering mode and regroup the loaded events.

        Ordering is not a retrieval concern, so nothing is fetched. A
        request still in flight will be ordered with the new mode.
        """
        self._criteria = dataclasses.replace(self._criteria, ordering=ordering)
        self._apply_events(self._events)
        return self._publish()

    async def use_current_location(self) -> FeedSnapshot:
        """Use the device location as search center if none is set.

        A location failure is recorded on the snapshot; the last loaded
        events stay in place.
        """
        if self.location_provider is None:
            self._error = LocationUnavailable("No location provider configured")
            return self._publish()

        try:
            coordinate: Coordinate = await _call(self.location_provider.current_location)
        except LocationUnavailable as e:
            logger.warning("Location unavailable: %s", e)
            self._error = e
            return self._publish()

        if self._criteria.coordinate is not None:
            logger.info("Criteria already have a location, keeping it")
            return self.snapshot

        return await self.set_criteria(
            dataclasses.replace(self._criteria, coordinate=coordinate)
        )
