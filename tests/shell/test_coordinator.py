"""Tests for the QueryCoordinator module.

Tests the coordination between functional core and imperative shell.
Uses fakes and mocks for the retrieval and location collaborators.
"""

import asyncio
from datetime import date, datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from eventfeed.coordinator import FeedSnapshot, QueryCoordinator, QueryState
from eventfeed.core.criteria import FilterCriteria
from eventfeed.core.errors import LocationUnavailable, RetrievalFailure
from eventfeed.core.event import Event, parse_events
from eventfeed.core.geo import Coordinate
from eventfeed.core.grouping import flatten_groups
from eventfeed.core.sorting import OrderingMode


TODAY = date(2026, 10, 19)
BASE = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


def make_event(
    event_id: str,
    day: int = 0,
    capacity: int | None = None,
    latitude: float = 0.0,
    longitude: float = 0.0,
) -> Event:
    return Event(
        id=event_id,
        title=f"Event {event_id}",
        date=BASE + timedelta(days=day),
        latitude=latitude,
        longitude=longitude,
        created_by="creator",
        created_at=BASE - timedelta(days=30),
        capacity=capacity,
    )


def ids(events):
    return [e.id for e in events]


class FakeSource:
    """Synchronous retrieval collaborator returning fixed events."""

    def __init__(self, events=None, error: Exception | None = None):
        self.events = list(events or [])
        self.error = error
        self.requests = []

    def fetch_events(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return list(self.events)


class GatedSource:
    """Async retrieval collaborator whose responses the test releases."""

    def __init__(self):
        self.pending = []

    async def fetch_events(self, request):
        future = asyncio.get_running_loop().create_future()
        self.pending.append((request, future))
        return await future


class FakeLocationProvider:
    def __init__(self, coordinate: Coordinate | None):
        self.coordinate = coordinate
        self.calls = 0

    def current_location(self):
        self.calls += 1
        if self.coordinate is None:
            raise LocationUnavailable("Permission to access location was denied")
        return self.coordinate


async def wait_for_pending(source: GatedSource, count: int) -> None:
    """Yield to the loop until count requests are outstanding."""
    for _ in range(100):
        if len(source.pending) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {count} pending requests, got {len(source.pending)}")


@pytest.fixture
def sample_events():
    return [
        make_event("wed", day=2, capacity=10, latitude=2.0, longitude=2.0),
        make_event("mon", day=0, capacity=None, latitude=5.0, longitude=5.0),
        make_event("tue", day=1, capacity=50, latitude=0.1, longitude=0.1),
    ]


@pytest.fixture
def source(sample_events):
    return FakeSource(sample_events)


def make_coordinator(source, **kwargs) -> QueryCoordinator:
    return QueryCoordinator(source, tz=timezone.utc, clock=lambda: TODAY, **kwargs)


def record_states(coordinator: QueryCoordinator) -> list[QueryState]:
    states: list[QueryState] = []
    coordinator.subscribe(lambda snapshot: states.append(snapshot.state))
    return states


class TestInitialState:
    """Tests for a fresh coordinator."""

    def test_idle_with_default_criteria(self, source):
        coordinator = make_coordinator(source)

        snapshot = coordinator.snapshot

        assert snapshot.state == QueryState.IDLE
        assert snapshot.groups == ()
        assert snapshot.criteria == FilterCriteria()
        assert snapshot.error is None
        assert snapshot.sequence == 0
        assert source.requests == []


class TestSetCriteria:
    """Tests for QueryCoordinator.set_criteria()."""

    def test_loads_sorts_and_groups(self, source):
        coordinator = make_coordinator(source)

        snapshot = asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert snapshot.state == QueryState.READY
        assert [g.label for g in snapshot.groups] == ["Today", "Tomorrow", "Wednesday, October 21"]
        assert ids(flatten_groups(snapshot.groups)) == ["mon", "tue", "wed"]
        assert snapshot.event_count == 3
        assert snapshot.error is None

    def test_publishes_loading_then_ready(self, source):
        coordinator = make_coordinator(source)
        states = record_states(coordinator)

        asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert states == [QueryState.LOADING, QueryState.READY]

    def test_passes_retrieval_subset(self, source):
        coordinator = make_coordinator(source)
        criteria = FilterCriteria(
            search_query="yoga",
            ordering=OrderingMode.POPULARITY,
            radius_km=10,
        )

        asyncio.run(coordinator.set_criteria(criteria))

        assert source.requests == [criteria.to_request()]
        assert source.requests[0].coordinate is None
        assert source.requests[0].radius_km is None

    def test_includes_location_when_set(self, source):
        coordinator = make_coordinator(source)
        here = Coordinate(0.0, 0.0)

        asyncio.run(coordinator.set_criteria(FilterCriteria(coordinate=here, radius_km=20)))

        assert source.requests[0].coordinate == here
        assert source.requests[0].radius_km == 20

    def test_descending_date_groups_latest_first(self, source):
        coordinator = make_coordinator(source)

        snapshot = asyncio.run(coordinator.set_criteria(
            FilterCriteria(ordering=OrderingMode.DATE_DESC)
        ))

        assert [g.day for g in snapshot.groups] == [
            date(2026, 10, 21), date(2026, 10, 20), date(2026, 10, 19),
        ]

    def test_distance_ordering_uses_criteria_coordinate(self, source):
        coordinator = make_coordinator(source)

        snapshot = asyncio.run(coordinator.set_criteria(FilterCriteria(
            coordinate=Coordinate(0.0, 0.0),
            ordering=OrderingMode.DISTANCE,
        )))

        assert len(snapshot.groups) == 1
        assert snapshot.groups[0].label == "Nearest first"
        assert ids(snapshot.groups[0].events) == ["tue", "wed", "mon"]

    def test_distance_ordering_without_coordinate_keeps_source_order(self, source):
        coordinator = make_coordinator(source)

        snapshot = asyncio.run(coordinator.set_criteria(
            FilterCriteria(ordering=OrderingMode.DISTANCE)
        ))

        assert ids(snapshot.groups[0].events) == ["wed", "mon", "tue"]

    def test_empty_result_gives_no_groups(self):
        coordinator = make_coordinator(FakeSource([]))

        snapshot = asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert snapshot.state == QueryState.READY
        assert snapshot.groups == ()

    def test_works_with_mock_source(self, sample_events):
        source = Mock()
        source.fetch_events.return_value = sample_events
        coordinator = make_coordinator(source)
        criteria = FilterCriteria(ordering=OrderingMode.CAPACITY)

        snapshot = asyncio.run(coordinator.set_criteria(criteria))

        source.fetch_events.assert_called_once_with(criteria.to_request())
        assert ids(snapshot.groups[0].events) == ["mon", "tue", "wed"]


class TestRetrievalFailure:
    """Tests for failure handling."""

    def test_failure_moves_to_ready_with_error(self):
        error = RetrievalFailure("backend down")
        coordinator = make_coordinator(FakeSource(error=error))
        states = record_states(coordinator)

        snapshot = asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert states == [QueryState.LOADING, QueryState.READY]
        assert snapshot.state == QueryState.READY
        assert snapshot.groups == ()
        assert snapshot.error is error

    def test_unexpected_exception_is_wrapped(self):
        coordinator = make_coordinator(FakeSource(error=RuntimeError("socket closed")))

        snapshot = asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert isinstance(snapshot.error, RetrievalFailure)
        assert "socket closed" in str(snapshot.error)
        assert isinstance(snapshot.error.__cause__, RuntimeError)

    def test_failure_clears_previous_results(self, source):
        coordinator = make_coordinator(source)
        asyncio.run(coordinator.set_criteria(FilterCriteria()))

        source.error = RetrievalFailure("backend down")
        snapshot = asyncio.run(coordinator.refresh())

        assert snapshot.groups == ()
        assert snapshot.error is source.error

    def test_success_clears_error(self, source):
        source.error = RetrievalFailure("backend down")
        coordinator = make_coordinator(source)
        asyncio.run(coordinator.set_criteria(FilterCriteria()))

        source.error = None
        snapshot = asyncio.run(coordinator.refresh())

        assert snapshot.error is None
        assert snapshot.event_count == 3

    def test_no_automatic_retry(self):
        source = FakeSource(error=RetrievalFailure("backend down"))
        coordinator = make_coordinator(source)

        asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert len(source.requests) == 1


class TestMixedTimestamps:
    """Tests for feeds mixing timestamps with and without an offset."""

    def test_parsed_mixed_feed_loads(self):
        records = [
            {
                "id": "stamped",
                "title": "Stamped",
                "date": "2026-10-20T10:00:00Z",
                "location": {"latitude": 0.0, "longitude": 0.0},
                "createdAt": 1792454400000,
            },
            {
                "id": "bare",
                "title": "Bare",
                "date": "2026-10-19T10:00:00",
                "location": {"latitude": 0.0, "longitude": 0.0},
                "createdAt": "2026-10-02T10:00:00",
            },
        ]
        coordinator = make_coordinator(FakeSource(parse_events(records)))

        snapshot = asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert snapshot.state == QueryState.READY
        assert snapshot.error is None
        assert ids(flatten_groups(snapshot.groups)) == ["bare", "stamped"]

    def test_unorderable_events_do_not_leave_loading(self):
        naive = Event(
            id="naive", title="Naive", date=datetime(2026, 10, 20, 10, 0),
            latitude=0.0, longitude=0.0, created_by="u",
            created_at=datetime(2026, 10, 1),
        )
        coordinator = make_coordinator(FakeSource([make_event("aware"), naive]))
        states = record_states(coordinator)

        snapshot = asyncio.run(coordinator.set_criteria(FilterCriteria()))

        assert states == [QueryState.LOADING, QueryState.READY]
        assert snapshot.groups == ()
        assert isinstance(snapshot.error, RetrievalFailure)
        assert isinstance(snapshot.error.__cause__, TypeError)

    def test_reorder_of_unorderable_events_records_error(self):
        undated = Event(
            id="undated", title="Undated", date=BASE, latitude=0.0,
            longitude=0.0, created_by="u",
        )
        coordinator = make_coordinator(FakeSource([make_event("a"), undated]))
        asyncio.run(coordinator.set_criteria(FilterCriteria()))

        snapshot = coordinator.reorder(OrderingMode.RECENT)

        assert snapshot.groups == ()
        assert isinstance(snapshot.error, RetrievalFailure)
        assert isinstance(snapshot.error.__cause__, ValueError)


class TestRefresh:
    """Tests for QueryCoordinator.refresh()."""

    def test_refresh_after_load_uses_refreshing_state(self, source):
        coordinator = make_coordinator(source)
        states = record_states(coordinator)

        asyncio.run(coordinator.set_criteria(FilterCriteria(search_query="yoga")))
        snapshot = asyncio.run(coordinator.refresh())

        assert states == [
            QueryState.LOADING,
            QueryState.READY,
            QueryState.REFRESHING,
            QueryState.READY,
        ]
        assert snapshot.state == QueryState.READY
        assert source.requests[0] == source.requests[1]

    def test_refresh_from_idle_is_a_load(self, source):
        coordinator = make_coordinator(source)
        states = record_states(coordinator)

        asyncio.run(coordinator.refresh())

        assert states == [QueryState.LOADING, QueryState.READY]


class TestStaleResponses:
    """Tests for last-write-wins handling of overlapping requests."""

    def test_older_response_is_discarded(self):
        source = GatedSource()
        coordinator = make_coordinator(source)

        async def scenario():
            first = asyncio.create_task(
                coordinator.set_criteria(FilterCriteria(search_query="old"))
            )
            await wait_for_pending(source, 1)
            second = asyncio.create_task(
                coordinator.set_criteria(FilterCriteria(search_query="new"))
            )
            await wait_for_pending(source, 2)

            source.pending[1][1].set_result([make_event("new")])
            await second
            source.pending[0][1].set_result([make_event("old")])
            await first

        asyncio.run(scenario())

        snapshot = coordinator.snapshot
        assert snapshot.state == QueryState.READY
        assert snapshot.sequence == 2
        assert snapshot.criteria.search_query == "new"
        assert ids(flatten_groups(snapshot.groups)) == ["new"]

    def test_superseded_request_stays_loading_until_latest_resolves(self):
        source = GatedSource()
        coordinator = make_coordinator(source)
        observed: list[FeedSnapshot] = []

        async def scenario():
            first = asyncio.create_task(
                coordinator.set_criteria(FilterCriteria(search_query="old"))
            )
            await wait_for_pending(source, 1)
            second = asyncio.create_task(
                coordinator.set_criteria(FilterCriteria(search_query="new"))
            )
            await wait_for_pending(source, 2)

            source.pending[0][1].set_result([make_event("old")])
            observed.append(await first)

            source.pending[1][1].set_result([make_event("new")])
            observed.append(await second)

        asyncio.run(scenario())

        assert observed[0].state == QueryState.LOADING
        assert observed[0].groups == ()
        assert observed[1].state == QueryState.READY
        assert ids(flatten_groups(observed[1].groups)) == ["new"]

    def test_stale_failure_is_discarded(self):
        source = GatedSource()
        coordinator = make_coordinator(source)

        async def scenario():
            first = asyncio.create_task(coordinator.set_criteria(FilterCriteria()))
            await wait_for_pending(source, 1)
            second = asyncio.create_task(coordinator.refresh())
            await wait_for_pending(source, 2)

            source.pending[1][1].set_result([make_event("fresh")])
            await second
            source.pending[0][1].set_exception(RetrievalFailure("late failure"))
            await first

        asyncio.run(scenario())

        snapshot = coordinator.snapshot
        assert snapshot.error is None
        assert ids(flatten_groups(snapshot.groups)) == ["fresh"]


class TestReorder:
    """Tests for QueryCoordinator.reorder()."""

    def test_regroups_without_fetching(self, source):
        coordinator = make_coordinator(source)
        asyncio.run(coordinator.set_criteria(FilterCriteria()))

        snapshot = coordinator.reorder(OrderingMode.CAPACITY)

        assert len(source.requests) == 1
        assert snapshot.state == QueryState.READY
        assert snapshot.criteria.ordering == OrderingMode.CAPACITY
        assert [g.label for g in snapshot.groups] == ["By capacity"]
        assert ids(snapshot.groups[0].events) == ["mon", "tue", "wed"]

    def test_in_flight_response_uses_new_ordering(self):
        source = GatedSource()
        coordinator = make_coordinator(source)

        async def scenario():
            task = asyncio.create_task(coordinator.set_criteria(FilterCriteria()))
            await wait_for_pending(source, 1)
            coordinator.reorder(OrderingMode.DATE_DESC)
            source.pending[0][1].set_result([
                make_event("mon", day=0),
                make_event("tue", day=1),
            ])
            return await task

        snapshot = asyncio.run(scenario())

        assert ids(flatten_groups(snapshot.groups)) == ["tue", "mon"]

    def test_reorder_before_load_only_changes_criteria(self, source):
        coordinator = make_coordinator(source)

        snapshot = coordinator.reorder(OrderingMode.POPULARITY)

        assert snapshot.state == QueryState.IDLE
        assert snapshot.groups == ()
        assert coordinator.criteria.ordering == OrderingMode.POPULARITY


class TestUseCurrentLocation:
    """Tests for QueryCoordinator.use_current_location()."""

    def test_sets_coordinate_and_reloads(self, source):
        here = Coordinate(0.0, 0.0)
        coordinator = make_coordinator(source, location_provider=FakeLocationProvider(here))

        snapshot = asyncio.run(coordinator.use_current_location())

        assert snapshot.criteria.coordinate == here
        assert snapshot.state == QueryState.READY
        assert source.requests[-1].coordinate == here
        assert source.requests[-1].radius_km == 50.0

    def test_keeps_existing_coordinate(self, source):
        chosen = Coordinate(10.0, 10.0)
        provider = FakeLocationProvider(Coordinate(0.0, 0.0))
        coordinator = make_coordinator(
            source,
            location_provider=provider,
            criteria=FilterCriteria(coordinate=chosen),
        )

        snapshot = asyncio.run(coordinator.use_current_location())

        assert snapshot.criteria.coordinate == chosen
        assert source.requests == []

    def test_unavailable_keeps_last_results(self, source):
        coordinator = make_coordinator(source, location_provider=FakeLocationProvider(None))
        asyncio.run(coordinator.set_criteria(FilterCriteria()))

        snapshot = asyncio.run(coordinator.use_current_location())

        assert isinstance(snapshot.error, LocationUnavailable)
        assert snapshot.state == QueryState.READY
        assert snapshot.event_count == 3
        assert snapshot.criteria.coordinate is None
        assert len(source.requests) == 1

    def test_without_provider(self, source):
        coordinator = make_coordinator(source)

        snapshot = asyncio.run(coordinator.use_current_location())

        assert isinstance(snapshot.error, LocationUnavailable)


class TestSubscribe:
    """Tests for listener registration."""

    def test_unsubscribe_stops_notifications(self, source):
        coordinator = make_coordinator(source)
        seen: list[FeedSnapshot] = []

        unsubscribe = coordinator.subscribe(seen.append)
        asyncio.run(coordinator.set_criteria(FilterCriteria()))
        unsubscribe()
        asyncio.run(coordinator.refresh())

        assert len(seen) == 2
        assert seen[-1].state == QueryState.READY
