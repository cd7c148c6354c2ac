"""Web API Handler - Serves the grouped event feed.

This module provides the HTTP endpoint for the presentation layer.
Part of the imperative shell - handles HTTP I/O.
"""

import json
import logging
from datetime import datetime, tzinfo
from typing import Any

from flask import Request, Response

from eventfeed.coordinator import FeedSnapshot, QueryCoordinator
from eventfeed.core.categories import category_name
from eventfeed.core.criteria import DEFAULT_RADIUS_KM, DateRange, FilterCriteria
from eventfeed.core.errors import InvalidCriteria
from eventfeed.core.event import Event, ensure_aware
from eventfeed.core.geo import Coordinate
from eventfeed.core.grouping import EventGroup
from eventfeed.core.labels import describe_ordering
from eventfeed.core.participation import effective_count
from eventfeed.core.sorting import parse_ordering

logger = logging.getLogger(__name__)


def _parse_datetime(value: str | None, name: str, tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO-8601 date argument; values without an offset are in tz."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidCriteria(f"Invalid {name} date '{value}'") from e
    return ensure_aware(parsed, tz)


def _parse_float(value: str | None, name: str) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError as e:
        raise InvalidCriteria(f"Invalid {name} '{value}'") from e


def parse_criteria_args(
    args: Any,
    default_radius_km: float = DEFAULT_RADIUS_KM,
    tz: tzinfo | None = None,
) -> FilterCriteria:
    """Build FilterCriteria from request query arguments.

    Supported arguments: q, start, end, category, sub_category (repeatable),
    latitude, longitude, radius_km, sort.

    Args:
        args: Query arguments (werkzeug MultiDict)
        default_radius_km: Radius when none is given
        tz: Zone for dates given without an offset (system zone if None)

    Returns:
        Validated criteria

    Raises:
        InvalidCriteria: If any argument is malformed
    """
    latitude = _parse_float(args.get("latitude"), "latitude")
    longitude = _parse_float(args.get("longitude"), "longitude")

    if (latitude is None) != (longitude is None):
        raise InvalidCriteria("latitude and longitude must be given together")

    coordinate = None
    if latitude is not None and longitude is not None:
        coordinate = Coordinate(latitude=latitude, longitude=longitude)

    radius = _parse_float(args.get("radius_km"), "radius_km")

    return FilterCriteria(
        coordinate=coordinate,
        radius_km=radius if radius is not None else default_radius_km,
        search_query=args.get("q", ""),
        date_range=DateRange(
            start=_parse_datetime(args.get("start"), "start", tz),
            end=_parse_datetime(args.get("end"), "end", tz),
        ),
        category=args.get("category") or None,
        sub_categories=frozenset(args.getlist("sub_category")),
        ordering=parse_ordering(args.get("sort", "date-asc")),
    )


def _event_to_dict(event: Event) -> dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "date": event.date.isoformat(),
        "location": {
            "latitude": event.latitude,
            "longitude": event.longitude,
            "address": event.address,
        },
        "capacity": event.capacity,
        "attending": effective_count(event),
        "imageUrl": event.image_url,
        "category": category_name(event.category),
        "createdBy": event.created_by,
    }


def _group_to_dict(group: EventGroup) -> dict[str, Any]:
    return {
        "label": group.label,
        "date": group.day.isoformat() if group.day else None,
        "events": [_event_to_dict(e) for e in group.events],
    }


def snapshot_to_dict(snapshot: FeedSnapshot) -> dict[str, Any]:
    """Serialize a feed snapshot for the HTTP response."""
    return {
        "status": "degraded" if snapshot.error else "ok",
        "state": snapshot.state.value,
        "ordering": snapshot.criteria.ordering.value,
        "ordering_label": describe_ordering(snapshot.criteria.ordering),
        "active_filters": snapshot.criteria.active_filter_count,
        "event_count": snapshot.event_count,
        "groups": [_group_to_dict(g) for g in snapshot.groups],
        "error": str(snapshot.error) if snapshot.error else None,
    }


def _json_response(body: dict[str, Any], status: int) -> Response:
    return Response(
        json.dumps(body),
        status=status,
        mimetype="application/json",
    )


async def handle_feed_request(
    request: Request,
    coordinator: QueryCoordinator,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> Response:
    """Handle a feed request: parse criteria, load, serialize.

    Args:
        request: Flask request
        coordinator: Coordinator wired to the retrieval collaborator
        default_radius_km: Radius when the request gives none

    Returns:
        JSON response (400 for invalid criteria)
    """
    try:
        criteria = parse_criteria_args(request.args, default_radius_km, coordinator.tz)
    except InvalidCriteria as e:
        logger.warning("Rejected criteria: %s", e)
        return _json_response({"status": "error", "message": str(e)}, 400)

    snapshot = await coordinator.set_criteria(criteria)

    return _json_response(snapshot_to_dict(snapshot), 200)
