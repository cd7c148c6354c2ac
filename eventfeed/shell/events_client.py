"""Events API Client - Imperative Shell.

This module handles HTTP communication with the event retrieval service.
All I/O is contained here; filtering semantics live on the server and
ordering/grouping live in the core module.
"""

import logging
from typing import Any

import requests

from eventfeed.core.criteria import RetrievalRequest
from eventfeed.core.errors import RetrievalFailure
from eventfeed.core.event import Event, parse_events


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


class EventsClient:
    """Client for fetching filtered events from the events API.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize events client.

        Args:
            base_url: Events API endpoint
            timeout: Request timeout in seconds
            session: HTTP session (created if not provided)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _build_params(self, request: RetrievalRequest) -> dict[str, Any]:
        """Build query parameters for an events API request.

        Location parameters are only sent when the request has a coordinate.

        Args:
            request: Retrieval constraints

        Returns:
            Dict of URL query parameters
        """
        params: dict[str, Any] = {}

        if request.search_query:
            params["q"] = request.search_query

        if request.start is not None:
            params["start"] = request.start.isoformat()

        if request.end is not None:
            params["end"] = request.end.isoformat()

        if request.category is not None:
            params["category"] = request.category

        if request.sub_categories:
            params["sub_category"] = sorted(request.sub_categories)

        if request.coordinate is not None:
            params["latitude"] = str(request.coordinate.latitude)
            params["longitude"] = str(request.coordinate.longitude)
            if request.radius_km is not None:
                params["radius_km"] = str(request.radius_km)

        return params

    def fetch_events(self, request: RetrievalRequest) -> list[Event]:
        """Fetch events matching a request.

        This method performs HTTP I/O.

        Args:
            request: Retrieval constraints

        Returns:
            Parsed events in the order the service returned them

        Raises:
            RetrievalFailure: If the request fails or the body is not valid JSON
        """
        params = self._build_params(request)

        logger.info("Fetching events from %s with params %s", self.base_url, params)

        try:
            response = self.session.get(
                self.base_url,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise RetrievalFailure(f"Failed to fetch events: {e}") from e
        except ValueError as e:
            raise RetrievalFailure(f"Events API returned invalid JSON: {e}") from e

        records = data.get("events", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise RetrievalFailure("Events API returned an unexpected payload")

        events = parse_events(records)

        logger.info(
            "Fetched %d events (%d records)",
            len(events),
            len(records),
        )

        return events
