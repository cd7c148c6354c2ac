"""Location providers - Imperative Shell.

Resolve the user's current position for distance filtering and ordering.
Any failure is reported as LocationUnavailable; callers treat that the
same as a user who never set a location.
"""

import logging

import requests

from eventfeed.core.config import Config
from eventfeed.core.errors import LocationUnavailable
from eventfeed.core.geo import Coordinate


logger = logging.getLogger(__name__)


# Default timeout for lookup requests (seconds)
DEFAULT_TIMEOUT = 10


class StaticLocationProvider:
    """Provider returning a fixed, configured location."""

    def __init__(self, coordinate: Coordinate | None = None) -> None:
        self.coordinate = coordinate

    def current_location(self) -> Coordinate:
        """Return the configured location.

        Raises:
            LocationUnavailable: If no location is configured
        """
        if self.coordinate is None:
            raise LocationUnavailable("No location configured")
        return self.coordinate


class IPLocationClient:
    """Approximate location lookup from the caller's IP address.

    This is part of the imperative shell - it handles HTTP I/O. The
    endpoint must answer with a JSON object carrying "latitude" and
    "longitude" (ipapi.co style).
    """

    def __init__(
        self,
        url: str = "https://ipapi.co/json/",
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout

    def current_location(self) -> Coordinate:
        """Look up the current location.

        This method performs HTTP I/O.

        Returns:
            Approximate coordinate

        Raises:
            LocationUnavailable: If the lookup fails or returns no position
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise LocationUnavailable(f"Location lookup failed: {e}") from e
        except ValueError as e:
            raise LocationUnavailable(f"Location lookup returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or data.get("error"):
            reason = data.get("reason", "unknown error") if isinstance(data, dict) else "bad payload"
            raise LocationUnavailable(f"Location lookup refused: {reason}")

        try:
            coordinate = Coordinate(
                latitude=float(data["latitude"]),
                longitude=float(data["longitude"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable("Location lookup returned no position") from e

        logger.info(
            "Resolved location %.4f, %.4f",
            coordinate.latitude,
            coordinate.longitude,
        )

        return coordinate


def create_location_provider(config: Config) -> StaticLocationProvider | IPLocationClient:
    """Build the location provider selected in configuration.

    'none' gives a static provider without a location, so every lookup
    reports LocationUnavailable.
    """
    if config.location_provider == "ip":
        return IPLocationClient(
            url=config.ip_location_url,
            timeout=config.request_timeout_seconds,
        )

    if config.location_provider == "static":
        return StaticLocationProvider(config.static_location)

    return StaticLocationProvider(None)
