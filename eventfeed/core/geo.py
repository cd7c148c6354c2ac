"""Geographic calculations - Pure functions.

This module provides distance calculations between event venues and a
reference location. All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass

from eventfeed.core.event import Event


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """A (latitude, longitude) pair in decimal degrees."""
    latitude: float
    longitude: float


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push a slightly outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_to(event: Event, reference: Coordinate) -> float:
    """Calculate distance from a reference point to an event venue.

    Pure function.

    Returns:
        Distance in kilometers
    """
    return calculate_distance(
        reference.latitude,
        reference.longitude,
        event.latitude,
        event.longitude,
    )


def is_within_radius(
    event: Event,
    center: Coordinate,
    radius_km: float,
) -> bool:
    """Check if an event venue is within a radius of a point.

    Pure function.

    Args:
        event: Event to check
        center: Center point
        radius_km: Radius in kilometers

    Returns:
        True if the venue is within radius
    """
    return distance_to(event, center) <= radius_km
