"""Geographic calculations - Pure functions.

This module provides distance calculations between the user and alert
locations. All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Position:
    """A WGS84 coordinate pair, in degrees.

    Replaced wholesale on every tracker update, never mutated.

    Attributes:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
    """
    latitude: float
    longitude: float

    def offset(self, delta_latitude: float, delta_longitude: float) -> "Position":
        """Return a new position shifted by the given deltas."""
        return Position(
            latitude=self.latitude + delta_latitude,
            longitude=self.longitude + delta_longitude,
        )

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


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
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push a marginally above 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: Position, b: Position) -> float:
    """Great-circle distance between two positions.

    Pure function. Symmetric, and zero when both positions are equal.

    Args:
        a: First position
        b: Second position

    Returns:
        Distance in kilometers (>= 0)
    """
    return calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def is_within_radius(
    position: Position,
    center: Position,
    radius_km: float,
) -> bool:
    """Check if a position is within a radius of a center point (inclusive).

    Pure function.
    """
    return distance_km(position, center) <= radius_km
