#!/usr/bin/env python3
"""
Geographic positions and great-circle distance calculation.
"""

from typing import NamedTuple, Union
import math

# Mean earth radius in meters (spherical model)
EARTH_RADIUS_M = 6371000.0


class Position(NamedTuple):
    """Represents a geographic position with latitude and longitude."""

    latitude: float
    longitude: float


class ReferencePoint(NamedTuple):
    """A fixed location that nearest vehicle positions are searched around."""

    label: Union[int, str]
    latitude: float
    longitude: float

    @property
    def position(self) -> Position:
        return Position(self.latitude, self.longitude)


def haversine_distance(origin: Position, target: Position) -> float:
    """
    Calculate the great circle distance between two positions.

    The earth is treated as a sphere of radius EARTH_RADIUS_M. The result is
    only symmetric up to floating point rounding, so callers that need
    reproducible output should always pass the vehicle position as origin
    and the reference point as target.

    Args:
        origin: First position
        target: Second position

    Returns:
        Distance in meters
    """
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    dlat = math.radians(target.latitude - origin.latitude)
    dlon = math.radians(target.longitude - origin.longitude)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push a slightly outside [0, 1]
    a = min(1.0, max(0.0, a))

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c
