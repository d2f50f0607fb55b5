"""Great-circle distance between coordinates."""

from __future__ import annotations

import math

from housemap.core.types import Coordinate

EARTH_RADIUS_METERS = 6_371_008.8


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Return the haversine distance in meters between two coordinates."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(h)))
