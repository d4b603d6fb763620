# geo.py
from __future__ import annotations

import math
from typing import Optional

from .domain.models import GeoLocation

EARTH_RADIUS_KM = 6371.0


def _degrees(value: Optional[float]) -> float:
    """Absent coordinates count as 0 degrees."""
    return float(value) if value else 0.0


def distance(
    lat1: Optional[float],
    lon1: Optional[float],
    lat2: Optional[float],
    lon2: Optional[float],
) -> float:
    """Great-circle distance in meters between two points (Haversine)."""
    lat1, lon1 = _degrees(lat1), _degrees(lon1)
    lat2, lon2 = _degrees(lat2), _degrees(lon2)

    delta_lat = math.radians(lat1 - lat2)
    delta_lon = math.radians(lon1 - lon2)

    # Square of half the chord length between the points
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(delta_lon / 2) ** 2
    )
    a = min(a, 1.0)
    # Angular distance in radians
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c * 1000


def distance_between(a: GeoLocation, b: GeoLocation) -> float:
    return distance(a.latitude, a.longitude, b.latitude, b.longitude)


def within_radius(origin: GeoLocation, point: GeoLocation, radius_m: float) -> bool:
    """True unless the point lies strictly beyond the radius."""
    return distance_between(origin, point) <= radius_m
