from __future__ import annotations

import math
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points, treating Earth as a sphere."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def distance_km(
    lat: Optional[float], lng: Optional[float],
    ev_lat: Optional[float], ev_lng: Optional[float],
) -> Optional[float]:
    if None in (lat, lng, ev_lat, ev_lng):
        return None
    return round(haversine_km(lat, lng, ev_lat, ev_lng), 1)
