from __future__ import annotations

import math
from collections.abc import Sequence

from llegapo.domain.models import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in kilometers."""

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_KM * math.asin(math.sqrt(s))


def path_length_km(path: Sequence[GeoPoint]) -> float:
    """Sum of consecutive segment distances, rounded to 2 decimals."""

    if len(path) < 2:
        return 0.0

    total = 0.0
    for i in range(1, len(path)):
        total += haversine_distance_km(path[i - 1], path[i])
    return round(total, 2)
