from __future__ import annotations

from dataclasses import dataclass

LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)


def in_range(lat: float, lon: float) -> bool:
    return LAT_RANGE[0] <= lat <= LAT_RANGE[1] and LON_RANGE[0] <= lon <= LON_RANGE[1]


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """WGS84 coordinate in decimal degrees."""

    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not in_range(self.lat, self.lon):
            raise ValueError(f"Coordinate out of range: lat={self.lat} lon={self.lon}")
