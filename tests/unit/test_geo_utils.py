from __future__ import annotations

from llegapo.domain.algorithms.geo_utils import haversine_distance_km, path_length_km
from llegapo.domain.models.geo import GeoPoint


def test_haversine_zero_for_identical_points() -> None:
    p = GeoPoint(lat=-33.45, lon=-70.66)
    assert haversine_distance_km(p, p) == 0.0


def test_haversine_is_symmetric_and_reasonable_scale() -> None:
    # Rough sanity check: 1 degree of latitude is about 111km.
    a = GeoPoint(lat=0.0, lon=0.0)
    b = GeoPoint(lat=1.0, lon=0.0)

    d1 = haversine_distance_km(a, b)
    d2 = haversine_distance_km(b, a)

    assert abs(d1 - d2) < 1e-9
    assert 110.0 < d1 < 112.0


def test_path_length_sums_segments() -> None:
    path = (
        GeoPoint(lat=0.0, lon=0.0),
        GeoPoint(lat=1.0, lon=0.0),
        GeoPoint(lat=2.0, lon=0.0),
    )
    single = haversine_distance_km(path[0], path[1])

    assert path_length_km(path) == round(2 * single, 2)


def test_path_length_needs_two_points() -> None:
    assert path_length_km(()) == 0.0
    assert path_length_km((GeoPoint(lat=-33.4, lon=-70.6),)) == 0.0
