from __future__ import annotations

import math

from src.domain.models import GeoPoint


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""

    r = 6371000.0
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
    return 2.0 * r * math.asin(math.sqrt(s))


def polyline_distance_m(points: tuple[GeoPoint, ...]) -> float:
    if len(points) < 2:
        return 0.0
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += float(haversine_distance_m(a, b))
    return float(total)


def nearest_index(points: tuple[GeoPoint, ...], target: GeoPoint) -> int:
    best_i = 0
    best_d = float("inf")
    for i, p in enumerate(points):
        d = float(haversine_distance_m(p, target))
        if d < best_d:
            best_d = d
            best_i = i
    return best_i


def slice_polyline_between_points(
    points: tuple[GeoPoint, ...], *, start: GeoPoint, end: GeoPoint, from_index: int = 0
) -> tuple[tuple[GeoPoint, ...], int]:
    """Return the polyline segment between start and end, and where it ended.

    Start/end are snapped to the nearest shape vertices at or after
    from_index, so consecutive stops of a looping shape slice forward. The
    returned polyline begins at start and ends at end.
    """

    if len(points) < 2 or from_index >= len(points):
        return (start, end), from_index

    tail = points[from_index:]
    i0 = from_index + nearest_index(tail, start)
    i1 = i0 + nearest_index(points[i0:], end)
    if i0 == i1:
        return (start, end), i1

    seg = list(points[i0 : i1 + 1])
    seg[0] = start
    seg[-1] = end
    return tuple(seg), i1
