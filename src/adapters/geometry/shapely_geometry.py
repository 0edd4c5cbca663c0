"""Line geometry on a local equirectangular projection using Shapely."""

from __future__ import annotations

import math
from dataclasses import dataclass

from shapely.geometry import LineString, Point
from shapely.ops import substring

from src.app.ports.output import IGeometryService, Polyline
from src.domain.algorithms.geo_utils import polyline_distance_m
from src.domain.models import GeoPoint

M_PER_DEG_LAT = 111_320.0


@dataclass(frozen=True, slots=True)
class _LocalProjection:
    """Meters east/north of a reference latitude; accurate at city scale."""

    ref_lat: float

    @property
    def m_per_deg_lon(self) -> float:
        return M_PER_DEG_LAT * math.cos(math.radians(self.ref_lat))

    def to_xy(self, p: GeoPoint) -> tuple[float, float]:
        return (p.lon * self.m_per_deg_lon, p.lat * M_PER_DEG_LAT)

    def to_geo(self, x: float, y: float) -> GeoPoint:
        return GeoPoint(lat=y / M_PER_DEG_LAT, lon=x / self.m_per_deg_lon)


def _as_linestring(line: Polyline, proj: _LocalProjection) -> LineString | None:
    coords = [proj.to_xy(p) for p in line]
    if len(coords) == 1:
        coords = coords * 2
    if len(coords) < 2:
        return None
    return LineString(coords)


@dataclass(slots=True)
class ShapelyGeometryService(IGeometryService):
    def distance_m(self, point: GeoPoint, line: Polyline) -> float:
        proj = _LocalProjection(ref_lat=point.lat)
        ls = _as_linestring(line, proj)
        if ls is None:
            return math.inf
        return float(ls.distance(Point(proj.to_xy(point))))

    def length_m(self, line: Polyline) -> float:
        return polyline_distance_m(line)

    def split_at_closest_point(
        self, line: Polyline, point: GeoPoint
    ) -> tuple[Polyline, Polyline]:
        proj = _LocalProjection(ref_lat=point.lat)
        ls = _as_linestring(line, proj)
        if ls is None:
            return ((), ())

        d = float(ls.project(Point(proj.to_xy(point))))
        return (
            self._to_polyline(substring(ls, 0.0, d), proj),
            self._to_polyline(substring(ls, d, ls.length), proj),
        )

    @staticmethod
    def _to_polyline(geom, proj: _LocalProjection) -> Polyline:
        # substring() collapses zero-length pieces to a Point.
        if geom.geom_type == "Point":
            p = proj.to_geo(geom.x, geom.y)
            return (p, p)
        return tuple(proj.to_geo(x, y) for x, y in geom.coords)
