from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import GeoPoint

Polyline = tuple[GeoPoint, ...]


class IGeometryService(ABC):
    """Port for line geometry primitives (all distances in meters)."""

    @abstractmethod
    def distance_m(self, point: GeoPoint, line: Polyline) -> float:
        raise NotImplementedError

    @abstractmethod
    def length_m(self, line: Polyline) -> float:
        raise NotImplementedError

    @abstractmethod
    def split_at_closest_point(
        self, line: Polyline, point: GeoPoint
    ) -> tuple[Polyline, Polyline]:
        """Split line at the point closest to point; return (before, after)."""
