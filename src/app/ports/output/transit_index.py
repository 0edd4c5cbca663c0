from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from src.domain.models import RouteVariant, Stop

from .traversal_engine import TransitEdge


class ITransitIndex(ABC):
    """Read-only lookups over one transit graph snapshot."""

    @abstractmethod
    def agency_ids(self) -> tuple[str, ...]:
        raise NotImplementedError

    @abstractmethod
    def board_edges(self, agency_id: str, stop_id: str) -> Sequence[TransitEdge] | None:
        """Edges leaving the stop's boarding point; None if the stop has none."""

    @abstractmethod
    def alight_edges(self, agency_id: str, stop_id: str) -> Sequence[TransitEdge] | None:
        """Edges entering the stop's alighting point; None if the stop has none."""

    @abstractmethod
    def variants_for_route(self, agency_id: str, route_id: str) -> tuple[RouteVariant, ...]:
        raise NotImplementedError

    @abstractmethod
    def variant_for_trip(self, agency_id: str, trip_id: str) -> RouteVariant | None:
        raise NotImplementedError

    @abstractmethod
    def routes_for_stop(self, agency_id: str, stop_id: str) -> tuple[str, ...]:
        raise NotImplementedError

    @abstractmethod
    def stops(self) -> Sequence[Stop]:
        raise NotImplementedError
