from __future__ import annotations

import math
from dataclasses import dataclass, field

from src.app.ports.output import ITransitIndex
from src.app.services.settings import QuerySettings
from src.domain.algorithms.geo_utils import haversine_distance_m
from src.domain.exceptions import TripNotFound, UnknownStopOrRoute
from src.domain.models import GeoPoint, RouteVariant, Stop


@dataclass(slots=True)
class TransitIndexQueryService:
    """Lookups around stops, routes and trips of the current graph."""

    transit_index: ITransitIndex
    settings: QuerySettings = field(default_factory=QuerySettings)

    def routes_for_stop(
        self, *, stop_id: str, agency_id: str | None = None
    ) -> tuple[str, ...]:
        agencies = (agency_id,) if agency_id else self.transit_index.agency_ids()
        route_ids: set[str] = set()
        known = False
        for agency in agencies:
            if (
                self.transit_index.board_edges(agency, stop_id) is None
                and self.transit_index.alight_edges(agency, stop_id) is None
            ):
                continue
            known = True
            route_ids.update(self.transit_index.routes_for_stop(agency, stop_id))
        if not known:
            raise UnknownStopOrRoute(f"Unknown stop: {stop_id}")
        return tuple(sorted(route_ids))

    def stops_near_point(
        self,
        *,
        lat: float,
        lon: float,
        radius_m: float | None = None,
        agency_id: str | None = None,
    ) -> list[tuple[float, Stop]]:
        if radius_m is None or math.isnan(radius_m) or radius_m <= 0:
            radius_m = self.settings.stop_search_radius_m

        point = GeoPoint(lat=lat, lon=lon)
        scored: list[tuple[float, Stop]] = []
        for stop in self.transit_index.stops():
            if agency_id and stop.agency_id != agency_id:
                continue
            d = haversine_distance_m(point, stop.location)
            if d <= radius_m:
                scored.append((d, stop))

        scored.sort(key=lambda x: (x[0], x[1].id))
        return scored

    def variant_for_trip(self, *, agency_id: str, trip_id: str) -> RouteVariant:
        variant = self.transit_index.variant_for_trip(agency_id, trip_id)
        if variant is None:
            raise TripNotFound(f"Unknown trip: {agency_id}:{trip_id}")
        return variant
