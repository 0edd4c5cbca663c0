from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from src.app.ports.output import ICalendarService, IGeometryService, ITransitIndex
from src.app.services.settings import QuerySettings
from src.domain.algorithms.service_days import resolve_service_days
from src.domain.algorithms.trip_locator import locate_trips, rank_matches
from src.domain.exceptions import InvalidQuery, UnknownStopOrRoute
from src.domain.models import GeoPoint, TripMatch


@dataclass(slots=True)
class TripLocatorService:
    """Finds which trips of a route a vehicle at a position/time is likely running."""

    transit_index: ITransitIndex
    calendar: ICalendarService
    geometry: IGeometryService
    settings: QuerySettings = field(default_factory=QuerySettings)

    def locate_trip(
        self,
        *,
        route_id: str,
        lat: float,
        lon: float,
        time_s: int | None = None,
        max_results: int | None = None,
        agency_id: str | None = None,
        cancelled: Callable[[], bool] | None = None,
    ) -> list[TripMatch]:
        if time_s is None:
            time_s = int(time.time())
        if max_results is None:
            max_results = self.settings.default_max_results
        if max_results < 1:
            raise InvalidQuery(f"max_results must be positive, got {max_results}")

        position = GeoPoint(lat=lat, lon=lon)
        agencies = (agency_id,) if agency_id else self.transit_index.agency_ids()

        # Brute force: a route only has a handful of variants.
        matches: list[TripMatch] = []
        found = False
        for agency in agencies:
            variants = self.transit_index.variants_for_route(agency, route_id)
            if not variants:
                continue
            found = True
            service_days = resolve_service_days(time_s, agency, self.calendar)
            matches.extend(
                locate_trips(
                    variants,
                    position,
                    time_s,
                    service_days,
                    self.geometry,
                    max_results=max_results,
                    params=self.settings.locator_params,
                    cancelled=cancelled,
                )
            )

        if not found:
            raise UnknownStopOrRoute(f"Unknown route: {route_id}")
        return rank_matches(matches, max_results)
