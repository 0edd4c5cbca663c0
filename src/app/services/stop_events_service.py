from __future__ import annotations

from dataclasses import dataclass, field

from src.app.ports.output import ICalendarService, ITransitIndex, ITraversalEngine
from src.app.services.settings import QuerySettings
from src.domain.algorithms.service_days import resolve_service_days
from src.domain.algorithms.stop_events import (
    StopEdges,
    check_window,
    enumerate_stop_events,
)
from src.domain.algorithms.trip_schedule import subsequent_stop_times
from src.domain.exceptions import InvalidQuery, TripNotFound, UnknownStopOrRoute
from src.domain.models import StopEventsResult, TripStopTime


def _optional_tuple(edges) -> tuple | None:
    return tuple(edges) if edges is not None else None


@dataclass(slots=True)
class StopEventsService:
    """Application service (use case) for stop departure/arrival boards."""

    transit_index: ITransitIndex
    traversal_engine: ITraversalEngine
    calendar: ICalendarService
    settings: QuerySettings = field(default_factory=QuerySettings)

    def _agencies(self, agency_id: str | None) -> tuple[str, ...]:
        if agency_id:
            return (agency_id,)
        return self.transit_index.agency_ids()

    def stop_events(
        self,
        *,
        stop_id: str,
        start_ms: int,
        end_ms: int | None = None,
        agency_id: str | None = None,
        route_id: str | None = None,
    ) -> StopEventsResult:
        start_s = int(start_ms) // 1000
        if end_ms is None:
            end_s = start_s + self.settings.default_window_s
        else:
            end_s = int(end_ms) // 1000
        if end_s < start_s:
            raise InvalidQuery(f"End time {end_s} is before start time {start_s}")
        check_window(start_s, end_s, max_interval_s=self.settings.max_stop_time_interval_s)

        # A stop code may legitimately be missing from some agencies.
        stops: list[StopEdges] = []
        for agency in self._agencies(agency_id):
            board = self.transit_index.board_edges(agency, stop_id)
            alight = self.transit_index.alight_edges(agency, stop_id)
            if board is None and alight is None:
                continue
            stops.append(
                StopEdges(
                    agency_id=agency,
                    stop_id=stop_id,
                    board=_optional_tuple(board),
                    alight=_optional_tuple(alight),
                )
            )
        if not stops:
            raise UnknownStopOrRoute(f"Unknown stop: {stop_id}")

        trip_filter = (lambda trip: trip.route_id == route_id) if route_id else None
        return enumerate_stop_events(
            self.traversal_engine,
            stops,
            start_s,
            end_s,
            trip_filter=trip_filter,
            max_interval_s=self.settings.max_stop_time_interval_s,
        )

    def stop_times_for_trip(
        self,
        *,
        agency_id: str,
        trip_id: str,
        time_ms: int,
        first_stop_id: str | None = None,
    ) -> list[TripStopTime]:
        variant = self.transit_index.variant_for_trip(agency_id, trip_id)
        if variant is None:
            raise TripNotFound(f"Unknown trip: {agency_id}:{trip_id}")

        time_s = int(time_ms) // 1000
        service_days = resolve_service_days(time_s, agency_id, self.calendar)
        return subsequent_stop_times(
            variant, trip_id, time_s, service_days, first_stop_id=first_stop_id
        )
