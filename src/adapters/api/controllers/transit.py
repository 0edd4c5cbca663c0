from __future__ import annotations

import time

from fastapi import APIRouter, Depends, Query

from src.adapters.api.dependencies import (
    get_stop_events_service,
    get_transit_index_service,
    get_trip_locator_service,
)
from src.adapters.api.schemas.transit import (
    DuplicateDepartureSchema,
    GeoPointSchema,
    RoutesForStopSchema,
    StopEventSchema,
    StopEventsResponseSchema,
    StopSchema,
    TripMatchesSchema,
    TripMatchSchema,
    TripSchema,
    TripStopTimeSchema,
    TripStopTimesSchema,
    VariantSchema,
)
from src.app.services.stop_events_service import StopEventsService
from src.app.services.transit_index_service import TransitIndexQueryService
from src.app.services.trip_locator_service import TripLocatorService
from src.domain.models import TripRef

router = APIRouter(prefix="/transit", tags=["transit"])


def _trip_to_schema(trip: TripRef) -> TripSchema:
    return TripSchema(
        agency_id=trip.agency_id,
        trip_id=trip.trip_id,
        route_id=trip.route_id,
        service_id=trip.service_id,
        headsign=trip.headsign,
    )


@router.get("/stops/near", response_model=list[StopSchema])
def stops_near_point(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lon: float = Query(..., ge=-180.0, le=180.0),
    radius_m: float | None = None,
    agency: str | None = None,
    service: TransitIndexQueryService = Depends(get_transit_index_service),
) -> list[StopSchema]:
    return [
        StopSchema(
            stop_id=stop.id,
            agency_id=stop.agency_id,
            name=stop.name,
            code=stop.code,
            location=GeoPointSchema(lat=stop.location.lat, lon=stop.location.lon),
            distance_m=d,
        )
        for d, stop in service.stops_near_point(
            lat=lat, lon=lon, radius_m=radius_m, agency_id=agency
        )
    ]


@router.get("/stops/{stop_id}/stop-times", response_model=StopEventsResponseSchema)
def stop_times_for_stop(
    stop_id: str,
    start_ms: int,
    end_ms: int | None = None,
    agency: str | None = None,
    route_id: str | None = None,
    references: bool = False,
    service: StopEventsService = Depends(get_stop_events_service),
) -> StopEventsResponseSchema:
    result = service.stop_events(
        stop_id=stop_id,
        start_ms=start_ms,
        end_ms=end_ms,
        agency_id=agency,
        route_id=route_id or None,
    )
    return StopEventsResponseSchema(
        stop_id=stop_id,
        start_s=result.start_s,
        end_s=result.end_s,
        events=[
            StopEventSchema(
                time_s=ev.time_s, phase=ev.phase.value, trip=_trip_to_schema(ev.trip)
            )
            for ev in result.events
        ],
        duplicates=[
            DuplicateDepartureSchema(
                agency_id=d.agency_id,
                stop_id=d.stop_id,
                time_s=d.time_s,
                trip_id=d.trip.trip_id,
            )
            for d in result.duplicates
        ],
        route_ids=sorted(result.route_ids) if references else None,
    )


@router.get("/stops/{stop_id}/routes", response_model=RoutesForStopSchema)
def routes_for_stop(
    stop_id: str,
    agency: str | None = None,
    service: TransitIndexQueryService = Depends(get_transit_index_service),
) -> RoutesForStopSchema:
    route_ids = service.routes_for_stop(stop_id=stop_id, agency_id=agency)
    return RoutesForStopSchema(stop_id=stop_id, route_ids=list(route_ids))


@router.get("/trips/{trip_id}/stop-times", response_model=TripStopTimesSchema)
def stop_times_for_trip(
    trip_id: str,
    agency: str,
    time_ms: int | None = None,
    stop_id: str | None = None,
    service: StopEventsService = Depends(get_stop_events_service),
) -> TripStopTimesSchema:
    if time_ms is None:
        time_ms = int(time.time() * 1000)
    stop_times = service.stop_times_for_trip(
        agency_id=agency, trip_id=trip_id, time_ms=time_ms, first_stop_id=stop_id
    )
    return TripStopTimesSchema(
        agency_id=agency,
        trip_id=trip_id,
        stop_times=[
            TripStopTimeSchema(stop_id=st.stop_id, time_s=st.time_s, phase=st.phase.value)
            for st in stop_times
        ],
    )


@router.get("/trips/{trip_id}/variant", response_model=VariantSchema)
def variant_for_trip(
    trip_id: str,
    agency: str,
    service: TransitIndexQueryService = Depends(get_transit_index_service),
) -> VariantSchema:
    variant = service.variant_for_trip(agency_id=agency, trip_id=trip_id)
    return VariantSchema(
        name=variant.name,
        agency_id=variant.agency_id,
        route_id=variant.route_id,
        stop_ids=list(variant.stop_ids),
        n_hops=variant.n_hops,
        n_trips=len(variant.trips),
    )


@router.get("/routes/{route_id}/trips-at-position", response_model=TripMatchesSchema)
def trips_at_position(
    route_id: str,
    lat: float = Query(..., ge=-90.0, le=90.0),
    lon: float = Query(..., ge=-180.0, le=180.0),
    time_s: int | None = None,
    max_results: int | None = Query(default=None, ge=1),
    agency: str | None = None,
    service: TripLocatorService = Depends(get_trip_locator_service),
) -> TripMatchesSchema:
    if time_s is None:
        time_s = int(time.time())
    matches = service.locate_trip(
        route_id=route_id,
        lat=lat,
        lon=lon,
        time_s=time_s,
        max_results=max_results,
        agency_id=agency,
    )
    return TripMatchesSchema(
        route_id=route_id,
        time_s=time_s,
        matches=[
            TripMatchSchema(
                trip=_trip_to_schema(m.trip),
                match_distance_m=m.match_distance_m,
                match_time_s=m.match_time_s,
                match_factor=m.match_factor,
            )
            for m in matches
        ],
    )
