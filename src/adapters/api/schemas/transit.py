from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class TripSchema(BaseModel):
    agency_id: str
    trip_id: str
    route_id: str
    service_id: str
    headsign: str | None = None


class StopEventSchema(BaseModel):
    time_s: int
    phase: Literal["departure", "arrival"]
    trip: TripSchema


class DuplicateDepartureSchema(BaseModel):
    agency_id: str
    stop_id: str
    time_s: int
    trip_id: str


class StopEventsResponseSchema(BaseModel):
    stop_id: str
    start_s: int
    end_s: int
    events: list[StopEventSchema]
    duplicates: list[DuplicateDepartureSchema] = []
    route_ids: list[str] | None = None


class TripStopTimeSchema(BaseModel):
    stop_id: str
    time_s: int
    phase: Literal["departure", "arrival"]


class TripStopTimesSchema(BaseModel):
    agency_id: str
    trip_id: str
    stop_times: list[TripStopTimeSchema]


class TripMatchSchema(BaseModel):
    trip: TripSchema
    match_distance_m: float
    match_time_s: float
    match_factor: float


class TripMatchesSchema(BaseModel):
    route_id: str
    time_s: int
    matches: list[TripMatchSchema]


class StopSchema(BaseModel):
    stop_id: str
    agency_id: str
    name: str
    code: str | None = None
    location: GeoPointSchema
    distance_m: float | None = None


class RoutesForStopSchema(BaseModel):
    stop_id: str
    route_ids: list[str]


class VariantSchema(BaseModel):
    name: str
    agency_id: str
    route_id: str
    stop_ids: list[str]
    n_hops: int
    n_trips: int
