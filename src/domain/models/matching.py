from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .events import EventPhase
from .transit import TripRef


@dataclass(frozen=True, slots=True)
class ServiceDay:
    """A calendar day local to an agency.

    ``time_base_s`` is the epoch instant GTFS offsets of this day count from
    (noon minus 12h, so it stays correct across DST switches).
    """

    day: date
    agency_id: str
    service_ids: frozenset[str]
    time_base_s: int

    def service_running(self, service_id: str) -> bool:
        return service_id in self.service_ids

    def resolve(self, offset_s: int) -> int:
        return self.time_base_s + int(offset_s)

    def seconds_since_midnight(self, epoch_s: int) -> int:
        return int(epoch_s) - self.time_base_s


@dataclass(frozen=True, slots=True)
class HopProjection:
    distance_m: float
    fraction: float
    length_m: float


@dataclass(frozen=True, slots=True)
class TripMatch:
    trip: TripRef
    match_distance_m: float
    match_time_s: float
    match_factor: float


@dataclass(frozen=True, slots=True)
class TripStopTime:
    stop_id: str
    time_s: int
    phase: EventPhase
