from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable

from .transit import TripRef


class EventPhase(str, Enum):
    DEPARTURE = "departure"
    ARRIVAL = "arrival"

    @property
    def sort_order(self) -> int:
        return 0 if self is EventPhase.DEPARTURE else 1


@dataclass(frozen=True, slots=True)
class StopEvent:
    time_s: int  # epoch seconds
    phase: EventPhase
    trip: TripRef

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.phase.sort_order, self.time_s)


@dataclass(frozen=True, slots=True)
class DuplicateDeparture:
    """Two boarding edges of one stop yielded a departure at the same instant.

    Usually points at overlapping or duplicated edges in the graph.
    """

    agency_id: str
    stop_id: str
    time_s: int
    trip: TripRef
    first_edge: Hashable
    second_edge: Hashable


@dataclass(frozen=True, slots=True)
class StopEventsResult:
    events: tuple[StopEvent, ...]
    start_s: int  # resolved query window, epoch seconds
    end_s: int
    duplicates: tuple[DuplicateDeparture, ...] = ()
    route_ids: frozenset[str] = field(default_factory=frozenset)
