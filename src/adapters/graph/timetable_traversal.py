from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from src.app.ports.output import ICalendarService, ITraversalEngine
from src.domain.algorithms.service_days import resolve_service_days
from src.domain.models import TripRef

from .transit_graph import AlightEdge, BoardEdge, TransitGraph


@dataclass(frozen=True, slots=True)
class TimetableState:
    time_s: int
    back_trip: TripRef | None = None
    arrive_by: bool = False


@dataclass(slots=True)
class TimetableTraversalEngine(ITraversalEngine):
    """Schedule-based traversal of board/alight edges.

    Boarding forward finds the earliest departure at or after the state's
    time; alighting in arrive-by mode finds the latest arrival at or before
    it. Both look at yesterday/today/tomorrow service days.
    """

    transit_graph: TransitGraph
    calendar: ICalendarService

    def start_state(
        self, edge: Hashable, time_s: int, *, arrive_by: bool = False
    ) -> TimetableState:
        return TimetableState(time_s=int(time_s), arrive_by=arrive_by)

    def traverse(self, edge: Hashable, state: TimetableState) -> TimetableState | None:
        if isinstance(edge, BoardEdge):
            if state.arrive_by:
                return None
            return self._next_departure(edge, state)
        if isinstance(edge, AlightEdge):
            if not state.arrive_by:
                return None
            return self._previous_arrival(edge, state)
        raise ValueError(f"Unsupported edge type: {type(edge).__name__}")

    def _next_departure(self, edge: BoardEdge, state: TimetableState) -> TimetableState | None:
        variant = self.transit_graph.variants_by_name[edge.variant_name]
        best: tuple[int, TripRef] | None = None
        for sd in resolve_service_days(state.time_s, variant.agency_id, self.calendar):
            for tt in variant.trips:
                if not sd.service_running(tt.trip.service_id):
                    continue
                offset = tt.departure_at_stop(edge.stop_index)
                if offset is None:
                    continue
                dep_s = sd.resolve(offset)
                if dep_s >= state.time_s and (best is None or dep_s < best[0]):
                    best = (dep_s, tt.trip)

        if best is None:
            return None
        return TimetableState(time_s=best[0], back_trip=best[1], arrive_by=False)

    def _previous_arrival(
        self, edge: AlightEdge, state: TimetableState
    ) -> TimetableState | None:
        variant = self.transit_graph.variants_by_name[edge.variant_name]
        best: tuple[int, TripRef] | None = None
        for sd in resolve_service_days(state.time_s, variant.agency_id, self.calendar):
            for tt in variant.trips:
                if not sd.service_running(tt.trip.service_id):
                    continue
                offset = tt.arrival_at_stop(edge.stop_index)
                if offset is None:
                    continue
                arr_s = sd.resolve(offset)
                if arr_s <= state.time_s and (best is None or arr_s > best[0]):
                    best = (arr_s, tt.trip)

        if best is None:
            return None
        return TimetableState(time_s=best[0], back_trip=best[1], arrive_by=True)
