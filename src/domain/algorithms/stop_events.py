from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Hashable, Iterable, Iterator

from src.domain.exceptions import WindowTooLarge
from src.domain.models import (
    DuplicateDeparture,
    EventPhase,
    StopEvent,
    StopEventsResult,
    TripRef,
)

if TYPE_CHECKING:
    from src.app.ports.output import ITraversalEngine

logger = logging.getLogger(__name__)

MAX_STOP_TIME_QUERY_INTERVAL_S = 86400 * 2

TripFilter = Callable[[TripRef], bool]


@dataclass(frozen=True, slots=True)
class StopEdges:
    """Entry edges of one stop in one agency."""

    agency_id: str
    stop_id: str
    board: tuple[Hashable, ...] | None
    alight: tuple[Hashable, ...] | None


def check_window(
    start_s: int, end_s: int, *, max_interval_s: int = MAX_STOP_TIME_QUERY_INTERVAL_S
) -> None:
    if end_s - start_s > max_interval_s:
        raise WindowTooLarge(end_s - start_s, max_interval_s)


def iter_departures(
    engine: ITraversalEngine, edge: Hashable, start_s: int, end_s: int
) -> Iterator[StopEvent]:
    """Walk a boarding edge forward in time, one departure per step.

    After each hit the clock moves one second past it so the next search finds
    the next distinct departure.
    """

    time_s = start_s
    while True:
        result = engine.traverse(edge, engine.start_state(edge, time_s))
        if result is None:
            return
        time_s = result.time_s
        if time_s > end_s or result.back_trip is None:
            return
        yield StopEvent(time_s=time_s, phase=EventPhase.DEPARTURE, trip=result.back_trip)
        time_s += 1


def iter_arrivals(
    engine: ITraversalEngine, edge: Hashable, start_s: int, end_s: int
) -> Iterator[StopEvent]:
    """Walk an alighting edge backward in time, from end_s down to start_s."""

    time_s = end_s
    while True:
        result = engine.traverse(edge, engine.start_state(edge, time_s, arrive_by=True))
        if result is None:
            return
        time_s = result.time_s
        if time_s < start_s or result.back_trip is None:
            return
        yield StopEvent(time_s=time_s, phase=EventPhase.ARRIVAL, trip=result.back_trip)
        time_s -= 1


def enumerate_stop_events(
    engine: ITraversalEngine,
    stops: Iterable[StopEdges],
    start_s: int,
    end_s: int,
    *,
    trip_filter: TripFilter | None = None,
    max_interval_s: int = MAX_STOP_TIME_QUERY_INTERVAL_S,
) -> StopEventsResult:
    """Departures and arrivals at a stop within [start_s, end_s].

    Departures sort before arrivals, each group by time. A trip already seen
    departing is not reported again as an arrival. Stops lacking a boarding
    or alighting entry are skipped for that pass.
    """

    check_window(start_s, end_s, max_interval_s=max_interval_s)

    events: list[StopEvent] = []
    duplicates: list[DuplicateDeparture] = []
    route_ids: set[str] = set()
    departed: set[tuple[str, str]] = set()

    for stop in stops:
        seen: dict[int, Hashable] = {}
        for edge in stop.board or ():
            for ev in iter_departures(engine, edge, start_s, end_s):
                if trip_filter is not None and not trip_filter(ev.trip):
                    continue
                route_ids.add(ev.trip.route_id)
                events.append(ev)
                departed.add(ev.trip.key)

                first_edge = seen.get(ev.time_s)
                if first_edge is not None and first_edge != edge:
                    dup = DuplicateDeparture(
                        agency_id=stop.agency_id,
                        stop_id=stop.stop_id,
                        time_s=ev.time_s,
                        trip=ev.trip,
                        first_edge=first_edge,
                        second_edge=edge,
                    )
                    duplicates.append(dup)
                    logger.warning(
                        "Duplicate departure at stop",
                        extra={
                            "agency_id": stop.agency_id,
                            "stop_id": stop.stop_id,
                            "time_s": ev.time_s,
                            "trip_id": ev.trip.trip_id,
                        },
                    )
                seen[ev.time_s] = edge

        for edge in stop.alight or ():
            for ev in iter_arrivals(engine, edge, start_s, end_s):
                if ev.trip.key in departed:
                    continue
                if trip_filter is not None and not trip_filter(ev.trip):
                    continue
                route_ids.add(ev.trip.route_id)
                events.append(ev)

    events.sort(key=lambda e: e.sort_key)
    return StopEventsResult(
        events=tuple(events),
        start_s=start_s,
        end_s=end_s,
        duplicates=tuple(duplicates),
        route_ids=frozenset(route_ids),
    )
