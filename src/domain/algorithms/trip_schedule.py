from __future__ import annotations

from typing import Iterable

from src.domain.exceptions import TripNotFound
from src.domain.models import (
    EventPhase,
    RouteVariant,
    ServiceDay,
    TripStopTime,
    TripTimes,
)


def find_trip_times(variant: RouteVariant, trip_id: str) -> TripTimes | None:
    for tt in variant.trips:
        if tt.trip.trip_id == trip_id:
            return tt
    return None


def subsequent_stop_times(
    variant: RouteVariant,
    trip_id: str,
    after_s: int,
    service_days: Iterable[ServiceDay],
    *,
    first_stop_id: str | None = None,
) -> list[TripStopTime]:
    """Stop times of the next run of a trip departing first_stop_id at or after after_s.

    The first entry is the departure from first_stop_id (default: the
    trip's first stop); every later stop contributes its arrival.
    """

    tt = find_trip_times(variant, trip_id)
    if tt is None:
        raise TripNotFound(f"Trip {trip_id} not on variant {variant.name}")

    if first_stop_id is None:
        start_index = 0
    else:
        try:
            start_index = variant.stop_ids.index(first_stop_id)
        except ValueError as exc:
            raise TripNotFound(
                f"Trip {trip_id} does not call at stop {first_stop_id}"
            ) from exc

    dep_offset = tt.departure_at_stop(start_index)
    if dep_offset is None:
        raise TripNotFound(f"Trip {trip_id} does not depart from stop {first_stop_id}")

    best: ServiceDay | None = None
    best_dep_s: int | None = None
    for sd in service_days:
        if not sd.service_running(tt.trip.service_id):
            continue
        if sd.seconds_since_midnight(after_s) > dep_offset:
            continue
        dep_s = sd.resolve(dep_offset)
        if best_dep_s is None or dep_s < best_dep_s:
            best = sd
            best_dep_s = dep_s

    if best is None or best_dep_s is None:
        raise TripNotFound(f"No scheduled run of trip {trip_id} after {after_s}")

    out = [
        TripStopTime(
            stop_id=variant.stop_ids[start_index],
            time_s=best_dep_s,
            phase=EventPhase.DEPARTURE,
        )
    ]
    for idx in range(start_index + 1, len(variant.stop_ids)):
        arr_offset = tt.arrival_at_stop(idx)
        if arr_offset is None:
            continue
        out.append(
            TripStopTime(
                stop_id=variant.stop_ids[idx],
                time_s=best.resolve(arr_offset),
                phase=EventPhase.ARRIVAL,
            )
        )
    return out
