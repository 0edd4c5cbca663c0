from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Sequence

from src.domain.exceptions import QueryCancelled
from src.domain.models import (
    GeoPoint,
    HopProjection,
    RouteVariant,
    ServiceDay,
    TripMatch,
    TripTimes,
)

if TYPE_CHECKING:
    from src.app.ports.output import IGeometryService

DEFAULT_MAX_RESULTS = 10
MIN_HOP_DURATION_S = 30
MAX_TIME_DELTA_S = 86400
DEGENERATE_LENGTH_M = 0.01


@dataclass(frozen=True, slots=True)
class LocatorParams:
    # Recorded hop durations of 0 usually mean times rounded to the minute.
    min_hop_duration_s: int = MIN_HOP_DURATION_S
    max_time_delta_s: int = MAX_TIME_DELTA_S
    degenerate_length_m: float = DEGENERATE_LENGTH_M


def project_variant(
    variant: RouteVariant,
    position: GeoPoint,
    geometry: IGeometryService,
    *,
    degenerate_length_m: float = DEGENERATE_LENGTH_M,
) -> tuple[HopProjection, ...]:
    """Distance to, fraction along and length of every hop of a variant."""

    out: list[HopProjection] = []
    for hop in variant.hops:
        distance_m = geometry.distance_m(position, hop.geometry)
        before, _ = geometry.split_at_closest_point(hop.geometry, position)
        length_m = geometry.length_m(hop.geometry)
        covered_m = geometry.length_m(before)
        fraction = covered_m / length_m if length_m > degenerate_length_m else 0.0
        out.append(
            HopProjection(distance_m=distance_m, fraction=fraction, length_m=length_m)
        )
    return tuple(out)


def match_trip(
    trip_times: TripTimes,
    projections: Sequence[HopProjection],
    service_days: Iterable[ServiceDay],
    observed_s: int,
    params: LocatorParams = LocatorParams(),
) -> TripMatch | None:
    """Score one trip against an observed position and time.

    For each running service day and hop, the time disagreement is converted
    to meters using the hop's scheduled speed and added to the distance to
    the hop: factor = dT * speed + dL. The best (lowest) factor wins.
    """

    best_factor = math.inf
    best_dt = math.inf
    best_dl = math.inf

    for sd in service_days:
        if not sd.service_running(trip_times.trip.service_id):
            continue
        for hop, proj in enumerate(projections):
            dep_s = trip_times.departure_offsets_s[hop]
            hop_s = trip_times.arrival_offsets_s[hop] - dep_s
            speed_mps = proj.length_m / max(hop_s, params.min_hop_duration_s)
            expected_s = sd.resolve(dep_s + math.floor(hop_s * proj.fraction + 0.5))
            dt = abs(expected_s - observed_s)
            factor = dt * speed_mps + proj.distance_m
            if factor < best_factor:
                best_factor = factor
                best_dt = dt
                best_dl = proj.distance_m

    if math.isinf(best_factor) or best_dt >= params.max_time_delta_s:
        return None
    return TripMatch(
        trip=trip_times.trip,
        match_distance_m=float(best_dl),
        match_time_s=float(best_dt),
        match_factor=float(best_factor),
    )


def match_trips_for_variant(
    variant: RouteVariant,
    position: GeoPoint,
    observed_s: int,
    service_days: Sequence[ServiceDay],
    geometry: IGeometryService,
    params: LocatorParams = LocatorParams(),
    *,
    cancelled: Callable[[], bool] | None = None,
) -> list[TripMatch]:
    projections = project_variant(
        variant, position, geometry, degenerate_length_m=params.degenerate_length_m
    )

    matches: list[TripMatch] = []
    processed: set[tuple[str, str]] = set()
    for trip_times in variant.trips:
        if cancelled is not None and cancelled():
            raise QueryCancelled(f"Trip matching cancelled on variant {variant.name}")
        if trip_times.trip.key in processed:
            continue
        processed.add(trip_times.trip.key)
        match = match_trip(trip_times, projections, service_days, observed_s, params)
        if match is not None:
            matches.append(match)
    return matches


def rank_matches(matches: list[TripMatch], max_results: int) -> list[TripMatch]:
    """Sort by match factor and truncate.

    The sort is stable, so equal factors keep discovery order.
    """

    ranked = sorted(matches, key=lambda m: m.match_factor)
    return ranked[:max_results]


def locate_trips(
    variants: Iterable[RouteVariant],
    position: GeoPoint,
    observed_s: int,
    service_days: Sequence[ServiceDay],
    geometry: IGeometryService,
    *,
    max_results: int = DEFAULT_MAX_RESULTS,
    params: LocatorParams = LocatorParams(),
    cancelled: Callable[[], bool] | None = None,
) -> list[TripMatch]:
    matches: list[TripMatch] = []
    for variant in variants:
        matches.extend(
            match_trips_for_variant(
                variant,
                position,
                observed_s,
                service_days,
                geometry,
                params,
                cancelled=cancelled,
            )
        )
    return rank_matches(matches, max_results)
