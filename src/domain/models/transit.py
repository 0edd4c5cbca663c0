from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class TripRef:
    """Stable identity of a scheduled trip, scoped by agency."""

    agency_id: str
    trip_id: str
    route_id: str
    service_id: str
    headsign: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.agency_id, self.trip_id)


@dataclass(frozen=True, slots=True)
class TripTimes:
    """Schedule of one trip along a variant, per hop.

    Offsets are seconds since service day midnight (GTFS time semantics; may
    exceed 24h). ``departure_offsets_s[h]`` is the departure from the hop's
    first stop and ``arrival_offsets_s[h]`` the arrival at its last stop.
    """

    trip: TripRef
    departure_offsets_s: tuple[int, ...]
    arrival_offsets_s: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.departure_offsets_s) != len(self.arrival_offsets_s):
            raise ValueError(
                f"Trip {self.trip.trip_id}: departure/arrival hop counts differ"
            )

    @property
    def n_hops(self) -> int:
        return len(self.departure_offsets_s)

    def departure_at_stop(self, stop_index: int) -> int | None:
        if 0 <= stop_index < self.n_hops:
            return self.departure_offsets_s[stop_index]
        return None

    def arrival_at_stop(self, stop_index: int) -> int | None:
        if 1 <= stop_index <= self.n_hops:
            return self.arrival_offsets_s[stop_index - 1]
        return None


@dataclass(frozen=True, slots=True)
class Hop:
    index: int
    from_stop_id: str
    to_stop_id: str
    geometry: tuple[GeoPoint, ...]


@dataclass(frozen=True, slots=True)
class RouteVariant:
    """One concrete stop pattern of a route, with its hops and trips.

    Variant names are generated at graph build time; they are unique among
    the variants of a route but not stable across builds.
    """

    agency_id: str
    route_id: str
    name: str
    stop_ids: tuple[str, ...]
    hops: tuple[Hop, ...]
    trips: tuple[TripTimes, ...] = ()

    def __post_init__(self) -> None:
        if len(self.stop_ids) < 2:
            raise ValueError(f"Variant {self.name} needs at least two stops")
        if len(self.hops) != len(self.stop_ids) - 1:
            raise ValueError(f"Variant {self.name}: one hop per stop pair expected")
        for tt in self.trips:
            if tt.n_hops != len(self.hops):
                raise ValueError(
                    f"Variant {self.name}: trip {tt.trip.trip_id} has "
                    f"{tt.n_hops} hops, expected {len(self.hops)}"
                )

    @property
    def n_hops(self) -> int:
        return len(self.hops)
