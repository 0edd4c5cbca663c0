from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

import networkx as nx

from src.domain.models import RouteVariant, Stop


@dataclass(frozen=True, slots=True)
class BoardEdge:
    """Stop boarding point -> a variant's vehicle at stop_index."""

    variant_name: str
    stop_index: int


@dataclass(frozen=True, slots=True)
class AlightEdge:
    """A variant's vehicle at stop_index -> the stop's alighting point."""

    variant_name: str
    stop_index: int


@dataclass(frozen=True, slots=True)
class ServiceCalendar:
    """GTFS calendar.txt row plus calendar_dates.txt exceptions."""

    agency_id: str
    service_id: str
    weekdays: tuple[bool, bool, bool, bool, bool, bool, bool] = (False,) * 7
    start_date: date | None = None
    end_date: date | None = None
    added: frozenset[date] = frozenset()
    removed: frozenset[date] = frozenset()

    def runs_on(self, day: date) -> bool:
        if day in self.removed:
            return False
        if day in self.added:
            return True
        if self.start_date is None or self.end_date is None:
            return False
        if not (self.start_date <= day <= self.end_date):
            return False
        return self.weekdays[day.weekday()]


def depart_vertex(agency_id: str, stop_id: str) -> tuple[str, str, str]:
    return ("depart", agency_id, stop_id)


def arrive_vertex(agency_id: str, stop_id: str) -> tuple[str, str, str]:
    return ("arrive", agency_id, stop_id)


def onboard_vertex(variant_name: str, stop_index: int) -> tuple[str, str, int]:
    return ("onboard", variant_name, stop_index)


@dataclass(slots=True)
class TransitGraph:
    """In-memory time-dependent transit graph snapshot.

    Built once, then frozen; queries share it read-only. Replace a snapshot
    by publishing a new instance, never by mutating a published one.
    """

    agencies: dict[str, str] = field(default_factory=dict)  # agency_id -> tz
    stops_by_key: dict[tuple[str, str], Stop] = field(default_factory=dict)
    variants_by_name: dict[str, RouteVariant] = field(default_factory=dict)
    calendars: dict[tuple[str, str], ServiceCalendar] = field(default_factory=dict)
    graph: nx.MultiDiGraph = field(default_factory=nx.MultiDiGraph)

    _variants_by_route: dict[tuple[str, str], list[str]] = field(default_factory=dict)
    _variant_by_trip: dict[tuple[str, str], str] = field(default_factory=dict)
    _frozen: bool = field(default=False, init=False, repr=False)

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("Transit graph snapshot is frozen")

    def add_agency(self, agency_id: str, timezone: str) -> None:
        self._check_mutable()
        self.agencies[agency_id] = timezone

    def add_stop(self, stop: Stop) -> None:
        self._check_mutable()
        self.stops_by_key[(stop.agency_id, stop.id)] = stop

    def add_calendar(self, calendar: ServiceCalendar) -> None:
        self._check_mutable()
        self.calendars[(calendar.agency_id, calendar.service_id)] = calendar

    def add_variant(self, variant: RouteVariant) -> None:
        self._check_mutable()
        if variant.name in self.variants_by_name:
            raise ValueError(f"Duplicate variant name: {variant.name}")
        self.variants_by_name[variant.name] = variant
        self._variants_by_route.setdefault(
            (variant.agency_id, variant.route_id), []
        ).append(variant.name)
        for tt in variant.trips:
            self._variant_by_trip[tt.trip.key] = variant.name

        last = len(variant.stop_ids) - 1
        for idx, stop_id in enumerate(variant.stop_ids):
            onboard = onboard_vertex(variant.name, idx)
            if idx < last:
                board = BoardEdge(variant.name, idx)
                self.graph.add_edge(
                    depart_vertex(variant.agency_id, stop_id), onboard, key=board, edge=board
                )
            if idx > 0:
                alight = AlightEdge(variant.name, idx)
                self.graph.add_edge(
                    onboard, arrive_vertex(variant.agency_id, stop_id), key=alight, edge=alight
                )

    def freeze(self) -> "TransitGraph":
        nx.freeze(self.graph)
        self._frozen = True
        return self

    def variant_names_for_route(self, agency_id: str, route_id: str) -> tuple[str, ...]:
        return tuple(self._variants_by_route.get((agency_id, route_id), ()))

    def variant_name_for_trip(self, agency_id: str, trip_id: str) -> str | None:
        return self._variant_by_trip.get((agency_id, trip_id))
