from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.adapters.graph import ServiceCalendar, TransitGraph
from src.domain.models import GeoPoint, Hop, RouteVariant, Stop, TripRef, TripTimes

# Midnight UTC of Thursday 2026-01-08, the service day most tests run on.
DAY0 = int(datetime(2026, 1, 8, tzinfo=timezone.utc).timestamp())

S1 = GeoPoint(lat=0.0, lon=0.0)
S2 = GeoPoint(lat=0.0, lon=0.009)  # ~1000 m east of S1
S3 = GeoPoint(lat=0.0, lon=0.0135)  # ~500 m east of S2
S4 = GeoPoint(lat=0.0, lon=0.018)  # ~500 m east of S3


def _make_trip(
    trip_id: str,
    deps: tuple[int, ...],
    arrs: tuple[int, ...],
    *,
    route_id: str = "R1",
    service_id: str = "WK",
    agency_id: str = "A",
) -> TripTimes:
    return TripTimes(
        trip=TripRef(
            agency_id=agency_id,
            trip_id=trip_id,
            route_id=route_id,
            service_id=service_id,
        ),
        departure_offsets_s=deps,
        arrival_offsets_s=arrs,
    )


def _make_variant(
    name: str,
    stop_ids: tuple[str, ...],
    points: tuple[GeoPoint, ...],
    trips: tuple[TripTimes, ...],
    *,
    route_id: str = "R1",
    agency_id: str = "A",
) -> RouteVariant:
    hops = tuple(
        Hop(index=i, from_stop_id=a, to_stop_id=b, geometry=(pa, pb))
        for i, (a, b, pa, pb) in enumerate(
            zip(stop_ids, stop_ids[1:], points, points[1:])
        )
    )
    return RouteVariant(
        agency_id=agency_id,
        route_id=route_id,
        name=name,
        stop_ids=stop_ids,
        hops=hops,
        trips=trips,
    )


def build_tiny_graph(
    *, extra_variants: tuple[RouteVariant, ...] = (), second_agency: bool = False
) -> TransitGraph:
    graph = TransitGraph()
    graph.add_agency("A", "UTC")
    for stop_id, loc in (("S1", S1), ("S2", S2), ("S3", S3)):
        graph.add_stop(Stop(id=stop_id, name=f"Stop {stop_id}", location=loc, agency_id="A"))
    graph.add_calendar(
        ServiceCalendar(
            agency_id="A",
            service_id="WK",
            weekdays=(True, True, True, True, True, False, False),
            start_date=date(2026, 1, 1),
            end_date=date(2026, 12, 31),
        )
    )
    graph.add_variant(
        _make_variant(
            "A:R1:0",
            ("S1", "S2", "S3"),
            (S1, S2, S3),
            (
                _make_trip("T1", (28800, 29000), (28900, 29100)),
                _make_trip("T2", (32400, 32600), (32500, 32700)),
            ),
        )
    )
    for variant in extra_variants:
        graph.add_variant(variant)
    if second_agency:
        _add_agency_b(graph)
    return graph.freeze()


def _add_agency_b(graph: TransitGraph) -> None:
    """Agency B shares stop S3 and alone serves S4 on route R2."""

    graph.add_agency("B", "UTC")
    for stop_id, loc in (("S3", S3), ("S4", S4)):
        graph.add_stop(Stop(id=stop_id, name=f"Stop {stop_id}", location=loc, agency_id="B"))
    graph.add_calendar(
        ServiceCalendar(
            agency_id="B",
            service_id="WK",
            weekdays=(True, True, True, True, True, False, False),
            start_date=date(2026, 1, 1),
            end_date=date(2026, 12, 31),
        )
    )
    graph.add_variant(
        _make_variant(
            "B:R2:0",
            ("S3", "S4"),
            (S3, S4),
            (_make_trip("B1", (30000,), (30300,), route_id="R2", agency_id="B"),),
            route_id="R2",
            agency_id="B",
        )
    )


@pytest.fixture
def tiny_graph() -> TransitGraph:
    return build_tiny_graph()


@pytest.fixture
def day0() -> int:
    return DAY0


@pytest.fixture
def make_trip():
    return _make_trip


@pytest.fixture
def make_variant():
    return _make_variant


@pytest.fixture
def build_graph():
    return build_tiny_graph
