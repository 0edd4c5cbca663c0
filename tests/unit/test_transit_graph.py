from __future__ import annotations

from datetime import date

import networkx as nx
import pytest

from src.adapters.graph import (
    AlightEdge,
    BoardEdge,
    GtfsCalendarService,
    InMemoryTransitIndex,
    ServiceCalendar,
    TimetableTraversalEngine,
    TransitGraph,
)
from src.domain.exceptions import UnknownStopOrRoute
from src.domain.models import GeoPoint, Stop


@pytest.fixture
def engine(tiny_graph) -> TimetableTraversalEngine:
    return TimetableTraversalEngine(
        transit_graph=tiny_graph, calendar=GtfsCalendarService(tiny_graph)
    )


@pytest.mark.unit
def test_index_exposes_board_and_alight_entries(tiny_graph) -> None:
    index = InMemoryTransitIndex(tiny_graph)

    assert index.agency_ids() == ("A",)
    assert index.board_edges("A", "S1") == (BoardEdge("A:R1:0", 0),)
    assert index.alight_edges("A", "S1") is None
    assert index.board_edges("A", "S3") is None
    assert index.alight_edges("A", "S3") == (AlightEdge("A:R1:0", 2),)
    assert index.board_edges("A", "nope") is None
    assert index.board_edges("B", "S1") is None


@pytest.mark.unit
def test_index_route_and_trip_lookups(tiny_graph) -> None:
    index = InMemoryTransitIndex(tiny_graph)

    assert index.routes_for_stop("A", "S2") == ("R1",)
    assert [v.name for v in index.variants_for_route("A", "R1")] == ["A:R1:0"]
    assert index.variants_for_route("A", "R9") == ()
    assert index.variant_for_trip("A", "T2").name == "A:R1:0"
    assert index.variant_for_trip("A", "T9") is None
    assert {s.id for s in index.stops()} == {"S1", "S2", "S3"}


@pytest.mark.unit
def test_published_graph_is_frozen(tiny_graph) -> None:
    with pytest.raises(nx.NetworkXError):
        tiny_graph.graph.add_node("x")


@pytest.mark.unit
def test_frozen_graph_rejects_every_change(tiny_graph, make_variant, make_trip) -> None:
    pts = (GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=0.001))
    variant = make_variant(
        "A:R2:0",
        ("S1", "S2"),
        pts,
        (make_trip("X1", (100,), (200,), route_id="R2"),),
        route_id="R2",
    )

    with pytest.raises(RuntimeError):
        tiny_graph.add_variant(variant)
    with pytest.raises(RuntimeError):
        tiny_graph.add_stop(Stop(id="S9", name="Nine", location=pts[0], agency_id="A"))
    with pytest.raises(RuntimeError):
        tiny_graph.add_agency("B", "UTC")
    with pytest.raises(RuntimeError):
        tiny_graph.add_calendar(ServiceCalendar("A", "SAT"))

    assert "A:R2:0" not in tiny_graph.variants_by_name
    assert tiny_graph.variant_names_for_route("A", "R2") == ()
    assert tiny_graph.variant_name_for_trip("A", "X1") is None
    assert ("A", "S9") not in tiny_graph.stops_by_key
    assert "B" not in tiny_graph.agencies
    assert ("A", "SAT") not in tiny_graph.calendars


@pytest.mark.unit
def test_variant_names_must_be_unique(make_variant) -> None:
    g = TransitGraph()
    pts = (GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=0.001))
    v = make_variant("A:R1:0", ("S1", "S2"), pts, ())
    g.add_variant(v)

    with pytest.raises(ValueError):
        g.add_variant(v)


@pytest.mark.unit
def test_calendar_rules_and_exceptions() -> None:
    cal = ServiceCalendar(
        agency_id="A",
        service_id="WK",
        weekdays=(True, True, True, True, True, False, False),
        start_date=date(2026, 1, 1),
        end_date=date(2026, 1, 31),
        added=frozenset({date(2026, 1, 10)}),
        removed=frozenset({date(2026, 1, 8)}),
    )

    assert cal.runs_on(date(2026, 1, 9))
    assert not cal.runs_on(date(2026, 1, 8))
    assert cal.runs_on(date(2026, 1, 10))
    assert not cal.runs_on(date(2026, 1, 11))
    assert not cal.runs_on(date(2026, 2, 2))
    assert ServiceCalendar("A", "X", added=frozenset({date(2026, 3, 1)})).runs_on(
        date(2026, 3, 1)
    )


@pytest.mark.unit
def test_calendar_service_by_agency(tiny_graph) -> None:
    cal = GtfsCalendarService(tiny_graph)

    assert cal.service_ids_on("A", date(2026, 1, 8)) == frozenset({"WK"})
    assert cal.service_ids_on("A", date(2026, 1, 10)) == frozenset()
    assert cal.timezone_for_agency("A") == "UTC"
    with pytest.raises(UnknownStopOrRoute):
        cal.timezone_for_agency("B")


@pytest.mark.unit
def test_boarding_finds_next_departure(engine, day0) -> None:
    edge = BoardEdge("A:R1:0", 0)

    first = engine.traverse(edge, engine.start_state(edge, day0))
    second = engine.traverse(edge, engine.start_state(edge, first.time_s + 1))
    third = engine.traverse(edge, engine.start_state(edge, second.time_s + 1))

    assert (first.time_s, first.back_trip.trip_id) == (day0 + 28800, "T1")
    assert (second.time_s, second.back_trip.trip_id) == (day0 + 32400, "T2")
    assert (third.time_s, third.back_trip.trip_id) == (day0 + 86400 + 28800, "T1")


@pytest.mark.unit
def test_boarding_before_weekend_finds_nothing(engine, day0) -> None:
    edge = BoardEdge("A:R1:0", 0)

    # Friday after the last run; Saturday has no service.
    assert engine.traverse(edge, engine.start_state(edge, day0 + 86400 + 40000)) is None


@pytest.mark.unit
def test_arrive_by_finds_previous_arrival(engine, day0) -> None:
    edge = AlightEdge("A:R1:0", 2)

    state = engine.traverse(edge, engine.start_state(edge, day0 + 30000, arrive_by=True))

    assert (state.time_s, state.back_trip.trip_id) == (day0 + 29100, "T1")
    assert state.arrive_by


@pytest.mark.unit
def test_wrong_direction_and_unknown_edge(engine, day0) -> None:
    board = BoardEdge("A:R1:0", 0)
    alight = AlightEdge("A:R1:0", 1)

    assert engine.traverse(board, engine.start_state(board, day0, arrive_by=True)) is None
    assert engine.traverse(alight, engine.start_state(alight, day0)) is None
    with pytest.raises(ValueError):
        engine.traverse("street", engine.start_state("street", day0))
