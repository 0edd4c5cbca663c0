from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Sequence

from src.app.ports.output import ITransitIndex
from src.domain.models import RouteVariant, Stop

from .transit_graph import TransitGraph, arrive_vertex, depart_vertex


@dataclass(slots=True)
class InMemoryTransitIndex(ITransitIndex):
    transit_graph: TransitGraph

    def agency_ids(self) -> tuple[str, ...]:
        return tuple(self.transit_graph.agencies)

    def board_edges(self, agency_id: str, stop_id: str) -> Sequence[Hashable] | None:
        g = self.transit_graph.graph
        v = depart_vertex(agency_id, stop_id)
        if v not in g:
            return None
        return tuple(data["edge"] for _, _, data in g.out_edges(v, data=True))

    def alight_edges(self, agency_id: str, stop_id: str) -> Sequence[Hashable] | None:
        g = self.transit_graph.graph
        v = arrive_vertex(agency_id, stop_id)
        if v not in g:
            return None
        return tuple(data["edge"] for _, _, data in g.in_edges(v, data=True))

    def variants_for_route(self, agency_id: str, route_id: str) -> tuple[RouteVariant, ...]:
        names = self.transit_graph.variant_names_for_route(agency_id, route_id)
        return tuple(self.transit_graph.variants_by_name[n] for n in names)

    def variant_for_trip(self, agency_id: str, trip_id: str) -> RouteVariant | None:
        name = self.transit_graph.variant_name_for_trip(agency_id, trip_id)
        if name is None:
            return None
        return self.transit_graph.variants_by_name[name]

    def routes_for_stop(self, agency_id: str, stop_id: str) -> tuple[str, ...]:
        names: set[str] = set()
        for edges in (
            self.board_edges(agency_id, stop_id),
            self.alight_edges(agency_id, stop_id),
        ):
            for edge in edges or ():
                names.add(edge.variant_name)

        variants = self.transit_graph.variants_by_name
        return tuple(sorted({variants[n].route_id for n in names}))

    def stops(self) -> Sequence[Stop]:
        return tuple(self.transit_graph.stops_by_key.values())
