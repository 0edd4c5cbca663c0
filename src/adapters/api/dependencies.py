from __future__ import annotations

import os

from src.adapters.graph import (
    GtfsCalendarService,
    InMemoryTransitIndex,
    TimetableTraversalEngine,
    TransitGraph,
)
from src.adapters.geometry import ShapelyGeometryService
from src.adapters.persistence import GtfsGraphRepository, S3GraphRepository
from src.app.ports.output import IGraphRepository
from src.app.services.graph_snapshot import GraphSnapshotHolder
from src.app.services.settings import QuerySettings
from src.app.services.stop_events_service import StopEventsService
from src.app.services.transit_index_service import TransitIndexQueryService
from src.app.services.trip_locator_service import TripLocatorService


def build_graph_repository() -> IGraphRepository:
    if os.getenv("TRANSIT_GRAPH_BUCKET"):
        return S3GraphRepository()
    return GtfsGraphRepository()


graph_holder = GraphSnapshotHolder(repository=build_graph_repository())


def get_graph_holder() -> GraphSnapshotHolder:
    return graph_holder


def _snapshot() -> TransitGraph:
    # One snapshot per request; a concurrent reload does not affect it.
    return graph_holder.current()


def get_stop_events_service() -> StopEventsService:
    graph = _snapshot()
    calendar = GtfsCalendarService(graph)
    return StopEventsService(
        transit_index=InMemoryTransitIndex(graph),
        traversal_engine=TimetableTraversalEngine(graph, calendar),
        calendar=calendar,
        settings=QuerySettings.from_env(),
    )


def get_trip_locator_service() -> TripLocatorService:
    graph = _snapshot()
    return TripLocatorService(
        transit_index=InMemoryTransitIndex(graph),
        calendar=GtfsCalendarService(graph),
        geometry=ShapelyGeometryService(),
        settings=QuerySettings.from_env(),
    )


def get_transit_index_service() -> TransitIndexQueryService:
    return TransitIndexQueryService(
        transit_index=InMemoryTransitIndex(_snapshot()),
        settings=QuerySettings.from_env(),
    )
