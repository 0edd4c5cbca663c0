from .calendar_service import ICalendarService
from .geometry_service import IGeometryService, Polyline
from .graph_repository import IGraphRepository
from .transit_index import ITransitIndex
from .traversal_engine import ITraversalEngine, TransitEdge, TraversalState

__all__ = [
    "ICalendarService",
    "IGeometryService",
    "IGraphRepository",
    "ITransitIndex",
    "ITraversalEngine",
    "Polyline",
    "TransitEdge",
    "TraversalState",
]
