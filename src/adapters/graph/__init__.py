from .gtfs_calendar import GtfsCalendarService
from .in_memory_index import InMemoryTransitIndex
from .timetable_traversal import TimetableState, TimetableTraversalEngine
from .transit_graph import AlightEdge, BoardEdge, ServiceCalendar, TransitGraph

__all__ = [
    "AlightEdge",
    "BoardEdge",
    "GtfsCalendarService",
    "InMemoryTransitIndex",
    "ServiceCalendar",
    "TimetableState",
    "TimetableTraversalEngine",
    "TransitGraph",
]
