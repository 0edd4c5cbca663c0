from .events import DuplicateDeparture, EventPhase, StopEvent, StopEventsResult
from .geo import GeoPoint
from .matching import HopProjection, ServiceDay, TripMatch, TripStopTime
from .stop import Stop
from .transit import Hop, RouteVariant, TripRef, TripTimes

__all__ = [
    "DuplicateDeparture",
    "EventPhase",
    "GeoPoint",
    "Hop",
    "HopProjection",
    "RouteVariant",
    "ServiceDay",
    "Stop",
    "StopEvent",
    "StopEventsResult",
    "TripMatch",
    "TripRef",
    "TripStopTime",
    "TripTimes",
]
