from .transit import (
    IndexUnavailable,
    InvalidQuery,
    QueryCancelled,
    TransitQueryError,
    TripNotFound,
    UnknownStopOrRoute,
    WindowTooLarge,
)

__all__ = [
    "IndexUnavailable",
    "InvalidQuery",
    "QueryCancelled",
    "TransitQueryError",
    "TripNotFound",
    "UnknownStopOrRoute",
    "WindowTooLarge",
]
