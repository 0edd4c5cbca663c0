from __future__ import annotations


class TransitQueryError(Exception):
    """Base exception for transit index query failures."""


class IndexUnavailable(TransitQueryError):
    """Raised when no transit graph/index is available to answer a query."""


class InvalidQuery(TransitQueryError):
    """Raised for structurally invalid requests (bad window, bad limits)."""


class WindowTooLarge(InvalidQuery):
    def __init__(self, requested_s: int, max_s: int) -> None:
        super().__init__(
            f"Max stop time query interval is {requested_s} > {max_s}"
        )
        self.requested_s = requested_s
        self.max_s = max_s


class UnknownStopOrRoute(TransitQueryError):
    """Raised when an identifier does not resolve in any requested agency."""


class TripNotFound(UnknownStopOrRoute):
    """Raised when a trip is unknown or has no scheduled run after a time."""


class QueryCancelled(TransitQueryError):
    """Raised between trip iterations when the host aborts a long query."""
