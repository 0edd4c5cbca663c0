from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Stop:
    """A boarding location, scoped by the agency that publishes it."""

    id: str
    name: str
    location: GeoPoint
    agency_id: str = ""
    code: str | None = None  # rider-facing stop_code, when the feed has one
