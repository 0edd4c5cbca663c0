from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Hashable, Protocol

from src.domain.models import TripRef

TransitEdge = Hashable


class TraversalState(Protocol):
    """Opaque position-in-time state owned by the traversal engine.

    Queries only read it.
    """

    @property
    def time_s(self) -> int: ...

    @property
    def back_trip(self) -> TripRef | None: ...


class ITraversalEngine(ABC):
    """Port for the time-dependent edge traversal primitive."""

    @abstractmethod
    def start_state(
        self, edge: TransitEdge, time_s: int, *, arrive_by: bool = False
    ) -> TraversalState:
        """Create the state at the edge's origin (or destination when arrive_by)."""

    @abstractmethod
    def traverse(self, edge: TransitEdge, state: TraversalState) -> TraversalState | None:
        """Advance across edge, or return None when there is no further result."""
