from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class IGraphRepository(ABC):
    """Persistence port for loading transit graph snapshots."""

    @abstractmethod
    def load_graph(self) -> Any:
        """Load a complete graph snapshot into memory and return a handle to it."""
