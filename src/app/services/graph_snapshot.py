from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from src.app.ports.output import IGraphRepository
from src.domain.exceptions import IndexUnavailable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GraphSnapshotHolder:
    """Publishes immutable graph snapshots to concurrent queries.

    A query captures current() once and keeps using that snapshot; reload()
    swaps the reference in a single assignment, so in-flight queries never
    observe a partially updated graph.
    """

    repository: IGraphRepository | None = None
    _snapshot: Any | None = field(default=None, init=False, repr=False)

    def current(self) -> Any:
        snapshot = self._snapshot
        if snapshot is None:
            raise IndexUnavailable(
                "No transit index loaded. Build a transit graph and publish it first."
            )
        return snapshot

    def publish(self, snapshot: Any) -> None:
        self._snapshot = snapshot
        logger.info("Published transit graph snapshot %s", type(snapshot).__name__)

    def reload(self) -> Any:
        if self.repository is None:
            raise IndexUnavailable("No graph repository configured")
        snapshot = self.repository.load_graph()
        self.publish(snapshot)
        return snapshot
