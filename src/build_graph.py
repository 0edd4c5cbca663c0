"""Build a transit graph snapshot from GTFS and publish it to S3.

Env vars: GTFS_PATH, TRANSIT_GRAPH_BUCKET, TRANSIT_GRAPH_KEY (+ AWS/LocalStack vars).
"""

from __future__ import annotations

import logging

from src.adapters.persistence import GtfsGraphRepository, S3GraphRepository

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    graph = GtfsGraphRepository().load_graph()
    target = S3GraphRepository()
    target.save_graph(graph)
    logger.info(
        "Uploaded graph with %d variants to %s",
        len(graph.variants_by_name),
        target.location,
    )


if __name__ == "__main__":
    main()
