from __future__ import annotations

import gzip
import os
import pickle
from dataclasses import dataclass

from src.adapters.aws import s3_client
from src.adapters.graph.transit_graph import TransitGraph
from src.app.ports.output import IGraphRepository


@dataclass(slots=True)
class S3GraphRepository(IGraphRepository):
    """Transit graph snapshots stored in S3 as gzipped pickles.

    Env vars:
      - TRANSIT_GRAPH_BUCKET: bucket name
      - TRANSIT_GRAPH_KEY: object key (e.g. graphs/transit.pkl.gz)
      - ENDPOINT_URL: preferred LocalStack endpoint (e.g. http://localhost:4566)
      - USE_LOCALSTACK: 1|true to enable LocalStack (legacy toggle)
      - AWS_REGION: defaults to eu-west-1

    Notes:
      - pickle loading is only safe for trusted inputs.
    """

    bucket: str | None = None
    key: str | None = None

    def _bucket(self) -> str:
        value = self.bucket or os.getenv("TRANSIT_GRAPH_BUCKET")
        if not value:
            raise RuntimeError("Missing TRANSIT_GRAPH_BUCKET")
        return value

    def _key(self) -> str:
        value = self.key or os.getenv("TRANSIT_GRAPH_KEY")
        if not value:
            raise RuntimeError("Missing TRANSIT_GRAPH_KEY")
        return value

    def load_graph(self) -> TransitGraph:
        s3 = s3_client()
        obj = s3.get_object(Bucket=self._bucket(), Key=self._key())
        body = obj["Body"].read()

        graph = pickle.loads(gzip.decompress(body))
        if not isinstance(graph, TransitGraph):
            raise RuntimeError(
                f"Object s3://{self._bucket()}/{self._key()} is not a transit graph"
            )
        return graph

    @property
    def location(self) -> str:
        return f"s3://{self._bucket()}/{self._key()}"

    def save_graph(self, graph: TransitGraph) -> None:
        payload = gzip.compress(pickle.dumps(graph))
        s3_client().put_object(Bucket=self._bucket(), Key=self._key(), Body=payload)
