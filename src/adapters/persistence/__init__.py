from .gtfs_graph_repository import GtfsGraphRepository
from .s3_graph_repository import S3GraphRepository

__all__ = [
    "GtfsGraphRepository",
    "S3GraphRepository",
]
