from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

import boto3
from botocore.client import BaseClient
from botocore.config import Config

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
else:
    S3Client = BaseClient  # type: ignore[misc,assignment]

DEFAULT_LOCALSTACK_URL = "http://localhost:4566"


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class AwsClientConfig:
    """Where graph snapshots live: real AWS or a LocalStack endpoint.

    ENDPOINT_URL wins over USE_LOCALSTACK; with neither set, boto3 talks to AWS.
    """

    region: str
    endpoint_url: str | None
    max_attempts: int = 3

    @staticmethod
    def from_env() -> "AwsClientConfig":
        endpoint_url = (os.getenv("ENDPOINT_URL") or "").strip() or None
        if endpoint_url is None and _env_flag("USE_LOCALSTACK"):
            endpoint_url = os.getenv("LOCALSTACK_ENDPOINT_URL", DEFAULT_LOCALSTACK_URL)
        return AwsClientConfig(
            region=os.getenv("AWS_REGION", "eu-west-1"),
            endpoint_url=endpoint_url,
        )


def s3_client(cfg: AwsClientConfig | None = None) -> S3Client:
    cfg = cfg or AwsClientConfig.from_env()
    session = boto3.session.Session(region_name=cfg.region)
    return session.client(
        "s3",
        endpoint_url=cfg.endpoint_url,
        config=Config(retries={"max_attempts": cfg.max_attempts, "mode": "standard"}),
    )
