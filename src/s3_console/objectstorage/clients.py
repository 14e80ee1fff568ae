"""boto3 client construction for S3 and STS.

Clients are never shared between sessions. Each one is built on its own
``boto3.session.Session`` because boto3 sessions are not thread-safe and
requests for different sessions run concurrently in worker threads.

Credential sources:
    1. A CredentialRecord (static keys, or temporary keys from AssumeRole)
       for S3 clients
    2. The default AWS credential chain (environment, profile, instance
       profile) for the STS client used to assume roles

S3-Compatible Services:
    A custom ``endpoint_url`` (MinIO and similar) is honoured for S3. STS may
    be pointed at its own endpoint with ``sts_endpoint_url``.
"""

from typing import Any, Dict, Optional

import boto3
from botocore.config import Config

from s3_console.core import get_logger
from s3_console.core.config import Settings
from s3_console.schemas import CredentialRecord

logger = get_logger(__name__)


class AwsClientFactory:
    """Creates boto3 clients with retries disabled and bounded timeouts."""

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        sts_endpoint_url: Optional[str] = None,
        connect_timeout: int = 10,
        read_timeout: int = 60,
    ):
        self.endpoint_url = endpoint_url
        self.sts_endpoint_url = sts_endpoint_url
        # total_max_attempts=1 means a single attempt with no retry
        self._config = Config(
            signature_version="s3v4",
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"total_max_attempts": 1},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AwsClientFactory":
        return cls(
            endpoint_url=settings.endpoint_url,
            sts_endpoint_url=settings.sts_endpoint_url,
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
        )

    def s3(self, record: CredentialRecord):
        """Create an S3 client scoped to ``record``."""
        session = boto3.session.Session(
            aws_access_key_id=record.access_key_id,
            aws_secret_access_key=record.secret_access_key,
            aws_session_token=record.session_token,
            region_name=record.region,
        )
        kwargs: Dict[str, Any] = {"config": self._config}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url

        client = session.client("s3", **kwargs)  # type: ignore
        logger.debug(
            "S3 client created",
            region=record.region,
            temporary=record.session_token is not None,
        )
        return client

    def sts(self, region: str):
        """Create an STS client from the default credential chain."""
        session = boto3.session.Session(region_name=region)
        kwargs: Dict[str, Any] = {"config": self._config}
        if self.sts_endpoint_url:
            kwargs["endpoint_url"] = self.sts_endpoint_url

        client = session.client("sts", **kwargs)  # type: ignore
        logger.debug("STS client created with default credential chain", region=region)
        return client
