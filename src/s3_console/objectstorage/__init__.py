"""Object storage access for S3 and S3-compatible services."""

from .clients import AwsClientFactory
from .gateway import S3Gateway

__all__ = ["AwsClientFactory", "S3Gateway"]
