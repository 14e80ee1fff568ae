"""Bucket and object operations over a session-scoped S3 client.

A gateway is cheap to build and is created per request. ``bind`` attaches
the credentials of the session being served; every operation requires a
prior bind. Every failure, including calling an operation while unbound,
surfaces as ProviderError. Nothing is retried here.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from s3_console.core import get_logger, get_tracer
from s3_console.core.config import Settings
from s3_console.core.exceptions import ProviderError, S3ConsoleError
from s3_console.objectstorage.clients import AwsClientFactory
from s3_console.schemas import BucketDescriptor, CredentialRecord, ObjectDescriptor

logger = get_logger(__name__)
tracer = get_tracer(__name__)

# GetBucketLocation answers with legacy names for a few regions
_LEGACY_LOCATIONS = {"": "us-east-1", "EU": "eu-west-1"}


class S3Gateway:
    """Uniform facade over the S3 calls the console needs."""

    def __init__(
        self,
        client_factory: AwsClientFactory,
        default_bucket_region: str = "us-east-1",
        resolve_bucket_regions: bool = False,
        presigned_url_expiry: int = 3600,
    ):
        self.client_factory = client_factory
        self.default_bucket_region = default_bucket_region
        self.resolve_bucket_regions = resolve_bucket_regions
        self.presigned_url_expiry = presigned_url_expiry
        self._client = None

    @classmethod
    def from_settings(
        cls, settings: Settings, client_factory: Optional[AwsClientFactory] = None
    ) -> "S3Gateway":
        return cls(
            client_factory or AwsClientFactory.from_settings(settings),
            default_bucket_region=settings.default_bucket_region,
            resolve_bucket_regions=settings.resolve_bucket_regions,
            presigned_url_expiry=settings.presigned_url_expiry,
        )

    @property
    def is_bound(self) -> bool:
        return self._client is not None

    def bind(self, record: CredentialRecord) -> None:
        """Replace the underlying client with one scoped to ``record``."""
        try:
            self._client = self.client_factory.s3(record)
        except Exception as e:
            self._client = None
            error_msg = f"Failed to create S3 client: {e}"
            logger.error(error_msg, region=record.region)
            raise ProviderError(error_msg) from e

    @property
    def client(self):
        if self._client is None:
            raise ProviderError("AWS client not initialized")
        return self._client

    @contextmanager
    def _provider_call(self, operation: str, failure: str, **context) -> Iterator[None]:
        with tracer.start_as_current_span(f"s3.{operation}") as span:
            for name, value in context.items():
                span.set_attribute(f"s3.{name}", value)
            try:
                yield
            except S3ConsoleError:
                raise
            except Exception as e:
                error_msg = f"{failure}: {e}"
                logger.error(error_msg, operation=operation, **context)
                raise ProviderError(error_msg) from e

    def list_buckets(self) -> list[BucketDescriptor]:
        """List every bucket visible to the bound credentials.

        The region is ``default_bucket_region`` unless bucket region lookup
        is enabled, in which case one GetBucketLocation call is made per
        bucket.
        """
        with self._provider_call("list_buckets", "Failed to list buckets"):
            response = self.client.list_buckets()
            buckets = [
                BucketDescriptor(
                    name=bucket["Name"],
                    region=self._bucket_region(bucket["Name"]),
                    creation_date=bucket.get("CreationDate"),
                )
                for bucket in response.get("Buckets", [])
            ]

        logger.info("Buckets listed", bucket_count=len(buckets))
        return buckets

    def _bucket_region(self, bucket: str) -> str:
        if not self.resolve_bucket_regions:
            return self.default_bucket_region

        try:
            response = self.client.get_bucket_location(Bucket=bucket)
        except Exception as e:
            logger.warning("Bucket region lookup failed", bucket=bucket, error=str(e))
            return self.default_bucket_region

        location = response.get("LocationConstraint") or ""
        return _LEGACY_LOCATIONS.get(location, location)

    def list_objects(
        self, bucket: str, prefix: str = "", delimiter: str = "/"
    ) -> list[ObjectDescriptor]:
        """List the folders and files directly under ``prefix``.

        Every page of ListObjectsV2 is read, so large buckets are never
        truncated. Folders (common prefixes) come first, then files, each in
        the order S3 returns them. An entry whose key equals ``prefix``, the
        prefix's own directory marker, is left out.
        """
        folders: list[ObjectDescriptor] = []
        files: list[ObjectDescriptor] = []

        with self._provider_call(
            "list_objects", "Failed to list objects", bucket=bucket, prefix=prefix
        ):
            paginator = self.client.get_paginator("list_objects_v2")
            kwargs = {"Bucket": bucket, "Prefix": prefix}
            if delimiter:
                kwargs["Delimiter"] = delimiter

            for page in paginator.paginate(**kwargs):
                for common_prefix in page.get("CommonPrefixes", []):
                    if common_prefix["Prefix"] != prefix:
                        folders.append(ObjectDescriptor.folder(common_prefix["Prefix"]))

                for obj in page.get("Contents", []):
                    if obj["Key"] == prefix:
                        continue
                    files.append(
                        ObjectDescriptor(
                            key=obj["Key"],
                            is_folder=False,
                            size=obj.get("Size"),
                            last_modified=obj.get("LastModified"),
                            etag=obj.get("ETag"),
                            storage_class=obj.get("StorageClass"),
                        )
                    )

        logger.info(
            "Objects listed",
            bucket=bucket,
            prefix=prefix,
            folder_count=len(folders),
            file_count=len(files),
        )
        return folders + files

    def get_download_url(self, bucket: str, key: str) -> str:
        """Mint a presigned GET URL for one object."""
        with self._provider_call(
            "get_download_url",
            "Failed to generate download URL",
            bucket=bucket,
            key=key,
        ):
            url = self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=self.presigned_url_expiry,
            )

        logger.info(
            "Download URL generated",
            bucket=bucket,
            key=key,
            expires_in=self.presigned_url_expiry,
        )
        return url

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete a single key. Folders are not deleted recursively."""
        with self._provider_call(
            "delete_object", "Failed to delete object", bucket=bucket, key=key
        ):
            self.client.delete_object(Bucket=bucket, Key=key)

        logger.info("Object deleted", bucket=bucket, key=key)

    def upload_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """Store ``body`` at ``key`` with a single PutObject."""
        with self._provider_call(
            "upload_object", "Failed to upload object", bucket=bucket, key=key
        ):
            kwargs = {"Bucket": bucket, "Key": key, "Body": body}
            if content_type:
                kwargs["ContentType"] = content_type
            self.client.put_object(**kwargs)

        logger.info("Object uploaded", bucket=bucket, key=key, size=len(body))
