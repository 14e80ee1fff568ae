"""Tests for request and descriptor schemas."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from s3_console.schemas import (
    BucketDescriptor,
    ConnectResponse,
    CredentialRecord,
    ObjectDescriptor,
    StaticCredentials,
)


class TestCredentialRecord:
    """Test the canonical credential record."""

    def test_record_is_immutable(self):
        """Test that a record cannot be modified after construction."""
        record = CredentialRecord(
            access_key_id="AKIA", secret_access_key="secret", region="us-east-1"
        )
        with pytest.raises(ValidationError):
            record.region = "eu-west-1"

    def test_record_repr_hides_secrets(self):
        """Test that secrets never appear in repr output."""
        record = CredentialRecord(
            access_key_id="AKIA",
            secret_access_key="very-secret",
            session_token="token-value",
            region="us-east-1",
        )
        assert "very-secret" not in repr(record)
        assert "token-value" not in repr(record)
        assert "AKIA" in repr(record)

    def test_record_requires_non_empty_fields(self):
        """Test that empty required fields are rejected."""
        with pytest.raises(ValidationError):
            CredentialRecord(access_key_id="", secret_access_key="s", region="r")

    def test_record_accepts_camel_case(self):
        """Test construction from JSON-style names."""
        record = CredentialRecord.model_validate(
            {"accessKeyId": "AKIA", "secretAccessKey": "s", "region": "us-east-1"}
        )
        assert record.access_key_id == "AKIA"
        assert record.session_token is None


class TestStaticCredentials:
    """Test static key payload validation."""

    def test_blank_region_rejected(self):
        """Test that whitespace-only values count as empty."""
        with pytest.raises(ValidationError):
            StaticCredentials(
                access_key_id="AKIA", secret_access_key="secret", region="   "
            )

    def test_unknown_fields_ignored(self):
        """Test that extra keys in the payload are dropped."""
        creds = StaticCredentials.model_validate(
            {
                "accessKeyId": "AKIA",
                "secretAccessKey": "secret",
                "region": "us-east-1",
                "remember": True,
            }
        )
        assert not hasattr(creds, "remember")


class TestDescriptors:
    """Test JSON shape of storage descriptors."""

    def test_folder_has_no_file_attributes(self):
        """Test that folders only serialize key and isFolder."""
        folder = ObjectDescriptor.folder("photos/")
        data = folder.model_dump(by_alias=True, exclude_none=True)
        assert data == {"key": "photos/", "isFolder": True}

    def test_file_serializes_camel_case(self):
        """Test camelCase output for file entries."""
        modified = datetime(2024, 1, 2, tzinfo=timezone.utc)
        obj = ObjectDescriptor(
            key="a.txt",
            is_folder=False,
            size=3,
            last_modified=modified,
            etag='"abc"',
            storage_class="STANDARD",
        )
        data = obj.model_dump(by_alias=True, mode="json")
        assert data["isFolder"] is False
        assert data["lastModified"].startswith("2024-01-02")
        assert data["storageClass"] == "STANDARD"

    def test_bucket_creation_date_optional(self):
        """Test bucket descriptor defaults."""
        bucket = BucketDescriptor(name="b", region="us-east-1")
        assert bucket.creation_date is None

    def test_connect_response_alias(self):
        """Test sessionId alias on the connect response."""
        response = ConnectResponse(session_id="abc")
        assert response.model_dump(by_alias=True) == {
            "success": True,
            "sessionId": "abc",
        }
