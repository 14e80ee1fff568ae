"""Request, response and domain schemas for s3-console.

All models exchanged with the browser use camelCase in JSON and snake_case
in Python. Input accepts either spelling.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Human-readable names used in per-field validation messages
FIELD_LABELS = {
    "accessKeyId": "Access Key ID",
    "secretAccessKey": "Secret Access Key",
    "sessionToken": "Session Token",
    "region": "Region",
    "roleArn": "Role ARN",
    "sessionName": "Session Name",
}


class JsonModel(BaseModel):
    """Base model for API communication with camelCase/snake_case conversion."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Connect payloads
class StaticCredentials(JsonModel):
    """Static access keys posted to /api/connect/credentials."""

    access_key_id: str = Field(..., min_length=1)
    secret_access_key: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    session_token: Optional[str] = None

    @field_validator("access_key_id", "secret_access_key", "region")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value)


class RoleAssumption(JsonModel):
    """Role assumption request posted to /api/connect/role."""

    role_arn: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    session_name: Optional[str] = None

    @field_validator("role_arn", "region")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return _require_text(value)


class CredentialRecord(JsonModel):
    """Canonical credentials bound to one session."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    access_key_id: str = Field(..., min_length=1)
    secret_access_key: str = Field(..., min_length=1, repr=False)
    region: str = Field(..., min_length=1)
    session_token: Optional[str] = Field(None, repr=False)


# Storage descriptors
class BucketDescriptor(JsonModel):
    """A bucket as reported by ListBuckets."""

    name: str
    region: str
    creation_date: Optional[datetime] = None


class ObjectDescriptor(JsonModel):
    """An object or a synthetic folder (common prefix) inside a bucket.

    Folders never carry size, last_modified, etag or storage_class.
    """

    key: str
    is_folder: bool
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    storage_class: Optional[str] = None

    @classmethod
    def folder(cls, prefix: str) -> "ObjectDescriptor":
        return cls(key=prefix, is_folder=True)


# Responses
class ConnectResponse(JsonModel):
    success: bool = True
    session_id: str


class ConnectionStatus(JsonModel):
    connected: bool
    region: Optional[str] = None


class SuccessResponse(JsonModel):
    success: bool = True


class DownloadUrlResponse(JsonModel):
    download_url: str


class HealthResponse(JsonModel):
    status: str = "ok"
    version: str
