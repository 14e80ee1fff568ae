"""Turn connect payloads into a canonical CredentialRecord.

Two shapes are accepted:
    - static keys, validated locally with no network call
    - a role ARN, exchanged for temporary keys through one STS AssumeRole
      call signed with the server's own default credential chain

Temporary credentials expire on the provider side. Nothing tracks the
expiry here; every new connect assumes the role again.
"""

from typing import Any, Mapping, Type, TypeVar

import pydantic
from botocore.exceptions import BotoCoreError, ClientError

from s3_console.core import get_logger
from s3_console.core.config import Settings
from s3_console.core.exceptions import AuthenticationError, ValidationError
from s3_console.objectstorage.clients import AwsClientFactory
from s3_console.schemas import (
    FIELD_LABELS,
    CredentialRecord,
    JsonModel,
    RoleAssumption,
    StaticCredentials,
)

logger = get_logger(__name__)

DEFAULT_ROLE_SESSION_NAME = "S3ClientSession"

_EMPTY_VALUE_ERRORS = {"missing", "string_too_short", "value_error"}

ModelT = TypeVar("ModelT", bound=JsonModel)


def parse_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate ``payload`` against ``model``.

    Raises:
        ValidationError: With one message per offending field, keyed by the
            field's JSON name
    """
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        fields: dict[str, str] = {}
        for error in e.errors():
            name = str(error["loc"][0]) if error["loc"] else "body"
            label = FIELD_LABELS.get(name, name)
            if error["type"] in _EMPTY_VALUE_ERRORS:
                fields[name] = f"{label} is required"
            else:
                fields[name] = f"{label}: {error['msg']}"
        raise ValidationError("; ".join(fields.values()), fields=fields)


class CredentialResolver:
    """Validates credentials and assumes roles."""

    def __init__(
        self,
        client_factory: AwsClientFactory,
        default_session_name: str = DEFAULT_ROLE_SESSION_NAME,
        duration_seconds: int = 3600,
    ):
        self.client_factory = client_factory
        self.default_session_name = default_session_name
        self.duration_seconds = duration_seconds

    @classmethod
    def from_settings(
        cls, settings: Settings, client_factory: AwsClientFactory
    ) -> "CredentialResolver":
        return cls(
            client_factory,
            default_session_name=settings.role_session_name,
            duration_seconds=settings.role_duration_seconds,
        )

    def from_static_keys(self, payload: Mapping[str, Any]) -> CredentialRecord:
        """Build a record from user-supplied keys."""
        credentials = parse_payload(StaticCredentials, payload)
        return CredentialRecord(
            access_key_id=credentials.access_key_id,
            secret_access_key=credentials.secret_access_key,
            session_token=credentials.session_token,
            region=credentials.region,
        )

    def from_role(self, payload: Mapping[str, Any]) -> CredentialRecord:
        """Assume the requested role and build a record from its temporary keys.

        Raises:
            ValidationError: If the payload is malformed
            AuthenticationError: If STS rejects the request or the server has
                no ambient credentials to sign it with
        """
        request = parse_payload(RoleAssumption, payload)
        session_name = request.session_name or self.default_session_name

        logger.info("Assuming role", role_arn=request.role_arn, region=request.region)

        try:
            sts = self.client_factory.sts(request.region)
            response = sts.assume_role(
                RoleArn=request.role_arn,
                RoleSessionName=session_name,
                DurationSeconds=self.duration_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            error_msg = f"Failed to assume role: {e}"
            logger.warning(error_msg, role_arn=request.role_arn)
            raise AuthenticationError(error_msg) from e

        credentials = response.get("Credentials")
        if not credentials:
            raise AuthenticationError("Failed to assume role")

        logger.info(
            "Role assumed",
            role_arn=request.role_arn,
            expires=str(credentials.get("Expiration")),
        )
        return CredentialRecord(
            access_key_id=credentials["AccessKeyId"],
            secret_access_key=credentials["SecretAccessKey"],
            session_token=credentials.get("SessionToken"),
            region=request.region,
        )
