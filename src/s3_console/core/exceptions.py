"""Exception hierarchy for s3-console.

Every error carries the HTTP status the API layer answers with.
"""

from typing import Optional


class S3ConsoleError(Exception):
    """Base exception for all s3-console errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(S3ConsoleError):
    """Raised when client input is malformed."""

    status_code = 400

    def __init__(self, message: str, fields: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}


class PayloadTooLargeError(ValidationError):
    """Raised when an upload exceeds the configured ceiling."""

    status_code = 413


class Unauthorized(S3ConsoleError):
    """Raised when a request has no valid session."""

    status_code = 401


class AuthenticationError(S3ConsoleError):
    """Raised when AWS rejects the supplied credentials or role."""

    status_code = 400


class ProviderError(S3ConsoleError):
    """Raised when a storage-service call fails."""

    status_code = 500


class SessionStoreError(S3ConsoleError):
    """Raised when the session store cannot complete an operation."""

    status_code = 500

