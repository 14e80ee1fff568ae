"""Configuration management for s3-console."""

from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings

INSECURE_SESSION_SECRET = "dev-secret-key"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    environment: Literal["development", "production"] = "development"
    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "s3-console"

    # Session cookie
    session_secret: str = INSECURE_SESSION_SECRET
    session_cookie_name: str = "s3-client-session"

    # AWS
    default_region: str = "us-east-1"
    default_bucket_region: str = "us-east-1"
    resolve_bucket_regions: bool = False
    presigned_url_expiry: int = 3600
    role_session_name: str = "S3ClientSession"
    role_duration_seconds: int = 3600
    endpoint_url: Optional[str] = None
    sts_endpoint_url: Optional[str] = None
    connect_timeout: int = 10
    read_timeout: int = 60

    # Uploads are buffered in memory; 5 GiB is the S3 single PUT limit
    max_upload_bytes: int = 5 * 1024**3

    # Server
    host: str = "127.0.0.1"
    port: int = 5000

    model_config = {
        "env_prefix": "S3_CONSOLE_",
        "case_sensitive": False,
    }

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @model_validator(mode="after")
    def _reject_placeholder_secret(self) -> "Settings":
        if self.is_production and self.session_secret == INSECURE_SESSION_SECRET:
            raise ValueError(
                "S3_CONSOLE_SESSION_SECRET must be set when running in production"
            )
        return self


settings = Settings()
