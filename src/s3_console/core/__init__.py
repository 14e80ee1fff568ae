"""Core utilities and shared components for s3-console."""

from .config import Settings, settings
from .exceptions import S3ConsoleError, ValidationError
from .observability import get_logger, get_tracer

__all__ = [
    "Settings",
    "settings",
    "S3ConsoleError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
