"""HTTP layer: FastAPI application and routes."""

from .app import create_app
from .routes import SESSION_KEY, create_api_router

__all__ = ["SESSION_KEY", "create_api_router", "create_app"]
