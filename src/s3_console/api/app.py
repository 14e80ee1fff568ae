"""FastAPI application factory.

Wires the session cookie middleware, request logging, error mapping and
the /api router around injected collaborators, so tests and alternative
deployments can swap the session store or the AWS client factory.
"""

import time
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from s3_console import __version__
from s3_console.api.routes import create_api_router
from s3_console.core import get_logger
from s3_console.core import settings as default_settings
from s3_console.core.config import Settings
from s3_console.core.exceptions import S3ConsoleError, ValidationError
from s3_console.credentials import CredentialResolver
from s3_console.objectstorage import AwsClientFactory, S3Gateway
from s3_console.schemas import HealthResponse
from s3_console.sessions import InMemorySessionStore, SessionStore

logger = get_logger(__name__)

# Polled by the UI; only logged when it fails
QUIET_PATHS = {"/api/connection/status"}


def _register_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(S3ConsoleError)
    async def _console_error_handler(request: Request, exc: S3ConsoleError):
        body: dict = {"error": exc.message}
        if isinstance(exc, ValidationError) and exc.fields:
            body["fields"] = exc.fields

        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Request failed",
            path=request.url.path,
            status=exc.status_code,
            error_type=type(exc).__name__,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        fields = {
            ".".join(str(part) for part in error["loc"][1:]) or "body": error["msg"]
            for error in exc.errors()
        }
        return JSONResponse(
            status_code=400, content={"error": "Invalid request", "fields": fields}
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        if settings.is_production:
            message = "Internal server error"
        else:
            message = str(exc) or type(exc).__name__
        return JSONResponse(status_code=500, content={"error": message})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SessionStore] = None,
    client_factory: Optional[AwsClientFactory] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings (defaults to the environment-derived ones)
        store: Session backend (defaults to a fresh in-memory store)
        client_factory: boto3 client factory (defaults to one built from settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings
    store = store if store is not None else InMemorySessionStore()
    client_factory = client_factory or AwsClientFactory.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "s3-console starting",
            environment=settings.environment,
            version=__version__,
        )
        yield
        logger.info("s3-console shutting down")

    app = FastAPI(
        title="s3-console",
        description="Browser-facing administrative API for Amazon S3",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_store = store

    # Signed, httpOnly cookie holding only the session id; no max-age so it
    # ends with the browser session
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie_name,
        max_age=None,
        same_site="strict",
        https_only=settings.is_production,
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path in QUIET_PATHS and response.status_code < 400:
            return response

        logger.info(
            "API request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response

    _register_error_handlers(app, settings)

    resolver = CredentialResolver.from_settings(settings, client_factory)
    gateway_factory = partial(S3Gateway.from_settings, settings, client_factory)
    app.include_router(
        create_api_router(
            store,
            resolver,
            gateway_factory,
            max_upload_bytes=settings.max_upload_bytes,
        )
    )

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(version=__version__)

    return app
