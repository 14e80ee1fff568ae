"""HTTP endpoints for the console.

Routers handle HTTP concerns only. Every storage operation resolves the
session from the signed cookie, builds a fresh gateway bound to that
session's credentials and dispatches to it in a worker thread. Errors are
raised as S3ConsoleError subclasses and turned into JSON by the handlers
registered in ``s3_console.api.app``.
"""

import asyncio
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from s3_console.core import get_logger
from s3_console.core.exceptions import (
    PayloadTooLargeError,
    SessionStoreError,
    Unauthorized,
    ValidationError,
)
from s3_console.credentials import CredentialResolver
from s3_console.objectstorage import S3Gateway
from s3_console.schemas import (
    BucketDescriptor,
    ConnectionStatus,
    ConnectResponse,
    CredentialRecord,
    DownloadUrlResponse,
    ObjectDescriptor,
    SuccessResponse,
)
from s3_console.sessions import Session, SessionStore

logger = get_logger(__name__)

# Key under which the session id is kept inside the signed cookie
SESSION_KEY = "sessionId"

UPLOAD_CHUNK_BYTES = 1024 * 1024


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise ValidationError("Request body must be valid JSON")


async def _read_upload(file: UploadFile, limit: int) -> bytes:
    """Read an uploaded file into memory, refusing anything over ``limit``."""
    message = f"File exceeds the {limit} byte upload limit"
    if file.size is not None and file.size > limit:
        raise PayloadTooLargeError(message)

    chunks = []
    total = 0
    while chunk := await file.read(UPLOAD_CHUNK_BYTES):
        total += len(chunk)
        if total > limit:
            raise PayloadTooLargeError(message)
        chunks.append(chunk)
    return b"".join(chunks)


def create_api_router(
    store: SessionStore,
    resolver: CredentialResolver,
    gateway_factory: Callable[[], S3Gateway],
    *,
    max_upload_bytes: int,
) -> APIRouter:
    """Create the /api router with injected collaborators.

    Args:
        store: Session backend
        resolver: Validates connect payloads and assumes roles
        gateway_factory: Returns a new, unbound gateway
        max_upload_bytes: Upload size ceiling

    Returns:
        APIRouter with every console endpoint configured
    """
    router = APIRouter(prefix="/api", tags=["s3"])

    async def current_session(request: Request) -> Session:
        session_id = request.session.get(SESSION_KEY)
        if not session_id:
            raise Unauthorized("Not connected")

        session = store.get(session_id)
        if session is None:
            raise Unauthorized("Invalid session")
        return session

    async def bound_gateway(
        session: Session = Depends(current_session),
    ) -> S3Gateway:
        gateway = gateway_factory()
        await asyncio.to_thread(gateway.bind, session.credentials)
        return gateway

    def start_session(request: Request, record: CredentialRecord) -> ConnectResponse:
        # Reconnecting replaces whatever session the cookie pointed at
        previous = request.session.get(SESSION_KEY)
        if previous:
            store.delete(previous)

        session_id = store.create(record)
        request.session.clear()
        request.session[SESSION_KEY] = session_id
        return ConnectResponse(session_id=session_id)

    @router.post("/connect/credentials", response_model=ConnectResponse)
    async def connect_with_credentials(request: Request) -> ConnectResponse:
        """Open a session from static access keys."""
        payload = await _json_body(request)
        record = resolver.from_static_keys(payload)
        logger.info("Connected with access keys", region=record.region)
        return start_session(request, record)

    @router.post("/connect/role", response_model=ConnectResponse)
    async def connect_with_role(request: Request) -> ConnectResponse:
        """Open a session by assuming an IAM role."""
        payload = await _json_body(request)
        record = await asyncio.to_thread(resolver.from_role, payload)
        logger.info("Connected with assumed role", region=record.region)
        return start_session(request, record)

    @router.get(
        "/connection/status",
        response_model=ConnectionStatus,
        response_model_exclude_none=True,
    )
    async def connection_status(request: Request) -> ConnectionStatus:
        """Report whether the cookie maps to a usable session. Never fails."""
        try:
            session = store.get(request.session.get(SESSION_KEY))
            if session is None:
                return ConnectionStatus(connected=False)

            gateway = gateway_factory()
            await asyncio.to_thread(gateway.bind, session.credentials)
            return ConnectionStatus(connected=True, region=session.credentials.region)
        except Exception as e:
            logger.warning("Connection status check failed", error=str(e))
            return ConnectionStatus(connected=False)

    @router.post("/disconnect", response_model=SuccessResponse)
    async def disconnect(request: Request) -> SuccessResponse:
        """Drop the session and clear the cookie. Safe to call when not connected."""
        session_id = request.session.get(SESSION_KEY)
        request.session.clear()
        if session_id:
            try:
                store.delete(session_id)
            except Exception as e:
                logger.error("Session deletion failed", error=str(e))
                raise SessionStoreError("Failed to disconnect") from e
            logger.info("Disconnected")
        return SuccessResponse()

    @router.get(
        "/buckets",
        response_model=list[BucketDescriptor],
        response_model_exclude_none=True,
    )
    async def list_buckets(
        gateway: S3Gateway = Depends(bound_gateway),
    ) -> list[BucketDescriptor]:
        return await asyncio.to_thread(gateway.list_buckets)

    @router.get(
        "/buckets/{bucket}/objects",
        response_model=list[ObjectDescriptor],
        response_model_exclude_none=True,
    )
    async def list_objects(
        bucket: str,
        prefix: str = "",
        gateway: S3Gateway = Depends(bound_gateway),
    ) -> list[ObjectDescriptor]:
        return await asyncio.to_thread(gateway.list_objects, bucket, prefix)

    @router.get(
        "/buckets/{bucket}/objects/{key:path}/download",
        response_model=DownloadUrlResponse,
    )
    async def get_download_url(
        bucket: str,
        key: str,
        gateway: S3Gateway = Depends(bound_gateway),
    ) -> DownloadUrlResponse:
        url = await asyncio.to_thread(gateway.get_download_url, bucket, key)
        return DownloadUrlResponse(download_url=url)

    @router.delete("/buckets/{bucket}/objects/{key:path}", response_model=SuccessResponse)
    async def delete_object(
        bucket: str,
        key: str,
        gateway: S3Gateway = Depends(bound_gateway),
    ) -> SuccessResponse:
        await asyncio.to_thread(gateway.delete_object, bucket, key)
        return SuccessResponse()

    @router.post("/buckets/{bucket}/upload", response_model=SuccessResponse)
    async def upload_object(
        bucket: str,
        file: Optional[UploadFile] = File(None),
        key: Optional[str] = Form(None),
        gateway: S3Gateway = Depends(bound_gateway),
    ) -> SuccessResponse:
        if file is None:
            raise ValidationError("No file provided", fields={"file": "required"})
        if not key:
            raise ValidationError("No key provided", fields={"key": "required"})

        body = await _read_upload(file, max_upload_bytes)
        await asyncio.to_thread(
            gateway.upload_object, bucket, key, body, file.content_type
        )
        return SuccessResponse()

    return router
