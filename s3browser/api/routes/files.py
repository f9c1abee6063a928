"""Bucket browsing and download endpoints."""
import asyncio
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse, StreamingResponse
from starlette.types import Receive, Scope, Send

from s3browser.api.dependencies import get_access_service, get_listing_service
from s3browser.core.exceptions import CancelledError, InvalidInputError
from s3browser.schemas import FileEntry, FileListingResponse
from s3browser.services.access_service import AccessService, ObjectStream
from s3browser.services.listing_service import ListingService
from s3browser.services.paths import base_name

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_file(file: Optional[str]) -> str:
    if not file or not file.strip():
        raise InvalidInputError("File path is required")
    return file


class ObjectStreamResponse(StreamingResponse):
    """Proxied object body that is released however sending ends.

    Starlette stops pulling from the body when the client disconnects, possibly
    before the first chunk, so the stream is closed here rather than only by
    its own iterator.
    """

    def __init__(self, stream: ObjectStream, **kwargs) -> None:
        self.object_stream = stream
        super().__init__(stream, **kwargs)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            if not self.object_stream.closed:
                logger.info("Download of %s ended before the body was drained", self.object_stream.key)
            await self.object_stream.aclose()


def attachment_disposition(key: str) -> str:
    """``Content-Disposition`` value that survives non-ASCII file names."""

    filename = base_name(key) or "download"
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "").replace("?", "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/list", response_model=FileListingResponse, summary="List one directory level")
async def list_directory(
    path: str = Query("/", description="Virtual directory path"),
    listing_service: ListingService = Depends(get_listing_service),
) -> FileListingResponse:
    try:
        listing = await listing_service.list_directory(path or "/")
    except asyncio.CancelledError:
        logger.info("List request cancelled for %s", path)
        raise CancelledError("Listing cancelled")
    return FileListingResponse.from_listing(listing)


@router.get("/open", summary="Redirect to a presigned URL for inline viewing")
async def open_file(
    file: Optional[str] = Query(None, description="Full storage key"),
    access_service: AccessService = Depends(get_access_service),
) -> RedirectResponse:
    key = _require_file(file)
    url = await access_service.presigned_url(key)
    return RedirectResponse(url, status_code=307)


@router.get("/download", summary="Redirect to a presigned URL as an attachment")
async def download_file(
    file: Optional[str] = Query(None, description="Full storage key"),
    access_service: AccessService = Depends(get_access_service),
) -> RedirectResponse:
    key = _require_file(file)
    url = await access_service.presigned_url(key)
    response = RedirectResponse(url, status_code=307)
    response.headers["Content-Disposition"] = attachment_disposition(key)
    return response


@router.get("/stream", summary="Proxy the object body through this server")
async def stream_file(
    file: Optional[str] = Query(None, description="Full storage key"),
    access_service: AccessService = Depends(get_access_service),
) -> StreamingResponse:
    key = _require_file(file)
    stat = await access_service.metadata(key)
    stream = await access_service.open_stream(key)

    headers = {
        "Content-Disposition": attachment_disposition(key),
        "Content-Length": str(stream.content_length if stream.content_length is not None else stat.size),
    }
    return ObjectStreamResponse(stream, media_type=stat.content_type, headers=headers)


@router.get("/info", response_model=FileEntry, summary="Object metadata without the body")
async def file_info(
    file: Optional[str] = Query(None, description="Full storage key"),
    access_service: AccessService = Depends(get_access_service),
) -> FileEntry:
    key = _require_file(file)
    info = await access_service.file_info(key)
    return FileEntry.model_validate(info)
