"""Per-object access: presigned links, metadata lookups and proxied streams."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Optional

from s3browser.core.config import Settings
from s3browser.core.exceptions import InvalidInputError
from s3browser.services.mime import guess_mime_type
from s3browser.services.paths import DELIMITER, base_name
from s3browser.services.s3_client import normalize_s3_error
from s3browser.services.types import FileEntry, ObjectStat

logger = logging.getLogger(__name__)


class ObjectStream:
    """Open object body that is read chunk by chunk, never buffered whole.

    Iterating yields the body in ``chunk_size`` pieces. The underlying HTTP
    connection is released when iteration ends for any reason (exhaustion,
    error, cancellation or an early ``aclose``).
    """

    def __init__(
        self,
        key: str,
        body: Any,
        *,
        content_type: str,
        content_length: Optional[int],
        chunk_size: int,
    ) -> None:
        self.key = key
        self.content_type = content_type
        self.content_length = content_length
        self._body = body
        self._chunk_size = chunk_size
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.iter_chunks()

    async def __aenter__(self) -> "ObjectStream":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await asyncio.to_thread(self._body.read, self._chunk_size)
                if not chunk:
                    break
                yield chunk
        except asyncio.CancelledError:
            logger.info("ObjectStream: read cancelled for %s", self.key)
            raise
        except Exception as exc:
            logger.warning("ObjectStream: read failed for %s: %s", self.key, exc)
            raise normalize_s3_error(exc, operation="GetObject", key=self.key) from exc
        finally:
            self._close_body()

    async def aclose(self) -> None:
        self._close_body()

    def _close_body(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._body.close()
        except Exception as exc:  # noqa: BLE001
            logger.debug("ObjectStream: body close failed for %s: %s", self.key, exc)


class AccessService:
    """Resolves single keys to download targets.

    Keys are full storage keys as returned in listings; unlike browse paths
    they are not re-rooted under the base directory, only checked against it.
    """

    def __init__(self, settings: Settings, client: Any) -> None:
        self._settings = settings
        self._client = client

    def _require_key(self, key: Optional[str], *, object_only: bool = False) -> str:
        if key is None or not key.strip():
            raise InvalidInputError("File path is required")
        if object_only and key.endswith(DELIMITER):
            raise InvalidInputError(f"Not a file: {key}")
        base = self._settings.base_directory
        if base and not key.startswith(base + DELIMITER):
            raise InvalidInputError(f"Path is outside the browsable directory: {key}")
        return key

    async def presigned_url(self, key: Optional[str]) -> str:
        """Time-limited GET link; expiry is ``presign_ttl_seconds``."""

        key = self._require_key(key)
        try:
            return await asyncio.to_thread(
                self._client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self._settings.aws_bucket, "Key": key},
                ExpiresIn=self._settings.presign_ttl_seconds,
            )
        except Exception as exc:
            logger.warning("AccessService: presign failed for %s: %s", key, exc)
            raise normalize_s3_error(exc, operation="PresignGetObject") from exc

    async def metadata(self, key: Optional[str]) -> ObjectStat:
        key = self._require_key(key, object_only=True)
        try:
            data = await asyncio.to_thread(
                self._client.head_object,
                Bucket=self._settings.aws_bucket,
                Key=key,
            )
        except Exception as exc:
            logger.warning("AccessService: head failed for %s: %s", key, exc)
            raise normalize_s3_error(exc, operation="HeadObject", key=key) from exc

        return ObjectStat(
            key=key,
            size=int(data.get("ContentLength") or 0),
            content_type=resolve_content_type(key, data.get("ContentType")),
            last_modified=data.get("LastModified"),
            etag=(data.get("ETag") or "").strip('"') or None,
        )

    async def file_info(self, key: Optional[str]) -> FileEntry:
        stat = await self.metadata(key)
        return FileEntry(
            name=base_name(stat.key),
            path=stat.key,
            is_directory=False,
            size=stat.size,
            mime_type=stat.content_type,
            last_modified=stat.last_modified,
            etag=stat.etag,
        )

    async def open_stream(self, key: Optional[str]) -> ObjectStream:
        """Start a GET and hand back the unread body.

        The caller owns the returned stream and must either exhaust it or
        call ``aclose``.
        """

        key = self._require_key(key, object_only=True)
        try:
            data = await asyncio.to_thread(
                self._client.get_object,
                Bucket=self._settings.aws_bucket,
                Key=key,
            )
        except Exception as exc:
            logger.warning("AccessService: get failed for %s: %s", key, exc)
            raise normalize_s3_error(exc, operation="GetObject", key=key) from exc

        length = data.get("ContentLength")
        return ObjectStream(
            key,
            data["Body"],
            content_type=resolve_content_type(key, data.get("ContentType")),
            content_length=int(length) if length is not None else None,
            chunk_size=self._settings.stream_chunk_size,
        )


def resolve_content_type(key: str, declared: Optional[str]) -> str:
    """Declared backend content type when present, else the name-based guess."""

    if declared and declared.strip():
        return declared
    return guess_mime_type(key)
