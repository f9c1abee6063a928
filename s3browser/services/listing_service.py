"""Single-level directory listings over a bucket prefix."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from s3browser.core.config import Settings
from s3browser.services.mime import guess_mime_type
from s3browser.services.paths import DELIMITER, listing_prefix, strip_prefix
from s3browser.services.s3_client import normalize_s3_error
from s3browser.services.types import DirectoryListing, FileEntry

logger = logging.getLogger(__name__)


class ListingService:
    """Turns one delimiter listing call into merged directory and file entries.

    Directories come first, in the order the backend reported the common
    prefixes, followed by files in backend key order. Every file is enriched
    by its own task that fills the slot of its input position, so the order
    does not depend on task completion. Enrichment is name-based and never
    awaits I/O, so the tasks run back to back on the event loop and need no
    concurrency cap; one listing is at most one backend page.
    """

    def __init__(self, settings: Settings, client: Any) -> None:
        self._settings = settings
        self._client = client

    async def list_directory(self, virtual_path: Optional[str] = "/") -> DirectoryListing:
        path = virtual_path or "/"
        prefix = listing_prefix(path, self._settings.base_directory)

        try:
            result = await asyncio.to_thread(
                self._client.list_objects_v2,
                Bucket=self._settings.aws_bucket,
                Prefix=prefix,
                Delimiter=DELIMITER,
                MaxKeys=self._settings.list_max_keys,
            )
        except Exception as exc:
            logger.warning("ListingService: list failed for prefix=%r: %s", prefix, exc)
            raise normalize_s3_error(exc, operation="ListObjectsV2") from exc

        listing = DirectoryListing(
            path=path,
            prefix=prefix,
            has_more=bool(result.get("IsTruncated")),
        )
        listing.files.extend(self._directory_entries(result.get("CommonPrefixes") or [], prefix))

        objects = [
            obj
            for obj in result.get("Contents") or []
            if self._is_listable_object(obj.get("Key") or "", prefix)
        ]
        listing.files.extend(await self._file_entries(objects, prefix))

        logger.debug(
            "ListingService: prefix=%r dirs=%d files=%d truncated=%s",
            prefix,
            listing.directory_count,
            listing.file_count,
            listing.has_more,
        )
        return listing

    def _directory_entries(self, common_prefixes: list[dict], prefix: str) -> list[FileEntry]:
        entries: list[FileEntry] = []
        for item in common_prefixes:
            full = item.get("Prefix")
            if not full:
                continue
            name = strip_prefix(full, prefix).rstrip(DELIMITER)
            if not name:
                continue
            entries.append(FileEntry(name=name, path=full, is_directory=True, size=0))
        return entries

    @staticmethod
    def _is_listable_object(key: str, prefix: str) -> bool:
        # "folder/" placeholders and the prefix object itself are not files
        return bool(key) and not key.endswith(DELIMITER) and key != prefix

    async def _file_entries(self, objects: list[dict], prefix: str) -> list[FileEntry]:
        if not objects:
            return []
        slots: list[Optional[FileEntry]] = [None] * len(objects)

        async def enrich(index: int, obj: dict) -> None:
            slots[index] = build_file_entry(obj, prefix)

        # cancelling the caller cancels every pending enrichment task via gather
        await asyncio.gather(*(enrich(index, obj) for index, obj in enumerate(objects)))
        return [entry for entry in slots if entry is not None]


def build_file_entry(obj: dict, prefix: str) -> FileEntry:
    """File entry for one ``Contents`` item of a listing response."""

    key = obj["Key"]
    name = strip_prefix(key, prefix)
    etag = (obj.get("ETag") or "").strip('"') or None
    return FileEntry(
        name=name,
        path=key,
        is_directory=False,
        size=int(obj.get("Size") or 0),
        mime_type=guess_mime_type(name),
        last_modified=obj.get("LastModified"),
        etag=etag,
    )
