"""Schemas for the bucket browser endpoints."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from s3browser.services.paths import parent_path
from s3browser.services.types import DirectoryListing


class FileEntry(BaseModel):
    """Single file/folder entry representation."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    path: str = Field(..., description="Full storage key, or common prefix for directories")
    size: int = 0
    is_directory: bool
    mime_type: Optional[str] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


class FileListingResponse(BaseModel):
    """Directory listing response."""

    path: str
    prefix: str
    parent_path: Optional[str] = None
    files: List[FileEntry]
    file_count: int
    directory_count: int
    has_more: bool = False

    @classmethod
    def from_listing(cls, listing: DirectoryListing) -> "FileListingResponse":
        return cls(
            path=listing.path,
            prefix=listing.prefix,
            parent_path=parent_path(listing.path),
            files=[FileEntry.model_validate(entry) for entry in listing.files],
            file_count=listing.file_count,
            directory_count=listing.directory_count,
            has_more=listing.has_more,
        )


class VersionResponse(BaseModel):
    """Build and runtime version information."""

    version: str
    version_string: str
    git_commit: str
    build_time: str
    python_version: str
    is_release: bool
    started_at: str
    uptime: str
