"""Pydantic schemas exposed by the application API."""
from .files import FileEntry, FileListingResponse, VersionResponse

__all__ = [
    "FileEntry",
    "FileListingResponse",
    "VersionResponse",
]
