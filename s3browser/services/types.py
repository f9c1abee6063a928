# s3browser/services/types.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class FileEntry:
    name: str
    path: str
    is_directory: bool
    size: int = 0
    mime_type: Optional[str] = None
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass(slots=True)
class DirectoryListing:
    path: str
    prefix: str
    files: list[FileEntry] = field(default_factory=list)
    has_more: bool = False

    @property
    def directory_count(self) -> int:
        return sum(1 for entry in self.files if entry.is_directory)

    @property
    def file_count(self) -> int:
        return sum(1 for entry in self.files if not entry.is_directory)


@dataclass(slots=True)
class ObjectStat:
    key: str
    size: int
    content_type: str
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
