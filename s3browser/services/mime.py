"""Content-type guessing from file names, without touching the backend."""
from __future__ import annotations

import mimetypes

DEFAULT_MIME_TYPE = "application/octet-stream"

# Checked before the platform registry so results do not depend on the host's
# mime.types files.
EXTENSION_MIME_TYPES: dict[str, str] = {
    # Images
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".jpe": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".heic": "image/heic",
    # Video
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    # Audio
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    # Documents and archives
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".tgz": "application/gzip",
    ".7z": "application/x-7z-compressed",
    ".rar": "application/vnd.rar",
    # Office
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".csv": "text/csv",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # Text and markup
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".json": "application/json",
    ".yaml": "application/x-yaml",
    ".yml": "application/x-yaml",
    ".xml": "application/xml",
    # Source code, best effort
    ".js": "application/javascript",
    ".ts": "text/typescript",
    ".go": "text/x-go",
    ".py": "text/x-python",
    ".java": "text/x-java-source",
    ".rb": "text/x-ruby",
    ".php": "application/x-php",
    ".cpp": "text/x-c++src",
    ".cc": "text/x-c++src",
    ".cxx": "text/x-c++src",
    ".c": "text/x-csrc",
    ".cs": "text/x-csharp",
    ".sh": "text/x-shellscript",
    ".bash": "text/x-shellscript",
}


def file_extension(filename: str) -> str:
    """Lower-cased last extension of the leaf name including the dot, or ``""``."""

    leaf = (filename or "").rsplit("/", 1)[-1]
    stem, dot, ext = leaf.rpartition(".")
    if not dot or not ext or not stem:
        return ""
    return f".{ext.lower()}"


def guess_mime_type(filename: str) -> str:
    """Best-effort content type for ``filename``; never raises."""

    ext = file_extension(filename)
    if not ext:
        return DEFAULT_MIME_TYPE
    known = EXTENSION_MIME_TYPES.get(ext)
    if known:
        return known
    guessed, _ = mimetypes.guess_type(f"file{ext}", strict=False)
    return guessed or DEFAULT_MIME_TYPE
