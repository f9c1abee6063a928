"""Shared fixtures: an in-memory stand-in for the boto3 S3 client."""
from __future__ import annotations

import io
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from urllib.parse import quote

import pytest
from botocore.exceptions import ClientError

from s3browser.core.config import Settings

BUCKET = "test-bucket"
MODIFIED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def client_error(code: str, operation: str, status: int = 400, message: str = "") -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message or code},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class FakeBody:
    """Minimal ``StreamingBody``: read(amt) and close()."""

    def __init__(self, data: bytes) -> None:
        self._buffer = io.BytesIO(data)
        self.closed = False
        self.reads = 0

    def read(self, amt: Optional[int] = None) -> bytes:
        self.reads += 1
        return self._buffer.read(amt)

    def close(self) -> None:
        self.closed = True


class BlockingBody:
    """Returns one chunk, then blocks every further read until closed."""

    def __init__(self, first_chunk: bytes) -> None:
        self._first_chunk = first_chunk
        self._served = False
        self._release = threading.Event()
        self.closed = False

    def read(self, amt: Optional[int] = None) -> bytes:
        if not self._served:
            self._served = True
            return self._first_chunk
        self._release.wait(timeout=10)
        return b""

    def close(self) -> None:
        self.closed = True
        self._release.set()


@dataclass
class StoredObject:
    data: bytes
    content_type: Optional[str] = None
    body_factory: Optional[Callable[[], Any]] = None


class FakeS3Client:
    """Implements the subset of the S3 client API the services call."""

    def __init__(self) -> None:
        self.objects: dict[str, StoredObject] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, dict]] = []
        self.bodies: list[Any] = []
        self.closed = False

    def put(
        self,
        key: str,
        data: bytes = b"",
        *,
        content_type: Optional[str] = None,
        body_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.objects[key] = StoredObject(data=data, content_type=content_type, body_factory=body_factory)

    def _record(self, operation: str, **params) -> None:
        self.calls.append((operation, params))
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure

    def list_objects_v2(self, *, Bucket: str, Prefix: str = "", Delimiter: str = "", MaxKeys: int = 1000) -> dict:
        self._record("list_objects_v2", Bucket=Bucket, Prefix=Prefix, Delimiter=Delimiter, MaxKeys=MaxKeys)
        prefixes: list[str] = []
        contents: list[dict] = []
        for key in sorted(self.objects):
            if not key.startswith(Prefix):
                continue
            rest = key[len(Prefix):]
            if Delimiter and Delimiter in rest:
                common = Prefix + rest[: rest.index(Delimiter) + 1]
                if common not in prefixes:
                    prefixes.append(common)
                continue
            stored = self.objects[key]
            contents.append(
                {
                    "Key": key,
                    "Size": len(stored.data),
                    "LastModified": MODIFIED,
                    "ETag": f'"etag-{len(stored.data)}"',
                }
            )
        truncated = len(contents) + len(prefixes) > MaxKeys
        result: dict[str, Any] = {"IsTruncated": truncated, "KeyCount": len(contents) + len(prefixes)}
        if contents:
            result["Contents"] = contents[:MaxKeys]
        if prefixes:
            result["CommonPrefixes"] = [{"Prefix": p} for p in prefixes]
        return result

    def _lookup(self, key: str, operation: str, code: str) -> StoredObject:
        stored = self.objects.get(key)
        if stored is None:
            raise client_error(code, operation, status=404, message="Not Found")
        return stored

    def _metadata(self, stored: StoredObject) -> dict:
        data: dict[str, Any] = {
            "ContentLength": len(stored.data),
            "LastModified": MODIFIED,
            "ETag": '"abc123"',
        }
        if stored.content_type is not None:
            data["ContentType"] = stored.content_type
        return data

    def head_object(self, *, Bucket: str, Key: str) -> dict:
        self._record("head_object", Bucket=Bucket, Key=Key)
        return self._metadata(self._lookup(Key, "HeadObject", "404"))

    def get_object(self, *, Bucket: str, Key: str) -> dict:
        self._record("get_object", Bucket=Bucket, Key=Key)
        stored = self._lookup(Key, "GetObject", "NoSuchKey")
        body = stored.body_factory() if stored.body_factory else FakeBody(stored.data)
        self.bodies.append(body)
        return {**self._metadata(stored), "Body": body}

    def generate_presigned_url(self, ClientMethod: str, Params: dict, ExpiresIn: int = 3600) -> str:
        self._record("generate_presigned_url", ClientMethod=ClientMethod, Params=Params, ExpiresIn=ExpiresIn)
        return (
            f"https://{Params['Bucket']}.s3.example.com/{quote(Params['Key'])}"
            f"?X-Amz-Expires={ExpiresIn}&X-Amz-Signature=fake"
        )

    def head_bucket(self, *, Bucket: str) -> dict:
        self._record("head_bucket", Bucket=Bucket)
        return {}

    def close(self) -> None:
        self.closed = True


def make_settings(**overrides) -> Settings:
    values: dict[str, Any] = {
        "aws_bucket": BUCKET,
        "aws_region": "us-east-1",
        "base_directory": "",
        "stream_chunk_size": 4,
        "presign_ttl_seconds": 900,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def settings() -> Settings:
    return make_settings()
