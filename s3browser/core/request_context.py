"""Per-request identifiers carried through log records."""
from __future__ import annotations

import re
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator
from uuid import uuid4

REQUEST_ID_HEADER = "X-Request-ID"

_MAX_REQUEST_ID_LENGTH = 128
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]+$")

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a caller supplied id when it is safe to log, otherwise mint one."""

    candidate = (incoming or "").strip()
    if candidate and len(candidate) <= _MAX_REQUEST_ID_LENGTH and _REQUEST_ID_PATTERN.match(candidate):
        return candidate
    return uuid4().hex


def get_request_id() -> str | None:
    return _request_id.get()


@contextmanager
def request_context(request_id: str) -> Iterator[None]:
    token = _request_id.set(request_id)
    try:
        yield
    finally:
        _request_id.reset(token)
