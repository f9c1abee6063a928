"""Error taxonomy shared by the storage services and the HTTP layer."""
from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for application specific errors."""

    status_code = 500
    error_code = "app_error"
    default_detail = "An unexpected error occurred."

    def __init__(self, detail: str | None = None, *, extra: dict[str, Any] | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail
        self.extra = extra or {}


class DomainError(AppError):
    """Normalized domain error surfaced to API handlers."""


class BadRequestError(DomainError):
    status_code = 400
    error_code = "bad_request"
    default_detail = "Invalid request."


class InvalidInputError(BadRequestError):
    """A required path or key was missing or unusable; no backend call was made."""

    error_code = "invalid_input"
    default_detail = "A file path is required."


class NotFoundError(DomainError):
    status_code = 404
    error_code = "not_found"
    default_detail = "Resource not found."


class ObjectNotFoundError(NotFoundError):
    """The requested key does not exist in the bucket."""

    default_detail = "File not found."

    def __init__(self, key: str, detail: str | None = None) -> None:
        self.key = key
        super().__init__(detail or f"File not found: {key}", extra={"key": key})


class CancelledError(DomainError):
    status_code = 499
    error_code = "cancelled"
    default_detail = "Operation cancelled."


class BadGatewayError(DomainError):
    status_code = 502
    error_code = "bad_gateway"
    default_detail = "Upstream service failed."


class BackendError(BadGatewayError):
    """Any failure talking to, or reported by, the storage backend."""

    error_code = "backend_error"
    default_detail = "Storage backend request failed."

    def __init__(
        self,
        detail: str | None = None,
        *,
        operation: str | None = None,
        backend_code: str | None = None,
    ) -> None:
        self.operation = operation
        self.backend_code = backend_code
        payload: dict[str, Any] = {}
        if operation:
            payload["operation"] = operation
        if backend_code:
            payload["backend_code"] = backend_code
        super().__init__(detail, extra=payload)


class ServiceUnavailableError(DomainError):
    status_code = 503
    error_code = "service_unavailable"
    default_detail = "Service unavailable."
