"""Exception handlers that render the error taxonomy as JSON bodies."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from s3browser.core.exceptions import CancelledError, DomainError, NotFoundError
from s3browser.core.logging import LOGGER_NAME
from s3browser.core.request_context import get_request_id

logger = logging.getLogger(LOGGER_NAME)


def error_body(detail: Any, error: str, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    """``{"detail", "error"}`` plus ``meta`` and the request id when known."""

    body: dict[str, Any] = {"detail": detail, "error": error}
    if meta:
        body["meta"] = meta
    request_id = get_request_id()
    if request_id:
        body["request_id"] = request_id
    return body


def _log_domain_error(request: Request, exc: DomainError) -> None:
    where = f"{request.method} {request.url.path}"
    if exc.status_code >= 500:
        # the backend failure is chained as __cause__
        logger.error("%s failed: %s", where, exc.detail, exc_info=exc.__cause__ or exc)
    elif isinstance(exc, (NotFoundError, CancelledError)):
        logger.info("%s: %s", where, exc.detail)
    else:
        logger.warning("%s rejected: %s", where, exc.detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach global exception handlers to the FastAPI app."""

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        _log_domain_error(request, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.detail, exc.error_code, exc.extra),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("%s %s invalid parameters: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_body(jsonable_encoder(exc.errors()), "validation_error"),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error", "internal_error"),
        )
