"""boto3 client construction and backend error normalization."""
from __future__ import annotations

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from s3browser.core.config import Settings
from s3browser.core.exceptions import BackendError, DomainError, ObjectNotFoundError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def build_s3_client(settings: Settings):
    """Create the process-wide S3 client.

    boto3 clients are thread-safe, so the single instance (and its connection
    pool) is shared by every request thread.
    """

    client_kwargs = {
        "service_name": "s3",
        "region_name": settings.aws_region,
        "verify": settings.aws_verify_ssl,
    }
    if settings.aws_endpoint:
        client_kwargs["endpoint_url"] = settings.aws_endpoint
    if settings.has_static_credentials:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
        if settings.aws_session_token:
            client_kwargs["aws_session_token"] = settings.aws_session_token

    addressing_style = "path" if settings.aws_use_path_style else "auto"
    client_kwargs["config"] = Config(
        signature_version="s3v4",
        s3={"addressing_style": addressing_style},
        connect_timeout=settings.s3_connect_timeout,
        read_timeout=settings.s3_read_timeout,
        retries={"max_attempts": settings.s3_max_attempts, "mode": "standard"},
    )

    logger.info(
        "S3 client configured for bucket=%s region=%s endpoint=%s",
        settings.aws_bucket,
        settings.aws_region,
        settings.aws_endpoint or "aws",
    )
    return boto3.client(**client_kwargs)


def client_error_code(exc: ClientError) -> str:
    response = getattr(exc, "response", {}) or {}
    code = str((response.get("Error") or {}).get("Code") or "")
    if not code:
        status = (response.get("ResponseMetadata") or {}).get("HTTPStatusCode")
        code = str(status or "")
    return code


def is_not_found(exc: Exception) -> bool:
    return isinstance(exc, ClientError) and client_error_code(exc) in NOT_FOUND_CODES


def normalize_s3_error(exc: Exception, *, operation: str, key: str | None = None) -> DomainError:
    """Map a boto3/botocore failure onto the service error taxonomy."""

    if isinstance(exc, DomainError):
        return exc
    if key is not None and is_not_found(exc):
        return ObjectNotFoundError(key)
    if isinstance(exc, ClientError):
        code = client_error_code(exc)
        message = (exc.response.get("Error") or {}).get("Message") or str(exc)
        return BackendError(f"{operation} failed: {message}", operation=operation, backend_code=code or None)
    return BackendError(f"{operation} failed: {exc}", operation=operation)
