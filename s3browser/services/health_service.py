"""Health check service."""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import ClientError

from s3browser.core.config import Settings
from s3browser.services.s3_client import client_error_code

logger = logging.getLogger(__name__)


class HealthService:
    """Probes bucket reachability for the health endpoint."""

    def __init__(self, settings: Settings, client: Any) -> None:
        self._settings = settings
        self._client = client

    async def check(self) -> dict:
        bucket_status = "reachable"
        detail = None
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self._settings.aws_bucket)
        except Exception as exc:  # noqa: BLE001
            code = client_error_code(exc) if isinstance(exc, ClientError) else ""
            bucket_status = "unreachable"
            detail = code or type(exc).__name__
            logger.warning("HealthService: bucket %s unreachable: %s", self._settings.aws_bucket, exc)

        payload = {
            "status": "healthy" if bucket_status == "reachable" else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "bucket": self._settings.aws_bucket,
            "bucket_status": bucket_status,
        }
        if detail:
            payload["detail"] = detail
        return payload
