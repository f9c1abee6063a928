"""Service registry that wires all application services together."""
import asyncio
import logging
from typing import Any, Optional

from s3browser.core.config import Settings
from s3browser.core.metrics import MetricsCollector
from s3browser.core.request_context import request_context
from s3browser.core.server_info import ServerInfo
from s3browser.services.access_service import AccessService
from s3browser.services.health_service import HealthService
from s3browser.services.listing_service import ListingService
from s3browser.services.s3_client import build_s3_client

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Container object for dependency injection.

    Owns the single S3 client; every service receives the same instance.
    """

    def __init__(self, settings: Settings, *, client: Optional[Any] = None) -> None:
        self.settings = settings
        self.client = client if client is not None else build_s3_client(settings)
        self.metrics = MetricsCollector()
        self.server_info = ServerInfo(settings)
        self.listing_service = ListingService(settings, self.client)
        self.access_service = AccessService(settings, self.client)
        self.health_service = HealthService(settings, self.client)
        self._lifecycle_lock = asyncio.Lock()
        self._started = False

    async def startup(self) -> None:
        async with self._lifecycle_lock:
            if self._started:
                return
            with request_context("bg:registry"):
                logger.info(
                    "Serving bucket %s (base directory %r), version %s",
                    self.settings.aws_bucket,
                    self.settings.base_directory or "/",
                    self.server_info.version_string(),
                )
            self._started = True

    async def shutdown(self) -> None:
        async with self._lifecycle_lock:
            if not self._started:
                return
            with request_context("bg:registry"):
                logger.info("Closing S3 client")
                close = getattr(self.client, "close", None)
                if callable(close):
                    await asyncio.to_thread(close)
            self._started = False
