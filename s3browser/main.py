"""FastAPI application factory."""
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers, MutableHeaders

from s3browser import __version__
from s3browser.api.error_handlers import register_exception_handlers
from s3browser.api.router import api_router
from s3browser.core.config import Settings, load_settings
from s3browser.core.logging import LOGGER_NAME, configure_logging
from s3browser.core.metrics import MetricsCollector
from s3browser.core.request_context import REQUEST_ID_HEADER, request_context, resolve_request_id
from s3browser.services import ServiceRegistry

logger = logging.getLogger(LOGGER_NAME)


class RequestIdMiddleware:
    """Tags every request with an id and records its latency per route."""

    def __init__(self, app, metrics: MetricsCollector) -> None:
        self.app = app
        self.metrics = metrics

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = resolve_request_id(Headers(scope=scope).get(REQUEST_ID_HEADER))
        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                headers = MutableHeaders(scope=message)
                headers[REQUEST_ID_HEADER] = request_id
            await send(message)

        with request_context(request_id):
            try:
                await self.app(scope, receive, send_wrapper)
            finally:
                duration_ms = int((time.perf_counter() - start) * 1000)
                metric_name = f"api.{self._route_path(scope)}"
                self.metrics.record(metric_name, status_code=status_code, duration_ms=duration_ms)
                if self.metrics.should_alert(metric_name, **self._metric_threshold_overrides(metric_name)):
                    logger.warning("Metric alert for %s (slow or error rate)", metric_name)

    @staticmethod
    def _route_path(scope) -> str:
        route = scope.get("route")
        return getattr(route, "path", None) or scope.get("path") or ""

    @classmethod
    def _metric_threshold_overrides(cls, metric_name: str) -> dict[str, int]:
        # proxied downloads last as long as the transfer
        return {
            "api./api/stream": {"avg_ms": 600_000},
        }.get(metric_name, {})


def create_app(settings: Optional[Settings] = None, *, client: Optional[Any] = None) -> FastAPI:
    """Build the application around one explicit settings object.

    Args:
        settings: Resolved settings; read from the environment when omitted.
        client: Pre-built S3 client, mainly for tests.
    """

    settings = settings or load_settings()
    configure_logging(settings)
    registry = ServiceRegistry(settings, client=client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await registry.startup()
        try:
            yield
        finally:
            await registry.shutdown()

    app = FastAPI(
        title="S3 Browser API",
        description="Directory view and download gateway over an S3 bucket",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = registry
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "Content-Length", REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestIdMiddleware, metrics=registry.metrics)

    app.include_router(api_router)
    register_exception_handlers(app)
    return app
