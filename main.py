"""CLI entry-point for running the FastAPI application."""
from __future__ import annotations

import logging
import sys

import uvicorn

from s3browser.core.config import BucketNotConfigured, load_settings
from s3browser.main import create_app


def main() -> None:
    """Run the ASGI application using uvicorn."""
    try:
        settings = load_settings()
    except BucketNotConfigured as exc:
        logging.basicConfig(level=logging.ERROR)
        logging.getLogger("s3browser").error("Cannot start: %s", exc)
        sys.exit(1)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=2,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":
    main()
