"""Logging utilities for the S3 browser application."""
import logging
import sys

from s3browser.core.config import Settings
from s3browser.core.request_context import get_request_id

LOGGER_NAME = "s3browser"

_factory_installed = False


def configure_logging(settings: Settings, *, logger_name: str = LOGGER_NAME) -> logging.Logger:
    """Configure the root logger and return the application logger.

    Args:
        settings: Application settings containing log-level information.
        logger_name: Name of the logger to retrieve.

    Returns:
        Configured logger instance.
    """

    global _factory_installed

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(filename)s:%(lineno)d] - request_id=%(request_id)s - %(message)s"
        ),
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # the app factory may run more than once per process (tests, reload)
    if not _factory_installed:
        old_factory = logging.getLogRecordFactory()

        def record_factory(*args, **kwargs) -> logging.LogRecord:
            record = old_factory(*args, **kwargs)
            record.request_id = get_request_id() or "system"
            return record

        logging.setLogRecordFactory(record_factory)
        _factory_installed = True

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)

    logging.getLogger("botocore").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("urllib3").setLevel(max(log_level, logging.WARNING))

    logger.debug("Logging configured with level %s", logging.getLevelName(log_level))
    return logger
