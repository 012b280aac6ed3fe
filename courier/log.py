"""
Structured logging for courier.

Modules log through structlog with key/value context:

    logger = get_logger(__name__)
    logger.info("Message sent", queue_url=url, message_id=mid)

Events are handed to the stdlib logger of the same name ("courier.*"), so
the host application's logging configuration decides what is shown. With
no configuration, only warnings and errors reach stderr.

courier never configures logging on import. Applications that want JSON
lines from courier call configure_logging() once at startup.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

import structlog

from courier.config import get_settings


def _add_timestamp(logger, method_name, event_dict):
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def configure_logging(level: str | None = None) -> None:
    """
    Write courier's events to stdout as JSON lines.

    `level` defaults to CourierSettings.log_level.
    """
    if level is None:
        level = get_settings().log_level
    structlog.configure(
        processors=[
            _add_timestamp,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("courier")
    root.handlers = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))
    root.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger writing to the stdlib logger `name`."""
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )
