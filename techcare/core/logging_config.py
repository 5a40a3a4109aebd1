"""Structured JSON logging configuration."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from techcare.config import settings

EXTRA_FIELDS = ("request_id", "request_path", "booking_id", "user_id")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = str(getattr(record, field))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(level: str | None = None) -> None:
    """Install the JSON formatter on the root logger.

    Reads the level from settings unless one is given. Output goes to stderr.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        if getattr(handler, "_techcare", False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter())
    handler._techcare = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)

    # Access logs are emitted by RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
