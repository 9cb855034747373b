"""Structured JSON logging configuration.

Every record is one JSON object per line. Values passed through
``extra={...}`` become top-level keys, so call sites log identifiers as
``logger.info("User signed in", extra={"userId": user.id})``.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came from ``extra``
_RESERVED = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime'}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def __init__(self, static_fields: dict[str, Any] | None = None):
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            **self.static_fields,
            "timestamp": created.isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RESERVED and not callable(value)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Datetimes and enums in extra fields fall back to str()
        return json.dumps(entry, default=str)


def setup_structured_logging(level: str = "INFO", static_fields: dict[str, Any] | None = None):
    """Route the root logger and uvicorn's access log through JSONFormatter."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter(static_fields))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    access_logger = logging.getLogger("uvicorn.access")
    access_logger.handlers = [handler]
    access_logger.setLevel(logging.WARNING)
