"""Structured logging configuration."""
import logging
import sys
import json
from datetime import datetime, timezone


# Extra fields services attach through ``logger.info(..., extra={...})``
CONTEXT_FIELDS = ("company_id", "user_id", "request_id")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with tenant and request context when present."""

    def __init__(self, context_fields=CONTEXT_FIELDS):
        super().__init__()
        self.context_fields = context_fields

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update(
            (field, getattr(record, field))
            for field in self.context_fields
            if getattr(record, field, None) is not None
        )
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(debug: bool = False) -> None:
    """Route every logger through a single JSON handler on stdout."""
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
