"""Logging setup for the land registry.

Logs are JSON lines by default so an operator can ship them as-is; the text
format is meant for a terminal.
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = ("land_id", "transaction_id", "collection", "operation", "error_code")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure the root logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Level name, case-insensitive
        fmt: "json" or "text"

    Returns:
        The handler that was installed
    """
    for existing in list(logging.root.handlers):
        if getattr(existing, "_land_registry", False):
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._land_registry = True
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
