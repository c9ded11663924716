"""CAMPEX — Structured JSON Logging and the relationship error log."""

import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from campex.config import settings


class JSONFormatter(logging.Formatter):
    """Produces structured JSON log lines for production observability."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        # Attach extra fields if present
        for key in ("endpoint", "entity_id", "offset", "duration_ms", "status_code"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)
        return json.dumps(log_entry)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger with structured JSON handler."""
    logger = logging.getLogger(f"campex.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger


class ErrorLog:
    """Append-only error log for relationship and processing errors.

    Every message becomes one ``<iso timestamp>: <message>`` line in the log
    file and one ERROR record on the ``campex.errors`` logger.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = get_logger("errors")
        self.count = 0

    def log_error(self, message: str) -> None:
        timestamp = datetime.now(timezone.utc).isoformat()
        self.logger.error(message)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(f"{timestamp}: {message}\n")
        self.count += 1

    __call__ = log_error
