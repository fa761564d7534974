"""
Logging configuration.

Called once by the entrypoints (run_api.py, main.py). Supports text
(human-readable) and JSON formats via LOG_FORMAT; LOG_LEVEL defaults to INFO.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import get_settings


class JSONFormatter(logging.Formatter):
    """Single-line JSON log formatter for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


# Third-party loggers that are noisy at INFO
_NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "google_genai",
    "urllib3",
]


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Set up the root logger.

    Args:
        level: Log level name; defaults to the LOG_LEVEL setting
        log_format: "text" or "json"; defaults to the LOG_FORMAT setting
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    resolved_level = getattr(logging, level_name, logging.INFO)
    fmt = (log_format or settings.log_format).lower()

    root = logging.getLogger()
    root.setLevel(resolved_level)

    # Remove any existing handlers to avoid duplicates on re-init
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved_level)

    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))

    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
