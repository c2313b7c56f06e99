# site_planner/logging_config.py
"""
JSON logging for site-planner.

Records go to stderr as one JSON object per line; stdout belongs to the
CLI tables and the MCP server.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

VERBOSITY_LEVELS = {
    "quiet": logging.WARNING,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}

# Third-party loggers kept at INFO or above even in verbose mode
LIBRARY_LOGGERS = ("fastmcp", "aiosqlite")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, timestamped from the record itself."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(verbosity: str = "normal") -> None:
    """
    Install the JSON stderr handler on the root logger.

    Replaces any handlers already installed, so calling it again (the server
    does once the config is loaded) only changes the level.

    Args:
        verbosity: "quiet", "normal" or "verbose" (unknown values mean normal)
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.INFO)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(JsonFormatter())

    logging.getLogger().handlers[:] = [stderr_handler]
    logging.getLogger().setLevel(level)

    for name in LIBRARY_LOGGERS:
        library_logger = logging.getLogger(name)
        library_logger.handlers[:] = [stderr_handler]
        library_logger.setLevel(max(level, logging.INFO))
        library_logger.propagate = False
