"""Logging configuration for the event display service."""

import json
import logging
import logging.handlers
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from .config import Settings

SINK_LOGGER_NAME = "event_display.sink"
TEXT_FORMAT = "%(message)s"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def build_formatter(log_format: str) -> logging.Formatter:
    """Return the formatter for LOG_FORMAT ("text" or "json")."""
    if log_format == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT)


@contextmanager
def open_log_sink(
    settings: Settings,
    name: str = SINK_LOGGER_NAME,
) -> Iterator[logging.Logger]:
    """
    Open the console + file log sink and yield a logger writing to both.

    The logger does not propagate to the root logger, so it is the only
    writer for event lines. Handlers are flushed and closed on exit.

    Args:
        settings: Runtime settings (log file path, level and format).
        name: Logger name.

    Raises:
        OSError: If the log file cannot be opened.
    """
    log_path = Path(settings.log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = build_formatter(settings.log_format)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        mode="a",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    handlers: list[logging.Handler] = [console_handler, file_handler]

    logger = logging.getLogger(name)
    logger.setLevel(settings.log_level)
    logger.propagate = False
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    try:
        yield logger
    finally:
        for handler in handlers:
            logger.removeHandler(handler)
            handler.flush()
            handler.close()

