"""
Logging configuration for rancli.

Provides:
- Human-readable logs for interactive use
- JSON-formatted logs for scripted use (machine-readable)

Logs go to stderr so command output on stdout stays pipeable.

Usage:
    from rancli.logging_config import setup_logging

    setup_logging(level="DEBUG")
    logger = logging.getLogger(__name__)
    logger.info("Listing nodes", extra={"server": "http://localhost:5150"})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Standard LogRecord attributes, not copied into the extra fields
_SKIP_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
})


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _SKIP_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {
        "timestamp": "2024-01-15T10:30:00.123456Z",
        "level": "WARNING",
        "logger": "rancli.cli.filter_parser",
        "message": "Kind filters are not supported yet; ignoring 'x'",
        ...
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """
    Human-readable log formatter.

    Output format:
    2024-01-15 10:30:00 WARNING  [rancli.client.client] Transport error ... server=http://...
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            level = f"{color}{level}{self.RESET}"

        extra_str = " ".join(f"{k}={v}" for k, v in _extra_fields(record).items())
        if extra_str:
            extra_str = " " + extra_str

        message = f"{timestamp} {level:8} [{record.name}] {record.getMessage()}{extra_str}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(level: str = "WARNING", json_format: bool = False) -> None:
    """
    Configure logging for the CLI.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = DevelopmentFormatter(use_colors=sys.stderr.isatty())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
