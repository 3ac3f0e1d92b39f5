"""
Logging configuration for qubitsim.

Console/file handlers with either a plain or a JSON-structured format.
Library modules only call ``logging.getLogger(__name__)``; handlers are
attached once by the application (the CLI) through ``setup_logger``.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
import json
from datetime import datetime, timezone


PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """JSON-structured log formatter with metadata."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as one JSON object per line."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Passed as logger.info(..., extra={"metadata": {...}})
        if hasattr(record, "metadata"):
            log_data["metadata"] = record.metadata

        return json.dumps(log_data, default=str)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return StructuredFormatter()
    return logging.Formatter(fmt=PLAIN_FORMAT, datefmt=DATE_FORMAT)


def setup_logger(
    name: str = "qubitsim",
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up and configure a logger.

    Args:
        name: Logger name (default: "qubitsim", the package root)
        level: Logging level (default: INFO)
        log_file: Optional file path for log output
        json_format: Use JSON-structured logging (default: False)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(_make_formatter(json_format))
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(_make_formatter(json_format))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "qubitsim") -> logging.Logger:
    """
    Get an existing logger or create a new one with default settings.

    Args:
        name: Logger name (default: "qubitsim")

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        setup_logger(name)
    return logger
