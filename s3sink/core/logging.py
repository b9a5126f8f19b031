"""Structured logging configuration for s3sink."""

import logging
import sys
from typing import Optional

from json_log_formatter import JSONFormatter


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    connector_name: Optional[str] = None,
) -> None:
    """Configure logging for s3sink.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise use normal format
        connector_name: Optional connector instance name added to every record
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("s3sink")
    logger.setLevel(log_level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = StructuredFormatter()

    handler.setFormatter(formatter)
    if connector_name:
        handler.addFilter(ConnectorNameFilter(connector_name))
    logger.addHandler(handler)


class ConnectorNameFilter(logging.Filter):
    """Attach the connector instance name to records passing through a handler."""

    def __init__(self, connector_name: str):
        super().__init__()
        self.connector_name = connector_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "connector_name"):
            record.connector_name = self.connector_name
        return True


class StructuredFormatter(logging.Formatter):
    """Structured formatter that adds context to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with context."""
        context = getattr(record, "context", {})

        parts = [f"[{record.levelname}]"]

        if hasattr(record, "connector_name"):
            parts.append(f"connector={record.connector_name}")

        for key, value in context.items():
            parts.append(f"{key}={value}")

        parts.append(record.getMessage())

        return " ".join(parts)
