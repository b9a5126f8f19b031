"""Core module for s3sink package."""

from s3sink.core.exceptions import (
    ConfigError,
    InvalidValueError,
    MissingRequiredError,
    S3SinkError,
)
from s3sink.core.logging import configure_logging
from s3sink.core.templates import Template, parse, render

__all__ = [
    "S3SinkError",
    "ConfigError",
    "InvalidValueError",
    "MissingRequiredError",
    "configure_logging",
    "Template",
    "parse",
    "render",
]
