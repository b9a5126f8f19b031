"""s3sink - configuration model for an S3 sink connector.

Validates the flat key/value configuration handed over by the connector
runtime and exposes it as a typed, resolved S3SinkConfig.
"""

__version__ = "0.1.0"

from s3sink.config import (
    CompressionType,
    OutputField,
    OutputFieldEncodingType,
    OutputFieldType,
    S3SinkConfig,
    TimestampSource,
    TimestampSourceType,
    build_schema,
)
from s3sink.core.exceptions import (
    ConfigError,
    InvalidValueError,
    MissingRequiredError,
    S3SinkError,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "S3SinkConfig",
    "build_schema",
    "CompressionType",
    "OutputField",
    "OutputFieldEncodingType",
    "OutputFieldType",
    "TimestampSource",
    "TimestampSourceType",
    # Exceptions
    "S3SinkError",
    "ConfigError",
    "InvalidValueError",
    "MissingRequiredError",
]
