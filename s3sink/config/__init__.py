"""Configuration model for the S3 sink connector."""

from s3sink.config.s3_sink_config import PrecedencePair, S3SinkConfig, build_schema
from s3sink.config.schema import ConfigSchema, Importance, Option, OptionType
from s3sink.config.types import (
    CompressionType,
    OutputField,
    OutputFieldEncodingType,
    OutputFieldType,
    TimestampSource,
    TimestampSourceType,
)

__all__ = [
    "S3SinkConfig",
    "build_schema",
    "PrecedencePair",
    "ConfigSchema",
    "Option",
    "OptionType",
    "Importance",
    "CompressionType",
    "OutputField",
    "OutputFieldEncodingType",
    "OutputFieldType",
    "TimestampSource",
    "TimestampSourceType",
]
