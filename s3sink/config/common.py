"""Option groups shared by the object-storage sink connectors."""

from typing import Optional

from s3sink.config.schema import ConfigSchema, Importance, OptionType
from s3sink.config.types import (
    CompressionType,
    OutputFieldEncodingType,
    OutputFieldType,
    TimestampSourceType,
)
from s3sink.config.validators import (
    FileCompressionTypeValidator,
    OutputFieldEncodingTypeValidator,
    OutputFieldsValidator,
    TimestampSourceValidator,
    TimeZoneValidator,
)

FILE_COMPRESSION_TYPE_CONFIG = "file.compression.type"
FORMAT_OUTPUT_FIELDS_CONFIG = "format.output.fields"
FORMAT_OUTPUT_FIELDS_VALUE_ENCODING_CONFIG = "format.output.fields.value.encoding"
TIMESTAMP_TIMEZONE_CONFIG = "timestamp.timezone"
TIMESTAMP_SOURCE_CONFIG = "timestamp.source"

DEFAULT_TIMEZONE = "UTC"


def add_compression_type_config(
    schema: ConfigSchema, default: Optional[CompressionType]
) -> None:
    schema.define(
        FILE_COMPRESSION_TYPE_CONFIG,
        OptionType.STRING,
        default.value if default is not None else None,
        FileCompressionTypeValidator(),
        Importance.MEDIUM,
        "The compression type used for files put on S3. "
        f"The supported values are: {', '.join(CompressionType.names())}.",
    )


def add_output_fields_format_config_group(
    schema: ConfigSchema, default_field: Optional[OutputFieldType]
) -> None:
    schema.define(
        FORMAT_OUTPUT_FIELDS_CONFIG,
        OptionType.LIST,
        default_field.value if default_field is not None else None,
        OutputFieldsValidator(),
        Importance.MEDIUM,
        "Fields to put into output files. "
        f"The supported values are: {', '.join(OutputFieldType.names())}.",
    )
    schema.define(
        FORMAT_OUTPUT_FIELDS_VALUE_ENCODING_CONFIG,
        OptionType.STRING,
        None,
        OutputFieldEncodingTypeValidator(),
        Importance.MEDIUM,
        "The type of encoding for the value field. "
        f"The supported values are: {', '.join(OutputFieldEncodingType.names())}.",
    )


def add_timestamp_config(schema: ConfigSchema) -> None:
    schema.define(
        TIMESTAMP_TIMEZONE_CONFIG,
        OptionType.STRING,
        DEFAULT_TIMEZONE,
        TimeZoneValidator(),
        Importance.LOW,
        "Specifies the timezone in which the dates and time for the timestamp "
        "variable will be treated. Use standard short and long names. Default is UTC",
    )
    schema.define(
        TIMESTAMP_SOURCE_CONFIG,
        OptionType.STRING,
        TimestampSourceType.WALLCLOCK.value,
        TimestampSourceValidator(),
        Importance.LOW,
        "Specifies the timestamp variable source. Default is wall-clock.",
    )
