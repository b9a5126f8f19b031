"""Configuration of the S3 sink connector.

Two generations of option names are accepted. The legacy underscore names
(``aws_s3_bucket``) predate the current dotted names (``aws.s3.bucket.name``);
both are registered in the schema and every setting is resolved with the same
rule: the current name wins, the legacy name is used when the current one is
absent, and a built-in default applies when neither is set. Using a legacy name
logs a deprecation warning.
"""

import logging
from dataclasses import dataclass
from datetime import tzinfo
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from pydantic import SecretStr

from s3sink.config.common import (
    FILE_COMPRESSION_TYPE_CONFIG,
    FORMAT_OUTPUT_FIELDS_CONFIG,
    FORMAT_OUTPUT_FIELDS_VALUE_ENCODING_CONFIG,
    TIMESTAMP_SOURCE_CONFIG,
    TIMESTAMP_TIMEZONE_CONFIG,
    add_compression_type_config,
    add_output_fields_format_config_group,
    add_timestamp_config,
)
from s3sink.config.schema import ConfigSchema, Importance, OptionType
from s3sink.config.types import (
    DEFAULT_REGION,
    CompressionType,
    OutputField,
    OutputFieldEncodingType,
    OutputFieldType,
    TimestampSource,
    TimestampSourceType,
    parse_timezone,
    region_for_name,
)
from s3sink.config.validators import (
    CompositeValidator,
    FileCompressionTypeValidator,
    NonEmptyPassword,
    NonEmptyString,
    OutputFieldsValidator,
    RegionValidator,
    TemplateValidator,
    UrlValidator,
    Validator,
    deprecated,
)
from s3sink.core import templates
from s3sink.core.exceptions import MissingRequiredError

_logger = logging.getLogger(__name__)

AWS_ACCESS_KEY_ID_CONFIG = "aws.access.key.id"
AWS_SECRET_ACCESS_KEY_CONFIG = "aws.secret.access.key"
AWS_S3_BUCKET_NAME_CONFIG = "aws.s3.bucket.name"
AWS_S3_ENDPOINT_CONFIG = "aws.s3.endpoint"
AWS_S3_REGION_CONFIG = "aws.s3.region"
AWS_S3_PREFIX_CONFIG = "aws.s3.prefix"

# Legacy names
AWS_ACCESS_KEY_ID = "aws_access_key_id"
AWS_SECRET_ACCESS_KEY = "aws_secret_access_key"
AWS_S3_BUCKET = "aws_s3_bucket"
AWS_S3_ENDPOINT = "aws_s3_endpoint"
AWS_S3_REGION = "aws_s3_region"
AWS_S3_PREFIX = "aws_s3_prefix"
OUTPUT_FIELDS = "output_fields"
OUTPUT_COMPRESSION = "output_compression"

# Prefix variables that are no longer supported; they render as "".
DEPRECATED_PREFIX_VARIABLES = ("utc_date", "local_date")


@dataclass(frozen=True)
class PrecedencePair:
    """One setting known under a current and a legacy name."""

    current_key: str
    legacy_key: str
    default: Any = None

    def resolve(self, values: Mapping[str, Any]) -> Any:
        current = values.get(self.current_key)
        if current is not None:
            return current
        legacy = values.get(self.legacy_key)
        if legacy is not None:
            return legacy
        return self.default


ACCESS_KEY_ID = PrecedencePair(AWS_ACCESS_KEY_ID_CONFIG, AWS_ACCESS_KEY_ID)
SECRET_ACCESS_KEY = PrecedencePair(AWS_SECRET_ACCESS_KEY_CONFIG, AWS_SECRET_ACCESS_KEY)
BUCKET_NAME = PrecedencePair(AWS_S3_BUCKET_NAME_CONFIG, AWS_S3_BUCKET)
ENDPOINT = PrecedencePair(AWS_S3_ENDPOINT_CONFIG, AWS_S3_ENDPOINT)
REGION = PrecedencePair(AWS_S3_REGION_CONFIG, AWS_S3_REGION, DEFAULT_REGION)
PREFIX = PrecedencePair(AWS_S3_PREFIX_CONFIG, AWS_S3_PREFIX, "")
COMPRESSION_TYPE = PrecedencePair(
    FILE_COMPRESSION_TYPE_CONFIG, OUTPUT_COMPRESSION, CompressionType.GZIP.value
)
OUTPUT_FIELD_NAMES = PrecedencePair(FORMAT_OUTPUT_FIELDS_CONFIG, OUTPUT_FIELDS)

REQUIRED_SETTINGS = (ACCESS_KEY_ID, SECRET_ACCESS_KEY, BUCKET_NAME)


@dataclass(frozen=True)
class Setting:
    """Schema definition shared by the current and legacy name of a setting."""

    pair: PrecedencePair
    type: OptionType
    validator: Validator
    importance: Importance
    description: str
    # False when the current name is owned by a shared option group
    define_current: bool = True


# Options carry no default; defaults are applied by PrecedencePair.resolve.
SETTINGS = (
    Setting(
        ACCESS_KEY_ID,
        OptionType.PASSWORD,
        NonEmptyPassword(),
        Importance.MEDIUM,
        "AWS Access Key ID",
    ),
    Setting(
        SECRET_ACCESS_KEY,
        OptionType.PASSWORD,
        NonEmptyPassword(),
        Importance.MEDIUM,
        "AWS Secret Access Key",
    ),
    Setting(
        BUCKET_NAME,
        OptionType.STRING,
        NonEmptyString(),
        Importance.MEDIUM,
        "AWS S3 Bucket name",
    ),
    Setting(
        ENDPOINT,
        OptionType.STRING,
        UrlValidator(),
        Importance.LOW,
        "Explicit AWS S3 Endpoint Address, mainly for testing",
    ),
    Setting(
        REGION,
        OptionType.STRING,
        RegionValidator(),
        Importance.MEDIUM,
        "AWS S3 Region, e.g. us-east-1",
    ),
    Setting(
        PREFIX,
        OptionType.STRING,
        CompositeValidator(NonEmptyString(), TemplateValidator()),
        Importance.MEDIUM,
        "Prefix for stored objects, e.g. cluster-1/",
    ),
    Setting(
        OUTPUT_FIELD_NAMES,
        OptionType.LIST,
        OutputFieldsValidator(),
        Importance.MEDIUM,
        "Output fields. A comma separated list of one or more: "
        + ", ".join(
            field.value
            for field in (
                OutputFieldType.KEY,
                OutputFieldType.OFFSET,
                OutputFieldType.TIMESTAMP,
                OutputFieldType.VALUE,
            )
        ),
        define_current=False,
    ),
    Setting(
        COMPRESSION_TYPE,
        OptionType.STRING,
        FileCompressionTypeValidator(),
        Importance.MEDIUM,
        "Output compression. Valid values are: "
        + ", ".join(CompressionType.names()),
        define_current=False,
    ),
)


def build_schema(logger: Optional[logging.Logger] = None) -> ConfigSchema:
    """
    Build the schema of every option the connector accepts.

    Args:
        logger: Logger receiving deprecation warnings for legacy names

    Returns:
        Schema with current and legacy options
    """
    schema = ConfigSchema()
    for setting in SETTINGS:
        if setting.define_current:
            schema.define(
                setting.pair.current_key,
                setting.type,
                None,
                setting.validator,
                setting.importance,
                setting.description,
            )

    # Current compression and output field names are owned by the shared groups
    add_compression_type_config(schema, None)
    add_output_fields_format_config_group(schema, None)
    add_timestamp_config(schema)

    for setting in SETTINGS:
        schema.define(
            setting.pair.legacy_key,
            setting.type,
            None,
            deprecated(
                setting.validator,
                f"{setting.pair.legacy_key} property is deprecated please read "
                f"documentation for the new name {setting.pair.current_key}",
                logger=logger,
            ),
            setting.importance,
            setting.description,
        )
    return schema


class S3SinkConfig:
    """Validated, resolved configuration of an S3 sink connector instance.

    The raw mapping is parsed once at construction. All properties are
    computed on access from the parsed values, which are never modified.

    Raises:
        InvalidValueError: If any supplied value fails its option's rule
        MissingRequiredError: If neither name of the access key, secret key
            or bucket name has been set
    """

    def __init__(
        self,
        originals: Mapping[str, Any],
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger or _logger
        self._originals = MappingProxyType(dict(originals))
        self._values = MappingProxyType(
            build_schema(self._logger).parse(self._originals)
        )
        self._validate()

    def _validate(self) -> None:
        for pair in REQUIRED_SETTINGS:
            if pair.resolve(self._values) is None:
                raise MissingRequiredError(pair.current_key, pair.legacy_key)

    @property
    def originals(self) -> Mapping[str, Any]:
        """The raw configuration the connector was started with."""
        return self._originals

    @property
    def aws_access_key_id(self) -> SecretStr:
        return ACCESS_KEY_ID.resolve(self._values)

    @property
    def aws_secret_access_key(self) -> SecretStr:
        return SECRET_ACCESS_KEY.resolve(self._values)

    @property
    def aws_endpoint(self) -> Optional[str]:
        return ENDPOINT.resolve(self._values)

    @property
    def region(self) -> str:
        return region_for_name(REGION.resolve(self._values))

    @property
    def bucket_name(self) -> str:
        return BUCKET_NAME.resolve(self._values)

    @property
    def prefix(self) -> str:
        """Raw prefix pattern, empty when not configured."""
        return PREFIX.resolve(self._values)

    @property
    def prefix_template(self) -> str:
        """Prefix with deprecated variables stripped.

        Unknown variables are kept as ``{name}`` for later stages to resolve.
        """
        template = templates.parse(self.prefix, name=AWS_S3_PREFIX_CONFIG)
        bindings = {
            variable: self._deprecated_variable(variable)
            for variable in DEPRECATED_PREFIX_VARIABLES
        }
        return template.render(bindings, logger=self._logger)

    def _deprecated_variable(self, variable: str) -> Callable[[], str]:
        def produce() -> str:
            self._logger.warning(
                f"{variable} variable is deprecated please read documentation "
                "for the new name",
                extra={"context": {"variable": variable}},
            )
            return ""

        return produce

    @property
    def compression_type(self) -> CompressionType:
        return CompressionType(COMPRESSION_TYPE.resolve(self._values))

    @property
    def output_field_encoding_type(self) -> OutputFieldEncodingType:
        encoding = self._values.get(FORMAT_OUTPUT_FIELDS_VALUE_ENCODING_CONFIG)
        if encoding is None:
            return OutputFieldEncodingType.BASE64
        return OutputFieldEncodingType(encoding)

    @property
    def output_fields(self) -> list[OutputField]:
        """Fields to write, each with its encoding.

        Key and value use the configured encoding; other fields are not encoded.
        """
        field_names = OUTPUT_FIELD_NAMES.resolve(self._values)
        if field_names is None:
            return [
                OutputField(
                    field_type=OutputFieldType.VALUE,
                    encoding_type=OutputFieldEncodingType.BASE64,
                )
            ]
        encoding = self.output_field_encoding_type
        fields = []
        for field_name in field_names:
            field_type = OutputFieldType(field_name)
            fields.append(
                OutputField(
                    field_type=field_type,
                    encoding_type=(
                        encoding
                        if field_type in (OutputFieldType.KEY, OutputFieldType.VALUE)
                        else OutputFieldEncodingType.NONE
                    ),
                )
            )
        return fields

    @property
    def timezone(self) -> tzinfo:
        return parse_timezone(self._values[TIMESTAMP_TIMEZONE_CONFIG])

    @property
    def timestamp_source(self) -> TimestampSource:
        return TimestampSource(
            zone=self.timezone,
            type=TimestampSourceType(self._values[TIMESTAMP_SOURCE_CONFIG]),
        )

    def boto_client_kwargs(self) -> dict[str, Any]:
        """Build keyword arguments for a boto3/botocore S3 client."""
        client_config: dict[str, Any] = {
            "aws_access_key_id": self.aws_access_key_id.get_secret_value(),
            "aws_secret_access_key": self.aws_secret_access_key.get_secret_value(),
            "region_name": self.region,
        }

        # Custom endpoint (LocalStack, MinIO)
        if self.aws_endpoint:
            client_config["endpoint_url"] = self.aws_endpoint

        return client_config

    def __repr__(self) -> str:
        return (
            f"S3SinkConfig(bucket_name={self.bucket_name!r}, "
            f"region={self.region!r}, prefix={self.prefix!r})"
        )
