"""Validators for connector configuration options.

Each validator checks a single parsed option value against a domain rule and
raises InvalidValueError when the rule is violated. ``None`` means the option
was not supplied and is always accepted; whether a setting is required is
decided by S3SinkConfig, not by its validators.
"""

import logging
from typing import Any, Optional, Protocol

from pydantic import AnyUrl, SecretStr, TypeAdapter, ValidationError

from s3sink.config.types import (
    CompressionType,
    OutputFieldEncodingType,
    OutputFieldType,
    TimestampSourceType,
    parse_timezone,
    region_for_name,
    supported_regions,
)
from s3sink.core import templates
from s3sink.core.exceptions import InvalidValueError

_logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)


class Validator(Protocol):
    """Checks the parsed value of one option."""

    def ensure_valid(self, name: str, value: Any) -> None: ...


class NonEmptyPassword:
    """Rejects secrets that are empty or blank."""

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is None:
            return
        secret = value.get_secret_value() if isinstance(value, SecretStr) else value
        if not str(secret).strip():
            raise InvalidValueError(
                name, SecretStr(str(secret)), "Password must be non-empty"
            )


class NonEmptyString:
    """Rejects strings that are empty or blank."""

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is not None and not str(value).strip():
            raise InvalidValueError(name, value, "String must be non-empty")


class UrlValidator:
    """Rejects values that are not absolute URLs with a host."""

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is None:
            return
        try:
            url = _url_adapter.validate_python(value)
        except ValidationError as e:
            raise InvalidValueError(
                name, value, f"should be valid URL ({e.errors()[0]['msg']})"
            ) from e
        if not url.host:
            raise InvalidValueError(name, value, "should be valid URL with a host")


class RegionValidator:
    """Rejects region names unknown to the S3 endpoint data."""

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is None:
            return
        try:
            region_for_name(value)
        except ValueError as e:
            raise InvalidValueError(
                name,
                value,
                "supported values are: " + ", ".join(supported_regions()),
                valid_values=supported_regions(),
            ) from e


class TimeZoneValidator:
    """Rejects values that cannot be parsed into a timezone."""

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is None:
            return
        try:
            parse_timezone(value)
        except ValueError as e:
            raise InvalidValueError(name, value, str(e)) from e


class _NamedEnumValidator:
    """Base for validators accepting the names of a closed enumeration."""

    enum_type: Any = None
    description = "value"

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is None:
            return
        try:
            self.enum_type(value)
        except ValueError as e:
            names = self.enum_type.names()
            raise InvalidValueError(
                name,
                value,
                f"{self.description} should be one of: {', '.join(names)}",
                valid_values=names,
            ) from e


class TimestampSourceValidator(_NamedEnumValidator):
    enum_type = TimestampSourceType
    description = "timestamp source"


class FileCompressionTypeValidator(_NamedEnumValidator):
    enum_type = CompressionType
    description = "compression type"


class OutputFieldEncodingTypeValidator(_NamedEnumValidator):
    enum_type = OutputFieldEncodingType
    description = "output field encoding"


class OutputFieldsValidator:
    """Rejects output field lists containing unknown field names."""

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is None:
            return
        for field_name in value:
            try:
                OutputFieldType(field_name)
            except ValueError as e:
                names = OutputFieldType.names()
                raise InvalidValueError(
                    name,
                    value,
                    f"unsupported output field '{field_name}', "
                    f"supported values are: {', '.join(names)}",
                    valid_values=names,
                ) from e


class TemplateValidator:
    """Rejects patterns that the template engine cannot parse."""

    def ensure_valid(self, name: str, value: Any) -> None:
        if value is not None:
            templates.parse(value, name=name)


class CompositeValidator:
    """Runs several validators in order; the first failure wins."""

    def __init__(self, *validators: Validator):
        self.validators = validators

    def ensure_valid(self, name: str, value: Any) -> None:
        for validator in self.validators:
            validator.ensure_valid(name, value)


class DeprecatedOption:
    """Logs a deprecation warning, then delegates to the wrapped validator."""

    def __init__(
        self,
        validator: Validator,
        message: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.validator = validator
        self.message = message
        self.logger = logger or _logger

    def ensure_valid(self, name: str, value: Any) -> None:
        self.logger.warning(self.message, extra={"context": {"option": name}})
        self.validator.ensure_valid(name, value)


def deprecated(
    validator: Validator,
    message: str,
    logger: Optional[logging.Logger] = None,
) -> DeprecatedOption:
    """Wrap a validator so that every use of its option logs ``message``."""
    return DeprecatedOption(validator, message, logger=logger)
