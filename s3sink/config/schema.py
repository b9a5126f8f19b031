"""Option registry used to validate raw connector configuration.

A ConfigSchema holds one Option per configuration key. Loading a raw mapping
coerces every defined option to its declared type, falls back to the default
when the key is absent and runs the option's validator on the result.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import SecretStr

from s3sink.config.validators import Validator
from s3sink.core.exceptions import ConfigError, InvalidValueError


class OptionType(str, Enum):
    """Declared type of an option value."""

    STRING = "string"
    PASSWORD = "password"
    LIST = "list"


class Importance(str, Enum):
    """How much attention an operator should pay to an option."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Option:
    """Definition of a single configuration option."""

    name: str
    type: OptionType
    default: Any
    validator: Optional[Validator]
    importance: Importance
    description: str

    def parse(self, value: Any) -> Any:
        """Coerce a raw value to the declared type."""
        if value is None:
            return None
        if self.type is OptionType.PASSWORD:
            if isinstance(value, SecretStr):
                return value
            if isinstance(value, str):
                return SecretStr(value)
            raise InvalidValueError(
                self.name, SecretStr(str(value)), "Expected value to be a string"
            )
        if self.type is OptionType.LIST:
            if isinstance(value, str):
                trimmed = value.strip()
                return [item.strip() for item in trimmed.split(",")] if trimmed else []
            if isinstance(value, (list, tuple)):
                return [str(item).strip() for item in value]
            raise InvalidValueError(
                self.name, value, "Expected a comma separated list"
            )
        if isinstance(value, str):
            return value.strip()
        raise InvalidValueError(self.name, value, "Expected value to be a string")


class ConfigSchema:
    """Registry of options a raw configuration is validated against."""

    def __init__(self):
        self._options: dict[str, Option] = {}

    @property
    def options(self) -> Mapping[str, Option]:
        """Read-only view of the defined options keyed by name."""
        return MappingProxyType(self._options)

    def define(
        self,
        name: str,
        type: OptionType,
        default: Any,
        validator: Optional[Validator],
        importance: Importance,
        description: str,
    ) -> "ConfigSchema":
        """Define an option.

        Returns:
            The schema itself, so definitions can be chained.

        Raises:
            ConfigError: If an option with the same name is already defined.
        """
        if name in self._options:
            raise ConfigError(
                f"Configuration {name} is defined twice",
                context={"option": name},
            )
        self._options[name] = Option(
            name=name,
            type=type,
            default=default,
            validator=validator,
            importance=importance,
            description=description,
        )
        return self

    def parse(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        """
        Coerce and validate a raw configuration.

        Keys that are not defined are ignored. Validators are only invoked for
        options whose value, supplied or default, is not None.

        Args:
            raw: Option name to raw value

        Returns:
            Option name to parsed value for every defined option

        Raises:
            InvalidValueError: On the first option that fails coercion or validation
        """
        values: dict[str, Any] = {}
        for name, option in self._options.items():
            value = option.parse(raw[name] if name in raw else option.default)
            if value is not None and option.validator is not None:
                option.validator.ensure_valid(name, value)
            values[name] = value
        return values
