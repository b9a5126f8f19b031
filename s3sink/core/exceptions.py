"""Exception hierarchy for the s3sink package."""

from typing import Any, Iterable, Optional


class S3SinkError(Exception):
    """Base exception for all s3sink errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(S3SinkError):
    """Raised when the connector configuration cannot be loaded."""

    pass


class InvalidValueError(ConfigError):
    """Raised when a supplied value fails the rule of its option."""

    def __init__(
        self,
        name: str,
        value: Any,
        reason: str,
        valid_values: Optional[Iterable[str]] = None,
    ):
        context: dict[str, Any] = {"option": name}
        if valid_values is not None:
            context["valid_values"] = ", ".join(valid_values)
        super().__init__(
            f"Invalid value {value} for configuration {name}: {reason}",
            context=context,
        )
        self.name = name
        self.value = value
        self.reason = reason


class MissingRequiredError(ConfigError):
    """Raised when neither name of a required setting has been supplied."""

    def __init__(self, current_key: str, legacy_key: str):
        super().__init__(
            f"Neither {current_key} nor {legacy_key} properties have been set",
            context={"keys": f"{current_key}|{legacy_key}"},
        )
        self.current_key = current_key
        self.legacy_key = legacy_key
