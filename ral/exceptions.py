"""Shared exception classes for ral.

Recoverable failures of provider operations are returned as
``ral.core.result.Result`` errors. The exceptions here cover configuration
problems and programming errors.
"""


class RalError(Exception):
    """Base exception for ral errors."""


class ConfigNotFoundError(RalError):
    """Raised when ral.toml is not found."""


class ConfigParseError(RalError):
    """Raised when ral.toml cannot be parsed."""


class ConfigValidationError(RalError):
    """Raised when ral.toml contains invalid configuration."""


class ProviderNotFoundError(RalError):
    """Raised when no provider is registered for a resource type."""


class InvalidAttributeError(RalError, ValueError):
    """Raised when the resource name is accessed as an ordinary attribute."""


class ResultContractError(RuntimeError):
    """Raised when the payload of a Result is read without checking it first.

    This signals a bug in the caller, so it is not a RalError and the CLI
    does not turn it into a friendly message.
    """
