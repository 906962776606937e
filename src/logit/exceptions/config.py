"""
Configuration-related exceptions.

Raised only while a logger is being constructed; a logger that fails
configuration is never built.
"""

from typing import Any, List

from .base import ExceptionContext, LogitError


class ConfigurationError(LogitError):
    """Base class for configuration-related errors."""


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration contains invalid values."""

    def __init__(self, field: str, value: Any, expected: str):
        self.field = field
        self.value = value
        self.expected = expected
        message = f"Invalid configuration for '{field}': got {value!r}, expected {expected}"
        context = ExceptionContext(
            help_text=f"Check the value of '{field}'",
            error_code="CONFIG_INVALID",
            context={"field": field},
        )
        super().__init__(message, context)


class ConfigurationValidationError(ConfigurationError):
    """Raised when configuration fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        message = "Configuration validation failed:"
        for error in errors:
            message += f"\n  - {error}"

        context = ExceptionContext(
            help_text="Fix the validation errors listed above",
            error_code="CONFIG_VALIDATION",
        )
        super().__init__(message, context)
