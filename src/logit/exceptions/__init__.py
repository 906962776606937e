"""
Exception hierarchy for logit.

- base: LogitError and ExceptionContext
- config: construction-time configuration errors
- sinks: I/O, rotation, escalation and per-sink delivery errors
"""

from .base import ExceptionContext, LogitError
from .config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
)
from .sinks import EscalationError, LogitIOError, RotationError, SinkError

__all__ = [
    "LogitError",
    "ExceptionContext",
    "ConfigurationError",
    "InvalidConfigurationError",
    "ConfigurationValidationError",
    "LogitIOError",
    "RotationError",
    "EscalationError",
    "SinkError",
]
