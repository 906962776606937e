"""
Base exception classes for logit.

Provides the foundational LogitError class that all other exceptions inherit from.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class ExceptionContext:
    """Context information for logit exceptions."""

    help_text: Optional[str] = None
    error_code: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)


class LogitError(Exception):
    """Base exception for all logit errors.

    Attributes:
        message: The error message
        help_text: Optional actionable guidance
        error_code: Optional error code for programmatic handling
        context: Additional context information
    """

    def __init__(self, message: str, context: Optional[ExceptionContext] = None):
        self.message = message

        if context is not None:
            self.help_text = context.help_text
            self.error_code = context.error_code
            self.context = dict(context.context)
        else:
            self.help_text = None
            self.error_code = None
            self.context = {}

        self.timestamp = datetime.now()
        super().__init__(message)

    def __str__(self) -> str:
        result = self.message

        if self.help_text:
            result += f" (help: {self.help_text})"

        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
            "help_text": self.help_text,
        }

    def add_context(self, **kwargs) -> "LogitError":
        """Add additional context to the exception."""
        self.context.update(kwargs)
        return self
