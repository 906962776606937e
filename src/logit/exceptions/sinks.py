"""
Sink-related exceptions.

None of these ever reach request-handling code: the writer reports
rotation failures through its error callback, the router collects
SinkError records and the escalation worker logs EscalationError.
"""

from pathlib import Path
from typing import Optional

from .base import ExceptionContext, LogitError


class LogitIOError(LogitError):
    """Raised when a filesystem operation of a file sink fails."""

    def __init__(self, operation: str, path: Path, cause: Optional[BaseException] = None):
        self.operation = operation
        self.path = path
        self.cause = cause

        message = f"Log file {operation} failed: {path}"
        if cause is not None:
            message += f" - {cause}"

        context = ExceptionContext(
            help_text=f"Check file permissions and available disk space for {Path(path).parent}",
            error_code="LOG_IO_ERROR",
            context={"operation": operation, "path": str(path)},
        )
        super().__init__(message, context)


class RotationError(LogitIOError):
    """Raised when rotating the active log file fails.

    The writer keeps appending to the existing file after this error.
    """

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        super().__init__("rotation", path, cause)
        self.error_code = "LOG_ROTATION_ERROR"


class EscalationError(LogitError):
    """Raised when the crash-reporting service could not be reached."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, ExceptionContext(error_code="ESCALATION_FAILED"))


class SinkError(LogitError):
    """A failed delivery of one entry to one sink."""

    def __init__(self, sink_name: str, cause: BaseException):
        self.sink_name = sink_name
        self.cause = cause
        message = f"Sink '{sink_name}' failed: {type(cause).__name__}: {cause}"
        context = ExceptionContext(
            error_code="SINK_WRITE_FAILED",
            context={"sink": sink_name, "cause_type": type(cause).__name__},
        )
        super().__init__(message, context)
