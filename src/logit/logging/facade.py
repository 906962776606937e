"""
The public logging API.

Every call builds one immutable LogEntry and hands it to the SinkRouter.
Logging calls never raise into the caller: sink failures are collected
by the router and reported on the standard library logger.
"""

import os
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Tuple, Union

from ..constants import FATAL_EXIT_CODE
from ..core.correlation import TraceContext, current_trace_id, new_scope, resolve
from ..core.levels import Level
from .entry import Field, LogEntry, to_fields
from .router import SinkRouter

TraceLike = Union[TraceContext, str, None]
FieldLike = Union[Field, Tuple[str, Any]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _terminate(status: int) -> None:
    """End the whole process, whichever thread calls it."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            # Closed or broken stream; exiting matters more
            continue
    os._exit(status)


class Logger:
    """Structured logger bound to a fixed set of sinks.

    Example:
        trace = logger.new_trace_context(request.headers.get("X-Trace-Id"))
        logger.info("order created", "orders.create", ("orderId", 42), trace=trace)
        logger.error(exc, "orders.create", trace=trace)

    ``trace`` may be a TraceContext, a trace id string or None. With None
    the current thread's trace scope is used, or a fresh id is generated.
    """

    def __init__(
        self,
        router: SinkRouter,
        fields: Iterable[FieldLike] = (),
        clock: Optional[Callable[[], datetime]] = None,
        exit_func: Optional[Callable[[int], Any]] = None,
    ):
        self._router = router
        self._fields = to_fields(fields)
        self._clock = clock or _utc_now
        self._exit = exit_func or _terminate

    @classmethod
    def nop(cls) -> "Logger":
        """A logger with no sinks; every call is discarded."""
        return cls(SinkRouter())

    @property
    def router(self) -> SinkRouter:
        return self._router

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    def with_fields(self, *fields: FieldLike) -> "Logger":
        """Create a child logger that adds ``fields`` to every entry."""
        return Logger(self._router, self._fields + to_fields(fields), self._clock, self._exit)

    def new_trace_context(self, trace_id: Optional[str] = None) -> TraceContext:
        return new_scope(trace_id)

    def debug(self, *values: Any) -> None:
        """Log arbitrary values, each as a positional ``field_<n>`` field."""
        fields = tuple(
            Field(f"field_{i}", str(value) if isinstance(value, BaseException) else value)
            for i, value in enumerate(values)
        )
        self._emit(Level.DEBUG, "debug", "debug", fields, None)

    def info(self, message: str, op: str, *fields: FieldLike, trace: TraceLike = None) -> None:
        self._emit(Level.INFO, message, op, to_fields(fields), trace)

    def warn(self, message: str, op: str, *fields: FieldLike, trace: TraceLike = None) -> None:
        self._emit(Level.WARN, message, op, to_fields(fields), trace)

    warning = warn

    def error(self, err: Union[BaseException, str], op: str, *fields: FieldLike, trace: TraceLike = None) -> None:
        """Log an error; entries at this level are also escalated."""
        self._emit_error(Level.ERROR, err, op, fields, trace)

    def fatal(self, err: Union[BaseException, str], op: str, *fields: FieldLike, trace: TraceLike = None) -> None:
        """Log, flush and close every sink, then end the process with a non-zero status.

        The default exit ends the process from any thread, like os._exit;
        atexit handlers do not run.
        """
        try:
            self._emit_error(Level.FATAL, err, op, fields, trace)
        finally:
            self.close()
        self._exit(FATAL_EXIT_CODE)

    def flush(self) -> None:
        self._router.flush()

    def close(self) -> None:
        """Flush and close all sinks. Call once at process shutdown."""
        self._router.flush()
        self._router.close()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _emit_error(self, level: Level, err, op: str, fields, trace: TraceLike) -> None:
        error = err if isinstance(err, BaseException) else None
        extra: Tuple[Field, ...] = ()
        if error is not None:
            extra = (Field("errorType", type(error).__name__),)
        self._emit(level, str(err), op, extra + to_fields(fields), trace, error)

    def _emit(
        self,
        level: Level,
        message: str,
        op: str,
        fields: Tuple[Field, ...],
        trace: TraceLike,
        error: Optional[BaseException] = None,
    ) -> None:
        entry = LogEntry(
            timestamp=self._clock(),
            level=level,
            message=message,
            op=op,
            trace_id=self._resolve_trace(trace),
            fields=self._fields + fields,
            error=error,
        )
        self._router.dispatch(entry)

    @staticmethod
    def _resolve_trace(trace: TraceLike) -> str:
        if isinstance(trace, TraceContext):
            return trace.trace_id
        if trace:
            return trace
        return resolve(current_trace_id())
