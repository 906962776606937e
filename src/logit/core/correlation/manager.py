"""
Trace id management.

A trace id ties together every entry logged for one request or call
chain. Ids supplied by a caller (an upstream header, a queue message) are
propagated unchanged; otherwise a fresh 128-bit random id is generated.
"""

import logging
import threading
import uuid
from typing import Optional

logger = logging.getLogger(__name__)

# Thread-local storage for the active trace scope
_context_storage = threading.local()


def generate_id() -> str:
    """Generate a new trace id."""
    return str(uuid.uuid4())


def resolve(candidate: Optional[str] = None) -> str:
    """Return ``candidate`` if it is non-empty, otherwise a fresh id."""
    if candidate:
        return candidate
    return generate_id()


class TraceContext:
    """
    Carrier of one trace id for the lifetime of a call chain.

    Pass it explicitly to the logger, or enter it as a context manager to
    make it the current thread's trace scope. Scopes nest; leaving one
    restores the previous scope.
    """

    __slots__ = ("_trace_id", "_previous")

    def __init__(self, trace_id: Optional[str] = None):
        self._trace_id = resolve(trace_id)
        self._previous = None

    @property
    def trace_id(self) -> str:
        return self._trace_id

    def __enter__(self) -> "TraceContext":
        self._previous = getattr(_context_storage, "context", None)
        _context_storage.context = self
        logger.debug(f"Trace scope entered (trace_id={self._trace_id})")
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        _context_storage.context = self._previous
        self._previous = None
        logger.debug(f"Trace scope exited (trace_id={self._trace_id})")

    def __repr__(self) -> str:
        return f"TraceContext(trace_id={self._trace_id!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, TraceContext) and other._trace_id == self._trace_id

    def __hash__(self) -> int:
        return hash(self._trace_id)


def new_scope(candidate: Optional[str] = None) -> TraceContext:
    """Create a TraceContext carrying the resolved id."""
    return TraceContext(candidate)


def current_context() -> Optional[TraceContext]:
    """Get the trace scope entered on this thread, if any."""
    return getattr(_context_storage, "context", None)


def current_trace_id() -> Optional[str]:
    """Get the trace id of the current thread's scope, if any."""
    context = current_context()
    return context.trace_id if context else None
