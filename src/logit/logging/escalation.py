"""
Escalation of severe entries to an external crash-reporting service.

Entries at or above the escalation level are queued and delivered by a
single background worker, so a slow or unavailable service never stalls
the threads that log. Delivery failures and queue overflow are recorded
as warnings on the standard library logger and never reach the caller.
"""

import logging
import queue
import threading
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Protocol

import requests

from ..constants import (
    DEFAULT_ESCALATION_QUEUE_SIZE,
    DEFAULT_FLUSH_TIMEOUT_SECONDS,
    DEFAULT_REPORT_TIMEOUT_SECONDS,
)
from ..core.levels import Level
from ..exceptions import EscalationError
from .entry import LogEntry
from .sinks import LevelFilteredSink

logger = logging.getLogger(__name__)

_STOP = object()


class CrashReporter(Protocol):
    """Client of a crash-reporting service."""

    def report(self, message: str, severity: Level, context: Mapping[str, Any]) -> None: ...


class HttpCrashReporter:
    """Posts crash reports as JSON to an HTTP endpoint."""

    def __init__(
        self,
        endpoint: str,
        key: str,
        environment: str = "production",
        timeout: float = DEFAULT_REPORT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.environment = environment
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"X-Crash-Key": key})

    def report(self, message: str, severity: Level, context: Mapping[str, Any]) -> None:
        """Send one report.

        Raises:
            requests.RequestException: the service rejected or did not
                answer the report within ``timeout``.
        """
        context = dict(context)
        exception = context.pop("exception", None)

        payload: Dict[str, Any] = {
            "message": message,
            "level": severity.label.lower(),
            "environment": self.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "context": {key: _plain(value) for key, value in context.items()},
        }
        if isinstance(exception, BaseException):
            payload["exception"] = {
                "type": type(exception).__name__,
                "value": str(exception),
                "stacktrace": traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                ),
            }

        response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        response.raise_for_status()

    def close(self) -> None:
        self.session.close()


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class CrashReportingSink:
    """Queues entries for background delivery to a CrashReporter."""

    def __init__(self, reporter: CrashReporter, queue_size: int = DEFAULT_ESCALATION_QUEUE_SIZE):
        self.reporter = reporter
        self.dropped = 0
        self.failures = 0

        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize=queue_size)
        self._pending = 0
        self._cond = threading.Condition()
        self._closed = False
        self._worker = threading.Thread(target=self._run, name="logit-escalation", daemon=True)
        self._worker.start()

    def write(self, entry: LogEntry) -> None:
        # The closed check and the enqueue share the lock, so nothing is
        # queued behind the stop sentinel
        with self._cond:
            closed = self._closed
            accepted = False
            if not closed:
                try:
                    self._queue.put_nowait(entry)
                except queue.Full:
                    self.dropped += 1
                else:
                    self._pending += 1
                    accepted = True

        if closed:
            logger.warning(f"Escalation sink closed, not reporting entry (traceId={entry.trace_id})")
        elif not accepted:
            logger.warning(f"Escalation queue full, dropping entry (traceId={entry.trace_id})")

    def flush(self, timeout: float = DEFAULT_FLUSH_TIMEOUT_SECONDS) -> bool:
        """Wait until every queued entry was delivered. Returns False on timeout."""
        deadline = time.monotonic() + timeout
        with self._cond:
            while self._pending:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(f"Escalation flush timed out with {self._pending} pending report(s)")
                    return False
                self._cond.wait(remaining)
        return True

    def close(self, timeout: float = DEFAULT_FLUSH_TIMEOUT_SECONDS) -> None:
        """Stop accepting entries, flush, then stop the delivery worker."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
        self.flush(timeout)
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            logger.warning("Escalation worker did not drain before shutdown")
            return
        self._worker.join(timeout)

        close_reporter = getattr(self.reporter, "close", None)
        if callable(close_reporter):
            close_reporter()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            try:
                self._deliver(item)
            finally:
                with self._cond:
                    self._pending -= 1
                    self._cond.notify_all()

    def _deliver(self, entry: LogEntry) -> None:
        context = entry.context()
        if entry.error is not None:
            context["exception"] = entry.error
        try:
            self.reporter.report(entry.message, entry.level, context)
        except Exception as e:
            self.failures += 1
            error = EscalationError("Crash report delivery failed", e)
            logger.warning(f"{error} (traceId={entry.trace_id})")


class EscalationSink(LevelFilteredSink):
    """Level gate (Error and above by default) in front of a CrashReportingSink."""

    def __init__(
        self,
        reporter: CrashReporter,
        min_level: Level = Level.ERROR,
        queue_size: int = DEFAULT_ESCALATION_QUEUE_SIZE,
        name: str = "escalation",
    ):
        super().__init__(CrashReportingSink(reporter, queue_size), min_level, name)

    def flush(self, timeout: float = DEFAULT_FLUSH_TIMEOUT_SECONDS) -> bool:
        return self.sink.flush(timeout)

    def close(self, timeout: float = DEFAULT_FLUSH_TIMEOUT_SECONDS) -> None:
        self.sink.close(timeout)
