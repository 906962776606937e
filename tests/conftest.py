"""
Pytest configuration and shared fixtures for logit tests.
"""

import logging
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from logit.core.levels import Level
from logit.logging.entry import Field, LogEntry
from logit.logging.retention import LogFileNamer


class FakeClock:
    """Manually advanced, timezone-aware UTC clock."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


class RecordingSink:
    """Sink that keeps every entry it receives."""

    def __init__(self):
        self.entries = []
        self.flushed = 0
        self.closed = False
        self._lock = threading.Lock()

    def write(self, entry):
        with self._lock:
            self.entries.append(entry)

    def flush(self):
        self.flushed += 1

    def close(self):
        self.closed = True


class FailingSink(RecordingSink):
    """Sink whose writes fail like a full disk."""

    def write(self, entry):
        raise OSError(28, "No space left on device")


class RecordingReporter:
    """Crash reporter that records reports, optionally failing or blocking."""

    def __init__(self, fail=False, gate=None):
        self.reports = []
        self.fail = fail
        self.gate = gate
        self._lock = threading.Lock()

    def report(self, message, severity, context):
        if self.gate is not None:
            self.gate.wait(5)
        if self.fail:
            raise ConnectionError("crash service unavailable")
        with self._lock:
            self.reports.append((message, severity, dict(context)))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def namer():
    return LogFileNamer("orders", "1.2.0")


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def sink_factory():
    """Factory for independent RecordingSink instances."""
    return RecordingSink


@pytest.fixture
def failing_sink():
    return FailingSink()


@pytest.fixture
def reporter_factory():
    """Factory for RecordingReporter instances, e.g. gated by a threading.Event."""
    return RecordingReporter


@pytest.fixture
def recording_reporter():
    return RecordingReporter()


@pytest.fixture
def failing_reporter():
    return RecordingReporter(fail=True)


@pytest.fixture
def make_entry(clock):
    """Factory for LogEntry instances with sensible defaults."""

    def _make(level=Level.INFO, message="hello", op="test.op", trace_id="trace-1", fields=(), error=None):
        return LogEntry(
            timestamp=clock(),
            level=level,
            message=message,
            op=op,
            trace_id=trace_id,
            fields=tuple(Field(*f) for f in fields),
            error=error,
        )

    return _make


@pytest.fixture
def fallback_log(caplog):
    """Capture the standard library fallback channel at WARNING and above."""
    caplog.set_level(logging.WARNING, logger="logit")
    return caplog
