"""
Unit tests for crash reporting escalation.
"""

import threading
from unittest.mock import Mock

import pytest
import requests

from logit.core.levels import Level
from logit.logging.escalation import (
    CrashReportingSink,
    EscalationSink,
    HttpCrashReporter,
)


@pytest.fixture
def sinks():
    """Track created escalation sinks and stop their workers after the test."""
    created = []
    yield created
    for sink in created:
        sink.close(timeout=1)


@pytest.mark.unit
class TestHttpCrashReporter:
    """Test the HTTP crash reporter."""

    def test_posts_payload(self):
        session = Mock(spec=requests.Session)
        session.headers = {}
        reporter = HttpCrashReporter(
            "https://crash.example.com/api/events", "secret", environment="staging", timeout=1.5, session=session
        )

        reporter.report("db down", Level.ERROR, {"op": "orders.create", "traceId": "t-1", "when": object()})

        assert session.headers["X-Crash-Key"] == "secret"
        args, kwargs = session.post.call_args
        assert args == ("https://crash.example.com/api/events",)
        assert kwargs["timeout"] == 1.5
        payload = kwargs["json"]
        assert payload["message"] == "db down"
        assert payload["level"] == "error"
        assert payload["environment"] == "staging"
        assert payload["context"]["traceId"] == "t-1"
        assert isinstance(payload["context"]["when"], str)
        assert "exception" not in payload
        session.post.return_value.raise_for_status.assert_called_once()

    def test_includes_exception(self):
        session = Mock(spec=requests.Session)
        session.headers = {}
        reporter = HttpCrashReporter("https://h/api/events", "k", session=session)
        try:
            raise ValueError("negative quantity")
        except ValueError as e:
            error = e

        reporter.report("negative quantity", Level.FATAL, {"exception": error})

        payload = session.post.call_args.kwargs["json"]
        assert payload["level"] == "fatal"
        assert payload["exception"]["type"] == "ValueError"
        assert payload["exception"]["value"] == "negative quantity"
        assert any("ValueError" in line for line in payload["exception"]["stacktrace"])
        assert "exception" not in payload["context"]

    def test_http_errors_raise(self):
        session = Mock(spec=requests.Session)
        session.headers = {}
        session.post.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        reporter = HttpCrashReporter("https://h/api/events", "k", session=session)

        with pytest.raises(requests.HTTPError):
            reporter.report("x", Level.ERROR, {})

    def test_close_closes_session(self):
        session = Mock(spec=requests.Session)
        session.headers = {}

        HttpCrashReporter("https://h/api/events", "k", session=session).close()

        session.close.assert_called_once()


@pytest.mark.unit
class TestCrashReportingSink:
    """Test background delivery of escalated entries."""

    def test_delivers_entries(self, sinks, recording_reporter, make_entry):
        sink = CrashReportingSink(recording_reporter)
        sinks.append(sink)
        error = RuntimeError("payment gateway timeout")

        sink.write(make_entry(level=Level.ERROR, message="payment gateway timeout", fields=[("orderId", 7)], error=error))

        assert sink.flush(timeout=5)
        message, severity, context = recording_reporter.reports[0]
        assert message == "payment gateway timeout"
        assert severity is Level.ERROR
        assert context["traceId"] == "trace-1"
        assert context["orderId"] == 7
        assert context["exception"] is error

    def test_delivery_failure_is_logged(self, sinks, failing_reporter, make_entry, fallback_log):
        sink = CrashReportingSink(failing_reporter)
        sinks.append(sink)

        sink.write(make_entry(level=Level.ERROR))

        assert sink.flush(timeout=5)
        assert sink.failures == 1
        assert "Crash report delivery failed" in fallback_log.text

    def test_full_queue_drops_and_warns(self, sinks, reporter_factory, make_entry, fallback_log):
        """Test writes never block while the service is stalled."""
        gate = threading.Event()
        reporter = reporter_factory(gate=gate)
        sink = CrashReportingSink(reporter, queue_size=1)
        sinks.append(sink)

        for i in range(5):
            sink.write(make_entry(level=Level.ERROR, message=f"failure {i}"))

        # One entry in flight, at most one queued
        assert sink.dropped >= 3
        assert "Escalation queue full" in fallback_log.text

        gate.set()
        assert sink.flush(timeout=5)
        assert len(reporter.reports) == 5 - sink.dropped

    def test_flush_times_out(self, sinks, reporter_factory, make_entry, fallback_log):
        gate = threading.Event()
        sink = CrashReportingSink(reporter_factory(gate=gate))
        sinks.append(sink)

        sink.write(make_entry(level=Level.ERROR))

        assert sink.flush(timeout=0.05) is False
        assert "Escalation flush timed out" in fallback_log.text
        gate.set()

    def test_close_delivers_pending_and_closes_reporter(self, make_entry):
        reporter = Mock()
        sink = CrashReportingSink(reporter)

        sink.write(make_entry(level=Level.ERROR))
        sink.close(timeout=5)

        reporter.report.assert_called_once()
        reporter.close.assert_called_once()

    def test_write_after_close_is_ignored(self, recording_reporter, make_entry, fallback_log):
        sink = CrashReportingSink(recording_reporter)
        sink.close(timeout=5)

        sink.write(make_entry(level=Level.ERROR))

        assert recording_reporter.reports == []
        assert "Escalation sink closed" in fallback_log.text

    def test_close_racing_writers_leaves_nothing_pending(self, recording_reporter, make_entry):
        """Test entries accepted while closing are delivered and later ones rejected."""
        sink = CrashReportingSink(recording_reporter)
        start = threading.Event()

        def produce():
            start.wait(5)
            for i in range(200):
                sink.write(make_entry(level=Level.ERROR, message=f"failure {i}"))

        producers = [threading.Thread(target=produce) for _ in range(4)]
        for producer in producers:
            producer.start()
        start.set()
        sink.close(timeout=5)
        for producer in producers:
            producer.join()

        assert sink.flush(timeout=0.1)
        assert not sink._worker.is_alive()
        assert sink._queue.empty()
        assert len(recording_reporter.reports) + sink.dropped <= 800

    def test_close_is_idempotent(self, recording_reporter):
        sink = CrashReportingSink(recording_reporter)

        sink.close(timeout=5)
        sink.close(timeout=5)


@pytest.mark.unit
class TestEscalationSink:
    """Test the level gate in front of crash reporting."""

    @pytest.mark.parametrize("level", list(Level))
    def test_only_error_and_above_escalated(self, sinks, recording_reporter, make_entry, level):
        sink = EscalationSink(recording_reporter)
        sinks.append(sink)

        sink.dispatch(make_entry(level=level))

        assert sink.flush(timeout=5)
        assert len(recording_reporter.reports) == (1 if level >= Level.ERROR else 0)

    def test_custom_minimum_level(self, sinks, recording_reporter, make_entry):
        sink = EscalationSink(recording_reporter, min_level=Level.FATAL)
        sinks.append(sink)

        sink.dispatch(make_entry(level=Level.ERROR))
        sink.dispatch(make_entry(level=Level.FATAL))

        assert sink.flush(timeout=5)
        assert [severity for _, severity, _ in recording_reporter.reports] == [Level.FATAL]
        assert sink.name == "escalation"
