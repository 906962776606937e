"""
Unit tests for console, file and level-filtered sinks.
"""

import io
import json
from datetime import timedelta

import pytest

from logit.core.levels import Level
from logit.logging.formatters import ConsoleFormatter, RichFormatter, StructuredFormatter
from logit.logging.rotation import RotatingWriter
from logit.logging.sinks import (
    ConsoleSink,
    FileSink,
    LevelFilteredSink,
    Sink,
    SinkRegistration,
)


@pytest.mark.unit
class TestConsoleSink:
    """Test console output."""

    def test_writes_one_line_per_entry(self, make_entry):
        stream = io.StringIO()
        sink = ConsoleSink(StructuredFormatter(), stream)

        sink.write(make_entry(message="first"))
        sink.write(make_entry(message="second"))

        lines = stream.getvalue().splitlines()
        assert [json.loads(line)["msg"] for line in lines] == ["first", "second"]

    def test_rich_output(self, make_entry):
        stream = io.StringIO()
        sink = ConsoleSink(RichFormatter(), stream)

        sink.write(make_entry(message="colored"))

        assert "colored" in stream.getvalue()
        assert stream.getvalue().endswith("\n")

    def test_close_leaves_stream_open(self, make_entry):
        stream = io.StringIO()
        sink = ConsoleSink(ConsoleFormatter(), stream)

        sink.close()

        assert not stream.closed

    def test_satisfies_sink_protocol(self):
        assert isinstance(ConsoleSink(ConsoleFormatter(), io.StringIO()), Sink)


@pytest.mark.unit
class TestFileSink:
    """Test file output through a RotatingWriter."""

    def test_writes_utf8_lines(self, temp_dir, namer, clock, make_entry):
        writer = RotatingWriter(temp_dir, namer, 10_000, timedelta(hours=1), clock=clock)
        sink = FileSink(writer, StructuredFormatter())

        sink.write(make_entry(message="zürich"))
        sink.close()

        content = writer.path.read_bytes()
        assert content.endswith(b"\n")
        assert json.loads(content.decode("utf-8"))["msg"] == "zürich"


@pytest.mark.unit
class TestLevelFilteredSink:
    """Test the minimum-level gate."""

    @pytest.mark.parametrize("level", list(Level))
    def test_forwards_at_or_above_minimum(self, recording_sink, make_entry, level):
        gate = LevelFilteredSink(recording_sink, Level.WARN)

        forwarded = gate.dispatch(make_entry(level=level))

        assert forwarded is (level >= Level.WARN)
        assert len(recording_sink.entries) == (1 if level >= Level.WARN else 0)

    def test_default_minimum_accepts_everything(self, recording_sink, make_entry):
        gate = LevelFilteredSink(recording_sink)

        assert gate.accept(make_entry(level=Level.DEBUG))

    def test_level_names_accepted(self, recording_sink):
        assert LevelFilteredSink(recording_sink, "error").min_level is Level.ERROR

    def test_name_defaults_to_sink_type(self, recording_sink):
        assert LevelFilteredSink(recording_sink).name == "RecordingSink"
        assert LevelFilteredSink(recording_sink, name="audit").name == "audit"

    def test_flush_and_close_delegate(self, recording_sink):
        gate = LevelFilteredSink(recording_sink)

        gate.flush()
        gate.close()

        assert recording_sink.flushed == 1
        assert recording_sink.closed

    def test_registration(self, recording_sink):
        gate = SinkRegistration(recording_sink, Level.INFO, "main").filtered()

        assert isinstance(gate, LevelFilteredSink)
        assert gate.min_level is Level.INFO
        assert gate.name == "main"
