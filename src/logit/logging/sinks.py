"""
Log sinks and the severity gate in front of them.

A sink is anything with ``write(entry)``, ``flush()`` and ``close()``.
Sinks are responsible for their own thread safety.
"""

import sys
import threading
from dataclasses import dataclass
from typing import Optional, Protocol, TextIO, Union, runtime_checkable

from rich.console import Console

from ..core.levels import Level
from .entry import LogEntry
from .formatters import ConsoleFormatter, RichFormatter, StructuredFormatter
from .rotation import RotatingWriter

LineFormatter = Union[StructuredFormatter, ConsoleFormatter]


@runtime_checkable
class Sink(Protocol):
    """Destination for log entries."""

    def write(self, entry: LogEntry) -> None: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


class ConsoleSink:
    """Writes formatted entries to a text stream (stdout by default)."""

    def __init__(
        self,
        formatter: Union[LineFormatter, RichFormatter],
        stream: Optional[TextIO] = None,
    ):
        self.formatter = formatter
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()
        self._console = None
        if isinstance(formatter, RichFormatter):
            self._console = Console(file=self.stream, highlight=False, soft_wrap=True)

    def write(self, entry: LogEntry) -> None:
        rendered = self.formatter.format(entry)
        with self._lock:
            if self._console is not None:
                self._console.print(rendered)
            else:
                self.stream.write(rendered + "\n")
            self.stream.flush()

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()

    def close(self) -> None:
        # The process owns stdout/stderr
        self.flush()


class FileSink:
    """Encodes entries as UTF-8 lines into a RotatingWriter."""

    def __init__(self, writer: RotatingWriter, formatter: LineFormatter):
        self.writer = writer
        self.formatter = formatter

    def write(self, entry: LogEntry) -> None:
        self.writer.write((self.formatter.format(entry) + "\n").encode("utf-8"))

    def flush(self) -> None:
        self.writer.flush()

    def close(self) -> None:
        self.writer.close()


class LevelFilteredSink:
    """A sink gated by a minimum severity."""

    def __init__(self, sink: Sink, min_level: Level = Level.DEBUG, name: Optional[str] = None):
        self.sink = sink
        self.min_level = Level.parse(min_level)
        self.name = name or type(sink).__name__

    def accept(self, entry: LogEntry) -> bool:
        return entry.level >= self.min_level

    def dispatch(self, entry: LogEntry) -> bool:
        """Forward the entry if accepted. Returns whether it was forwarded."""
        if not self.accept(entry):
            return False
        self.sink.write(entry)
        return True

    def flush(self) -> None:
        self.sink.flush()

    def close(self) -> None:
        self.sink.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, min_level={self.min_level.label})"


@dataclass(frozen=True)
class SinkRegistration:
    """A sink and its minimum level, fixed at router construction."""

    sink: Sink
    min_level: Level = Level.DEBUG
    name: Optional[str] = None

    def filtered(self) -> LevelFilteredSink:
        return LevelFilteredSink(self.sink, self.min_level, self.name)
