"""
Entry formatters for different output formats.

Provides structured JSON formatting, tab-separated console formatting and
Rich terminal output. Formatters only render; sinks own the streams.
"""

import json
import traceback
from typing import Any, Iterable, List, Optional

from rich.text import Text

from ..constants import DEFAULT_TIME_FORMAT
from ..core.levels import Level
from .entry import Field, LogEntry


def _json_value(value: Any) -> str:
    if isinstance(value, BaseException):
        value = str(value)
    return json.dumps(value, default=str, ensure_ascii=False)


def render_pairs(pairs: Iterable[Field]) -> str:
    """Render pairs as a JSON object body, keeping order and repeated keys."""
    return ", ".join(f"{json.dumps(key)}: {_json_value(value)}" for key, value in pairs)


class StructuredFormatter:
    """JSON formatter for structured logging, one object per line."""

    def __init__(self, time_format: Optional[str] = None):
        self.time_format = time_format

    def format(self, entry: LogEntry) -> str:
        """Format an entry as JSON."""
        timestamp = (
            entry.timestamp.strftime(self.time_format)
            if self.time_format
            else entry.timestamp.isoformat()
        )
        pairs: List[Field] = [
            Field("time", timestamp),
            Field("level", entry.level.label),
            Field("msg", entry.message),
        ]
        pairs.extend(entry.pairs())

        if entry.error is not None and entry.error.__traceback__ is not None:
            pairs.append(Field("stacktrace", "".join(traceback.format_exception(
                type(entry.error), entry.error, entry.error.__traceback__
            ))))

        return "{" + render_pairs(pairs) + "}"


class ConsoleFormatter:
    """Human-readable formatter: time, level, message, then the fields as JSON."""

    def __init__(self, time_format: str = DEFAULT_TIME_FORMAT):
        self.time_format = time_format

    def format(self, entry: LogEntry) -> str:
        return "\t".join([
            entry.timestamp.strftime(self.time_format),
            entry.level.label,
            entry.message,
            "{" + render_pairs(entry.pairs()) + "}",
        ])


class RichFormatter:
    """Formatter producing colored Rich text for terminals."""

    LEVEL_STYLES = {
        Level.DEBUG: "cyan",
        Level.INFO: "green",
        Level.WARN: "yellow",
        Level.ERROR: "red",
        Level.FATAL: "bold red",
    }

    def __init__(self, time_format: str = DEFAULT_TIME_FORMAT):
        self.time_format = time_format

    def format(self, entry: LogEntry) -> Text:
        text = Text()
        text.append(entry.timestamp.strftime(self.time_format), style="dim")
        text.append(" ")
        text.append(f"{entry.level.label:<5}", style=self.LEVEL_STYLES.get(entry.level, ""))
        text.append(" ")
        text.append(entry.message)
        for key, value in entry.pairs():
            text.append(" ")
            text.append(key, style="blue")
            text.append("=")
            text.append(str(value), style="dim")
        return text


def create_formatter(format_type: str, time_format: str = DEFAULT_TIME_FORMAT):
    """Create a formatter for ``json``, ``console`` or ``rich`` output."""
    if format_type == "json":
        return StructuredFormatter(time_format)
    if format_type == "rich":
        return RichFormatter(time_format)
    if format_type == "console":
        return ConsoleFormatter(time_format)
    raise ValueError(f"Unknown log format: {format_type!r}")
