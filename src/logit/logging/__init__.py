"""
logit logging package

Structured logging facade with multi-sink routing:
- entry: the immutable LogEntry and its fields
- rotation / retention: size- and time-triggered rotating file writer
- formatters: JSON, console and Rich rendering
- sinks: console and file sinks behind a minimum-level gate
- router: fan-out of one entry to every sink
- escalation: background delivery of severe entries to crash reporting
- facade: the Logger API
- manager: Logger construction from configuration
"""

from ..core.levels import Level
from .entry import Field, LogEntry
from .escalation import CrashReporter, CrashReportingSink, EscalationSink, HttpCrashReporter
from .facade import Logger
from .formatters import ConsoleFormatter, RichFormatter, StructuredFormatter, create_formatter
from .manager import build_logger, must_new_logger, new_nop_logger
from .retention import LogFileNamer, compress_file, enforce_retention, list_backups
from .rotation import RotatingWriter
from .router import SinkRouter
from .sinks import ConsoleSink, FileSink, LevelFilteredSink, Sink, SinkRegistration

__all__ = [
    # Core interfaces
    "Level",
    "Field",
    "LogEntry",
    "Logger",
    "build_logger",
    "must_new_logger",
    "new_nop_logger",
    # Routing
    "Sink",
    "SinkRegistration",
    "LevelFilteredSink",
    "SinkRouter",
    "ConsoleSink",
    "FileSink",
    # Rotation
    "RotatingWriter",
    "LogFileNamer",
    "compress_file",
    "enforce_retention",
    "list_backups",
    # Escalation
    "CrashReporter",
    "CrashReportingSink",
    "EscalationSink",
    "HttpCrashReporter",
    # Formatters
    "StructuredFormatter",
    "ConsoleFormatter",
    "RichFormatter",
    "create_formatter",
]
