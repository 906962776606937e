"""
logit: structured logging facade for server processes.

Severity-leveled entries with trace id propagation, fan-out to console and
size/time rotated files, and escalation of errors to a crash-reporting
service.

Architecture Overview:
- core: levels, trace id correlation and configuration models
- logging: entries, sinks, router, rotating writer, escalation and facade
- exceptions: error taxonomy
"""

__version__ = "0.1.0"

from .core.config import (
    AppConfig,
    CrashReportingConfig,
    Environment,
    LoggerConfig,
    LogitConfig,
    load_config,
)
from .core.correlation import TraceContext, new_scope, resolve
from .core.levels import Level
from .exceptions import ConfigurationError, LogitError
from .logging import (
    Field,
    LogEntry,
    Logger,
    build_logger,
    must_new_logger,
    new_nop_logger,
)

__all__ = [
    "AppConfig",
    "CrashReportingConfig",
    "Environment",
    "LoggerConfig",
    "LogitConfig",
    "load_config",
    "TraceContext",
    "new_scope",
    "resolve",
    "Level",
    "ConfigurationError",
    "LogitError",
    "Field",
    "LogEntry",
    "Logger",
    "build_logger",
    "must_new_logger",
    "new_nop_logger",
]
