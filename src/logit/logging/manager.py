"""
Logger construction from configuration.

Builds the sink set described by a LogitConfig (console, rotating file,
crash-reporting escalation) and wraps it in a Logger. Construction is the
only place where logit raises: an invalid rotation policy or an unusable
log directory is a ConfigurationError.
"""

import atexit
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, TextIO

from ..core.config import (
    AppConfig,
    CrashReportingConfig,
    Environment,
    LoggerConfig,
    LogitConfig,
)
from ..exceptions import InvalidConfigurationError
from .escalation import CrashReporter, EscalationSink, HttpCrashReporter
from .facade import Logger
from .formatters import create_formatter
from .retention import LogFileNamer
from .rotation import RotatingWriter
from .router import SinkRouter
from .sinks import ConsoleSink, FileSink, LevelFilteredSink

logger = logging.getLogger(__name__)


def build_logger(
    config: LogitConfig,
    escalation: Optional[EscalationSink] = None,
    reporter: Optional[CrashReporter] = None,
    stream: Optional[TextIO] = None,
    clock: Optional[Callable[[], datetime]] = None,
    exit_func: Optional[Callable[[int], Any]] = None,
    register_atexit: bool = True,
) -> Logger:
    """Create a Logger with the sinks enabled in ``config``.

    Args:
        config: Validated configuration
        escalation: Escalation sink to register instead of one built from
            ``config.crash_reporting``
        reporter: Crash reporter for the escalation sink built from config
            (defaults to an HttpCrashReporter for the configured endpoint)
        stream: Console stream (defaults to stdout)
        clock: Time source shared by the entries and the file writer
        exit_func: Called with the exit status after a fatal entry
        register_atexit: Flush and close the sinks at interpreter exit

    Raises:
        InvalidConfigurationError: the log directory cannot be used.
    """
    sinks: List[LevelFilteredSink] = []
    logger_config = config.logger
    format_type = logger_config.resolve_format(config.environment)

    if logger_config.enable_console:
        formatter = create_formatter(format_type, logger_config.time_format)
        sinks.append(
            LevelFilteredSink(ConsoleSink(formatter, stream), logger_config.console_level, "console")
        )

    if logger_config.enable_file:
        sinks.append(_build_file_sink(config.app, logger_config, format_type, clock))

    if escalation is None:
        escalation = _build_escalation(config.crash_reporting, config.environment, reporter)
    if escalation is not None:
        sinks.append(escalation)

    result = Logger(
        SinkRouter(sinks),
        fields=[("appName", config.app.name), ("appVersion", config.app.version)],
        clock=clock,
        exit_func=exit_func,
    )
    if register_atexit:
        atexit.register(result.close)
    return result


def _build_file_sink(
    app: AppConfig,
    logger_config: LoggerConfig,
    format_type: str,
    clock: Optional[Callable[[], datetime]],
) -> LevelFilteredSink:
    directory = logger_config.directory.expanduser()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InvalidConfigurationError("directory", str(directory), f"a writable directory ({e})") from e
    if not directory.is_dir():
        raise InvalidConfigurationError("directory", str(directory), "a directory")

    writer = RotatingWriter(
        directory=directory,
        namer=LogFileNamer(app.name, app.version),
        max_size_bytes=logger_config.max_size_bytes,
        rotation_interval=logger_config.rotation_interval,
        max_backups=logger_config.max_backups,
        max_age=logger_config.max_age,
        compress=logger_config.compress,
        clock=clock,
    )
    # Terminal colors have no place in files
    file_format = "console" if format_type == "rich" else format_type
    formatter = create_formatter(file_format, logger_config.time_format)
    return LevelFilteredSink(FileSink(writer, formatter), logger_config.file_level, "file")


def _build_escalation(
    crash_config: Optional[CrashReportingConfig],
    environment: Environment,
    reporter: Optional[CrashReporter],
) -> Optional[EscalationSink]:
    if crash_config is None:
        return None
    if not crash_config.enabled_for(environment):
        logger.debug(f"Crash reporting disabled for environment '{environment.value}'")
        return None

    if reporter is None:
        reporter = HttpCrashReporter(
            crash_config.endpoint,
            crash_config.key,
            environment=environment.value,
            timeout=crash_config.timeout_seconds,
        )
    return EscalationSink(reporter, crash_config.min_level, crash_config.queue_size)


def must_new_logger(
    app: AppConfig,
    logger_config: Optional[LoggerConfig] = None,
    crash_config: Optional[CrashReportingConfig] = None,
    environment: Environment = Environment.LOCAL,
    **kwargs,
) -> Logger:
    """Create a Logger from already-validated parts.

    Raises:
        ConfigurationError: the configuration cannot produce a logger.
    """
    config = LogitConfig(
        app=app,
        logger=logger_config or LoggerConfig(),
        crash_reporting=crash_config,
        environment=environment,
    )
    return build_logger(config, **kwargs)


def new_nop_logger() -> Logger:
    """A logger that accepts every call and performs no I/O."""
    return Logger.nop()
