"""
Configuration models for logit.

Pydantic models validating everything a logger needs at construction:
application identity, sink selection, rotation policy and crash reporting.
"""

import re
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...constants import (
    DEFAULT_ESCALATION_QUEUE_SIZE,
    DEFAULT_LOG_DIRECTORY,
    DEFAULT_MAX_BACKUPS,
    DEFAULT_MAX_FILE_SIZE_BYTES,
    DEFAULT_REPORT_TIMEOUT_SECONDS,
    DEFAULT_ROTATION_INTERVAL,
    DEFAULT_TIME_FORMAT,
    MAX_REPORT_TIMEOUT_SECONDS,
    MIN_MAX_FILE_SIZE_BYTES,
)
from ..levels import Level

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(us|ms|s|m|h|d)")
_DURATION_UNITS = {
    "us": timedelta(microseconds=1),
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}


def parse_duration(value: Any) -> timedelta:
    """Parse ``"24h"``, ``"1h30m"``, ``"500ms"``, a number of seconds or a timedelta."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return timedelta(seconds=value)

    text = str(value).strip()
    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass

    total = timedelta(0)
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if not text or position != len(text):
        raise ValueError(f"invalid duration {value!r}, expected e.g. '24h', '1h30m' or seconds")
    return total


class Environment(str, Enum):
    """Deployment environment; selects the encoder and escalation."""

    LOCAL = "local"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def is_local(self) -> bool:
        return self is Environment.LOCAL


class AppConfig(BaseModel):
    """Identity of the process, attached to every entry."""

    name: str = Field(..., min_length=1, description="Application name")
    version: str = Field("0.0.0", min_length=1, description="Application version")

    @field_validator("name", "version")
    @classmethod
    def validate_file_safe(cls, v: str) -> str:
        if "/" in v or "\\" in v:
            raise ValueError("must not contain path separators")
        return v


class LoggerConfig(BaseModel):
    """Sink selection and rotation policy."""

    directory: Path = Field(Path(DEFAULT_LOG_DIRECTORY), description="Directory for log files")
    enable_console: bool = Field(True, description="Write entries to stdout")
    console_level: Level = Field(Level.INFO, description="Minimum console level")
    enable_file: bool = Field(False, description="Write entries to rotating files")
    file_level: Level = Field(Level.INFO, description="Minimum file level")
    max_size_bytes: int = Field(
        DEFAULT_MAX_FILE_SIZE_BYTES,
        ge=MIN_MAX_FILE_SIZE_BYTES,
        description="Rotate before a write would exceed this size",
    )
    max_backups: int = Field(
        DEFAULT_MAX_BACKUPS, ge=0, description="Rotated files to keep (0 keeps all)"
    )
    max_age: Optional[timedelta] = Field(
        None, description="Delete rotated files older than this (None keeps all)"
    )
    rotation_interval: timedelta = Field(
        parse_duration(DEFAULT_ROTATION_INTERVAL),
        description="Rotate at least this often",
    )
    compress: bool = Field(False, description="Gzip rotated files")
    format: str = Field("auto", description="Encoder: auto, json, console, rich")
    time_format: str = Field(DEFAULT_TIME_FORMAT, description="strftime layout for timestamps")

    model_config = {"extra": "forbid", "validate_assignment": True}

    @field_validator("console_level", "file_level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> Level:
        return Level.parse(v)

    @field_validator("rotation_interval", mode="before")
    @classmethod
    def validate_rotation_interval(cls, v: Any) -> timedelta:
        interval = parse_duration(v)
        if interval <= timedelta(0):
            raise ValueError("rotation_interval must be positive")
        return interval

    @field_validator("max_age", mode="before")
    @classmethod
    def validate_max_age(cls, v: Any) -> Optional[timedelta]:
        if v is None or v == "":
            return None
        age = parse_duration(v)
        return age if age > timedelta(0) else None

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ["auto", "json", "console", "rich"]:
            raise ValueError("format must be one of: auto, json, console, rich")
        return v

    def resolve_format(self, environment: Environment) -> str:
        """Structured output everywhere except local development."""
        if self.format != "auto":
            return self.format
        return "console" if environment.is_local else "json"


class CrashReportingConfig(BaseModel):
    """Crash-reporting endpoint credentials and escalation policy."""

    key: str = Field(..., min_length=1, description="Project key")
    host: str = Field(..., min_length=1, description="Service host, e.g. crash.example.com")
    scheme: str = Field("https", description="URL scheme")
    path: str = Field("/api/events", description="Ingestion path")
    timeout_seconds: float = Field(
        DEFAULT_REPORT_TIMEOUT_SECONDS, gt=0, le=MAX_REPORT_TIMEOUT_SECONDS
    )
    queue_size: int = Field(DEFAULT_ESCALATION_QUEUE_SIZE, ge=1)
    min_level: Level = Field(Level.ERROR, description="Minimum escalated level")
    environments: List[Environment] = Field(
        default_factory=lambda: [
            Environment.DEVELOPMENT,
            Environment.STAGING,
            Environment.PRODUCTION,
        ],
        description="Environments in which entries are escalated",
    )

    @field_validator("min_level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> Level:
        return Level.parse(v)

    @property
    def endpoint(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"

    def enabled_for(self, environment: Environment) -> bool:
        return environment in self.environments


class LogitConfig(BaseModel):
    """Main logit configuration model."""

    app: AppConfig
    logger: LoggerConfig = Field(default_factory=LoggerConfig)
    crash_reporting: Optional[CrashReportingConfig] = None
    environment: Environment = Environment.LOCAL

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class LogitSettings(BaseSettings):
    """Settings that can be overridden by environment variables."""

    logit_env: Optional[str] = Field(None, alias="LOGIT_ENV")
    logit_app_name: Optional[str] = Field(None, alias="LOGIT_APP_NAME")
    logit_app_version: Optional[str] = Field(None, alias="LOGIT_APP_VERSION")

    logit_log_dir: Optional[str] = Field(None, alias="LOGIT_LOG_DIR")
    logit_enable_console: Optional[bool] = Field(None, alias="LOGIT_ENABLE_CONSOLE")
    logit_console_level: Optional[str] = Field(None, alias="LOGIT_CONSOLE_LEVEL")
    logit_enable_file: Optional[bool] = Field(None, alias="LOGIT_ENABLE_FILE")
    logit_file_level: Optional[str] = Field(None, alias="LOGIT_FILE_LEVEL")
    logit_max_size_bytes: Optional[int] = Field(None, alias="LOGIT_MAX_SIZE_BYTES")
    logit_max_backups: Optional[int] = Field(None, alias="LOGIT_MAX_BACKUPS")
    logit_max_age: Optional[str] = Field(None, alias="LOGIT_MAX_AGE")
    logit_rotation_interval: Optional[str] = Field(None, alias="LOGIT_ROTATION_INTERVAL")
    logit_compress: Optional[bool] = Field(None, alias="LOGIT_COMPRESS")
    logit_format: Optional[str] = Field(None, alias="LOGIT_FORMAT")

    logit_crash_key: Optional[str] = Field(None, alias="LOGIT_CRASH_KEY")
    logit_crash_host: Optional[str] = Field(None, alias="LOGIT_CRASH_HOST")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )
