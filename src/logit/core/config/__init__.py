"""
Configuration for logit.

Usage:
    from logit.core.config import load_config

    config = load_config({
        "app": {"name": "orders", "version": "1.4.0"},
        "logger": {"enable_file": True, "rotation_interval": "24h"},
        "environment": "production",
    })
"""

from ...exceptions.config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
)
from .manager import EnvironmentOverride, apply_env_overrides, load_config
from .models import (
    AppConfig,
    CrashReportingConfig,
    Environment,
    LoggerConfig,
    LogitConfig,
    LogitSettings,
    parse_duration,
)

__all__ = [
    # Configuration models
    "AppConfig",
    "CrashReportingConfig",
    "Environment",
    "LoggerConfig",
    "LogitConfig",
    "LogitSettings",
    "parse_duration",
    # Loading
    "EnvironmentOverride",
    "apply_env_overrides",
    "load_config",
    # Exceptions
    "ConfigurationError",
    "InvalidConfigurationError",
    "ConfigurationValidationError",
]
