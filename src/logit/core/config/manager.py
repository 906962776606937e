"""
Configuration loading for logit.

Explicit values (usually supplied by the application's own config layer)
are overlaid with ``LOGIT_*`` environment variables and validated into a
LogitConfig. Any validation failure becomes a ConfigurationValidationError,
so a logger is never built from a half-valid configuration.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ...exceptions.config import ConfigurationValidationError
from .models import LogitConfig, LogitSettings


@dataclass
class EnvironmentOverride:
    """Helper for applying environment variable overrides."""

    config_section: Dict[str, Any]
    settings: LogitSettings

    def apply_if_set(self, setting_name: str, config_key: str) -> None:
        """Apply setting if it's set in environment."""
        value = getattr(self.settings, setting_name, None)
        if value is not None:
            self.config_section[config_key] = value

    def apply_string_if_set(self, setting_name: str, config_key: str) -> None:
        """Apply string setting if it's set and non-empty."""
        value = getattr(self.settings, setting_name, None)
        if value:
            self.config_section[config_key] = value


def apply_env_overrides(config_data: Dict[str, Any], settings: LogitSettings) -> Dict[str, Any]:
    """Overlay environment settings onto raw configuration data."""
    EnvironmentOverride(config_data, settings).apply_string_if_set("logit_env", "environment")

    app = config_data.setdefault("app", {})
    override = EnvironmentOverride(app, settings)
    override.apply_string_if_set("logit_app_name", "name")
    override.apply_string_if_set("logit_app_version", "version")

    logger_section = config_data.setdefault("logger", {})
    override = EnvironmentOverride(logger_section, settings)
    override.apply_string_if_set("logit_log_dir", "directory")
    override.apply_if_set("logit_enable_console", "enable_console")
    override.apply_string_if_set("logit_console_level", "console_level")
    override.apply_if_set("logit_enable_file", "enable_file")
    override.apply_string_if_set("logit_file_level", "file_level")
    override.apply_if_set("logit_max_size_bytes", "max_size_bytes")
    override.apply_if_set("logit_max_backups", "max_backups")
    override.apply_string_if_set("logit_max_age", "max_age")
    override.apply_string_if_set("logit_rotation_interval", "rotation_interval")
    override.apply_if_set("logit_compress", "compress")
    override.apply_string_if_set("logit_format", "format")

    if settings.logit_crash_key or settings.logit_crash_host:
        crash = config_data.get("crash_reporting") or {}
        override = EnvironmentOverride(crash, settings)
        override.apply_string_if_set("logit_crash_key", "key")
        override.apply_string_if_set("logit_crash_host", "host")
        config_data["crash_reporting"] = crash

    return config_data


def load_config(
    config_data: Optional[Dict[str, Any]] = None,
    settings: Optional[LogitSettings] = None,
) -> LogitConfig:
    """Validate configuration data with environment overrides applied.

    Raises:
        ConfigurationValidationError: the result is not a valid LogitConfig.
    """
    data = copy.deepcopy(config_data) if config_data else {}
    data = apply_env_overrides(data, settings if settings is not None else LogitSettings())

    try:
        return LogitConfig(**data)
    except ValidationError as e:
        raise ConfigurationValidationError(
            [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()]
        ) from e
    except (ValueError, TypeError) as e:
        raise ConfigurationValidationError([str(e)]) from e
