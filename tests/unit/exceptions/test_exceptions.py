"""
Unit tests for the logit exception hierarchy.
"""

from pathlib import Path

import pytest

from logit.exceptions import (
    ConfigurationError,
    ConfigurationValidationError,
    EscalationError,
    ExceptionContext,
    InvalidConfigurationError,
    LogitError,
    LogitIOError,
    RotationError,
    SinkError,
)


@pytest.mark.unit
class TestLogitError:
    """Test the base exception."""

    def test_message_only(self):
        error = LogitError("something broke")

        assert str(error) == "something broke"
        assert error.help_text is None
        assert error.error_code is None
        assert error.context == {}

    def test_with_context(self):
        context = ExceptionContext(help_text="try again", error_code="E1", context={"a": 1})
        error = LogitError("something broke", context)

        assert str(error) == "something broke (help: try again)"
        assert error.error_code == "E1"
        assert error.context == {"a": 1}

    def test_context_is_copied(self):
        context = ExceptionContext(context={"a": 1})
        error = LogitError("x", context)

        error.add_context(b=2)

        assert context.context == {"a": 1}
        assert error.context == {"a": 1, "b": 2}

    def test_to_dict(self):
        error = LogitError("x", ExceptionContext(error_code="E2"))

        data = error.to_dict()

        assert data["error_type"] == "LogitError"
        assert data["message"] == "x"
        assert data["error_code"] == "E2"
        assert "timestamp" in data


@pytest.mark.unit
class TestConfigurationErrors:
    """Test configuration exceptions."""

    def test_invalid_configuration(self):
        error = InvalidConfigurationError("max_size_bytes", 0, "a positive byte count")

        assert isinstance(error, ConfigurationError)
        assert error.field == "max_size_bytes"
        assert error.error_code == "CONFIG_INVALID"
        assert "got 0, expected a positive byte count" in str(error)

    def test_validation_error_lists_errors(self):
        error = ConfigurationValidationError(["app.name: too short", "logger.format: bad"])

        assert error.errors == ["app.name: too short", "logger.format: bad"]
        assert "\n  - app.name: too short" in error.message
        assert "\n  - logger.format: bad" in error.message


@pytest.mark.unit
class TestSinkErrors:
    """Test sink, rotation and escalation exceptions."""

    def test_io_error(self):
        cause = PermissionError(13, "Permission denied")
        error = LogitIOError("open", Path("/var/log/app/a.log"), cause)

        assert error.cause is cause
        assert error.error_code == "LOG_IO_ERROR"
        assert error.context == {"operation": "open", "path": "/var/log/app/a.log"}
        assert "/var/log/app" in error.help_text

    def test_rotation_error(self):
        error = RotationError(Path("a.log"), OSError("disk"))

        assert isinstance(error, LogitIOError)
        assert error.operation == "rotation"
        assert error.error_code == "LOG_ROTATION_ERROR"

    def test_escalation_error_includes_cause(self):
        error = EscalationError("Crash report delivery failed", ConnectionError("refused"))

        assert str(error) == "Crash report delivery failed: refused"
        assert error.error_code == "ESCALATION_FAILED"

    def test_sink_error(self):
        error = SinkError("file", OSError(28, "No space left on device"))

        assert error.sink_name == "file"
        assert error.context == {"sink": "file", "cause_type": "OSError"}
        assert "Sink 'file' failed: OSError" in str(error)
