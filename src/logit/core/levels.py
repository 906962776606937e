"""
Severity levels.

Levels share the numeric values of the standard library so they can be
compared with, and converted from, ``logging`` constants.
"""

import logging
from enum import IntEnum
from typing import Union


class Level(IntEnum):
    """Entry severity, ordered Debug < Info < Warn < Error < Fatal."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    FATAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Union[str, int, "Level"]) -> "Level":
        """Convert a level name or number into a Level."""
        if isinstance(value, Level):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        if name in _ALIASES:
            return _ALIASES[name]
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None

    @property
    def label(self) -> str:
        return self.name


_ALIASES = {
    "WARNING": Level.WARN,
    "CRITICAL": Level.FATAL,
    "PANIC": Level.FATAL,
}
