"""
Severity levels.

Values line up with the standard library so records bridged from
``logging`` map onto the nearest teelog level (CRITICAL becomes DPANIC).
"""

from __future__ import annotations

import logging
from enum import IntEnum

from .exceptions import ConfigurationError


class Level(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    DPANIC = logging.CRITICAL
    PANIC = 55
    FATAL = 60

    @property
    def method_name(self) -> str:
        """Lowercase name, used as the structlog method name."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: str | int | Level) -> Level:
        """Parse a level name (case-insensitive) or numeric value.

        ``warning`` is accepted as an alias for ``warn``.

        Raises:
            ConfigurationError: if the value names no level.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ConfigurationError(f"unrecognized log level: {value!r}") from None
        if isinstance(value, str):
            name = value.strip().upper()
            if name == "WARNING":
                name = "WARN"
            if name in cls.__members__:
                return cls[name]
        raise ConfigurationError(f"unrecognized log level: {value!r}")

    @classmethod
    def from_stdlib(cls, levelno: int) -> Level:
        """Highest level whose value does not exceed a stdlib ``levelno``."""
        chosen = cls.DEBUG
        for level in cls:
            if level.value <= levelno:
                chosen = level
        return chosen
