"""
Severity routing.

Every destination gets its own predicate over the record level; they are
evaluated independently, so one record may reach several sinks.
"""

from __future__ import annotations

from typing import Callable

from .levels import Level

LevelEnabler = Callable[[Level], bool]


def file_enabler(minimum: Level) -> LevelEnabler:
    """Main log file: everything at or above ``minimum``."""

    def enabled(level: Level) -> bool:
        return level >= minimum

    return enabled


def error_enabler(minimum: Level) -> LevelEnabler:
    """Error file and stderr: at or above both ``minimum`` and ERROR."""

    def enabled(level: Level) -> bool:
        return level >= minimum and level >= Level.ERROR

    return enabled


def stdout_enabler(minimum: Level) -> LevelEnabler:
    """Stdout: at or above ``minimum`` but below ERROR."""

    def enabled(level: Level) -> bool:
        return level >= minimum and level < Level.ERROR

    return enabled
