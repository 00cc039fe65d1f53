"""
Unified exception hierarchy for teelog.

Logging calls themselves never raise write errors; these exceptions only
surface from configuration, explicit flushes and the panic levels.
"""

from __future__ import annotations

from typing import Any, Sequence


class TeelogError(Exception):
    """Root of all teelog exceptions."""

    pass


class ConfigurationError(TeelogError, ValueError):
    """Raised for an unknown level name or an invalid configuration override."""

    pass


class FlushError(TeelogError):
    """One or more sinks failed to flush.

    The sinks are all attempted before this is raised; ``errors`` holds
    every underlying failure in sink order.
    """

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(f"failed to flush {len(self.errors)} sink(s): {details}")


class Panic(TeelogError):
    """Raised after a record is written at panic level.

    ``value`` is the logged message, so a recovering caller can tell what
    was reported.
    """

    def __init__(self, value: Any) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return str(self.value)
