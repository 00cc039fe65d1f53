"""
Log sink abstractions and concrete implementations.

A sink receives fully rendered entries; encoding and level filtering
happen before it is reached.
"""

from __future__ import annotations

import logging
import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Literal

from .rotation import AgedRotatingFileHandler, Clock

StreamName = Literal["stdout", "stderr"]

# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def write(self, entry: str) -> None:
        """Write one rendered entry."""
        ...

    @abstractmethod
    def flush(self) -> None:
        """Push buffered entries to the underlying device."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Writes to ``sys.stdout`` or ``sys.stderr``.

    The stream is looked up on every write so redirections installed after
    the sink was built (test capture, daemonization) are honored.
    """

    def __init__(self, stream_name: StreamName = "stdout"):
        self.stream_name = stream_name
        self._lock = threading.Lock()

    @property
    def stream(self):
        return getattr(sys, self.stream_name)

    def write(self, entry: str) -> None:
        with self._lock:
            stream = self.stream
            stream.write(entry + "\n")
            stream.flush()

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()

    def close(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.stream_name!r})"


class RotatingFileSink(BaseSink):
    """Local file sink with size rotation and age/count retention."""

    def __init__(
        self,
        path: str | Path,
        *,
        max_size: int = 100,
        max_age: int = 0,
        max_backups: int = 0,
        local_time: bool = True,
        clock: Clock | None = None,
    ):
        self.path = Path(path)
        self._handler = AgedRotatingFileHandler(
            self.path,
            max_bytes=max_size * 1024 * 1024,
            max_age=max_age,
            max_backups=max_backups,
            local_time=local_time,
            clock=clock,
        )
        self._handler.setFormatter(logging.Formatter("%(message)s"))

    @property
    def handler(self) -> AgedRotatingFileHandler:
        return self._handler

    def write(self, entry: str) -> None:
        # Handler.handle takes the handler lock; I/O errors go to handleError.
        self._handler.handle(logging.makeLogRecord({"msg": entry, "args": None}))

    def flush(self) -> None:
        self._handler.flush()

    def close(self) -> None:
        self._handler.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"
