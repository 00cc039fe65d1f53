"""
Core logger: structlog processors feeding a tee of (encoder, sink, predicate) cores.
"""

from __future__ import annotations

import contextlib
import os
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Sequence

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from .config import LogSettings
from .exceptions import FlushError, Panic
from .formatters import ConsoleEncoder, safe_repr, safe_str
from .levels import Level
from .panics import PanicHandler, PanicReporter, suppress
from .rotation import Clock
from .router import LevelEnabler, error_enabler, file_enabler, stdout_enabler
from .sinks import BaseSink, RotatingFileSink, StdioSink

ExitHook = Callable[[int], Any]

_MISSING = object()

# Keys a caller may not set directly: the rendered record keys, plus the
# structlog controls that request a stack or an exception trailer.
USER_RESERVED_KEYS = ConsoleEncoder.RESERVED_KEYS | {"exc_info", "stack_info"}

# =============================================================================
# Structlog Processors
# =============================================================================


def format_timestamp(moment: datetime) -> str:
    """``YYYY-MM-DD HH:MM:SS.mmm``"""
    return f"{moment.strftime('%Y-%m-%d %H:%M:%S')}.{moment.microsecond // 1000:03d}"


def add_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Record the level; method names are the lowercase level names."""
    event_dict["level"] = method_name
    return event_dict


class TimestampAdder:
    """Add a millisecond timestamp in local time or UTC."""

    def __init__(self, local_time: bool = True):
        self.local_time = local_time

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        now = datetime.now() if self.local_time else datetime.now(timezone.utc)
        event_dict["timestamp"] = format_timestamp(now)
        return event_dict


def add_error_stack(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Request a call-site stack for ERROR and above unless an exception is attached."""
    if Level.parse(method_name) >= Level.ERROR and not event_dict.get("exc_info"):
        event_dict.setdefault("stack_info", True)
    return event_dict


def build_processors(settings: LogSettings) -> list[Processor]:
    return [
        add_level,
        TimestampAdder(settings.local_time),
        add_error_stack,
        structlog.processors.StackInfoRenderer(additional_ignores=["teelog"]),
        structlog.processors.format_exc_info,
    ]


# =============================================================================
# Cores and Tee
# =============================================================================


@dataclass(frozen=True)
class Core:
    """One destination: how to render, where to write, which levels to accept."""

    encoder: ConsoleEncoder
    sink: BaseSink
    enabled: LevelEnabler

    def write(self, event_dict: EventDict) -> None:
        self.sink.write(self.encoder.encode(event_dict))


def build_cores(settings: LogSettings, *, clock: Clock | None = None) -> list[Core]:
    """Main file, error file, stdout and stderr cores for ``settings``."""
    rotation = dict(
        max_size=settings.max_size,
        max_age=settings.max_age,
        max_backups=settings.max_backups,
        local_time=settings.local_time,
        clock=clock,
    )
    plain = ConsoleEncoder(use_color=False)
    colored = ConsoleEncoder(use_color=settings.color)
    minimum = settings.level
    return [
        Core(plain, RotatingFileSink(settings.file_path, **rotation), file_enabler(minimum)),
        Core(plain, RotatingFileSink(settings.error_file_path, **rotation), error_enabler(minimum)),
        Core(colored, StdioSink("stdout"), stdout_enabler(minimum)),
        Core(colored, StdioSink("stderr"), error_enabler(minimum)),
    ]


def _report_sink_failure(core: Core) -> None:
    stream = sys.__stderr__
    if stream is None:
        return
    stream.write(f"teelog: failed to write to {core.sink!r}\n")
    traceback.print_exc(file=stream)


class TeeWriter:
    """The wrapped logger: fans each processed event out to every accepting core."""

    def __init__(
        self,
        cores: Iterable[Core],
        *,
        settings: LogSettings,
        exit_hook: ExitHook = os._exit,
    ):
        self.cores = list(cores)
        self.settings = settings
        self.minimum = settings.level
        self.exit_hook = exit_hook

    def write(self, /, **event_dict: Any) -> None:
        level = Level.parse(event_dict.get("level", "info"))
        for core in self.cores:
            if not core.enabled(level):
                continue
            try:
                core.write(event_dict)
            except Exception:  # one broken sink must not stop the others
                _report_sink_failure(core)

    debug = info = warn = error = dpanic = panic = fatal = write

    @property
    def sinks(self) -> list[BaseSink]:
        return [core.sink for core in self.cores]

    def flush(self) -> None:
        errors: list[BaseException] = []
        for sink in self.sinks:
            try:
                sink.flush()
            except (OSError, ValueError) as exc:
                errors.append(exc)
        if errors:
            raise FlushError(errors)

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()


# =============================================================================
# Message helpers
# =============================================================================


def _sprint(values: Sequence[Any]) -> str:
    return " ".join(safe_str(v) for v in values)


def _sprintf(template: Any, args: Sequence[Any]) -> str:
    template = safe_str(template)
    if not args:
        return template
    try:
        return template % tuple(args)
    except Exception:
        return f"{template} [{', '.join(safe_repr(a) for a in args)}]"


def _escape(fields: dict[str, Any], reserved: frozenset[str]) -> dict[str, Any]:
    """Move caller keys that collide with record keys under a ``fields.`` prefix."""
    return {f"fields.{k}" if k in reserved else k: v for k, v in fields.items()}


def _pairs(keys_and_values: Sequence[Any]) -> tuple[dict[str, Any], Any]:
    """Pair up alternating keys and values; returns the odd trailing value, if any."""
    values = list(keys_and_values)
    dangling = values.pop() if len(values) % 2 else _MISSING
    return {safe_str(k): v for k, v in zip(values[::2], values[1::2])}, dangling


def _sweeten(message: Any, keys_and_values: Sequence[Any], fields: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    pairs, dangling = _pairs(keys_and_values)
    pairs.update(fields)
    message = "" if message is None else safe_str(message)
    if dangling is not _MISSING:
        message = f"{message} {safe_str(dangling)}" if message else safe_str(dangling)
    return message, _escape(pairs, USER_RESERVED_KEYS)


# =============================================================================
# Logger
# =============================================================================


class Logger(structlog.BoundLoggerBase):
    """A leveled, structured logger over a fixed set of cores.

    Build one with ``Logger.from_settings`` and pass it where it is needed;
    the package-level functions in ``teelog`` wrap a default instance.

    Each level has three call shapes::

        logger.info("joined", user, "in", 3, "s")
        logger.infof("joined %s in %.1fs", user, 3.0)
        logger.infow("joined", "user", user, "elapsed", 3.0)

    ``panic*`` raises ``Panic`` after logging, ``fatal*`` flushes and calls
    the exit hook, and ``dpanic*`` raises only in development mode.
    """

    _logger: TeeWriter

    @classmethod
    def from_settings(
        cls,
        settings: LogSettings | None = None,
        *,
        exit_hook: ExitHook | None = None,
        clock: Clock | None = None,
    ) -> Logger:
        if settings is None:
            settings = LogSettings()
        writer = TeeWriter(
            build_cores(settings, clock=clock),
            settings=settings,
            exit_hook=exit_hook or os._exit,
        )
        return cls(writer, build_processors(settings), {})

    @property
    def settings(self) -> LogSettings:
        return self._logger.settings

    @property
    def cores(self) -> list[Core]:
        return self._logger.cores

    def enabled(self, level: Level) -> bool:
        return level >= self._logger.minimum

    def log(self, level: Level | str, message: Any, /, **fields: Any) -> None:
        """Write one record at ``level`` with no panic or exit behavior."""
        level = Level.parse(level)
        if not self.enabled(level):
            return
        fields = _escape(fields, ConsoleEncoder.RESERVED_KEYS)
        try:
            args, kwargs = self._process_event(level.method_name, safe_str(message), fields)
        except structlog.DropEvent:
            return
        getattr(self._logger, level.method_name)(*args, **kwargs)

    def _write(self, level: Level, message: str, fields: dict[str, Any] | None = None) -> None:
        self.log(level, message, **(fields or {}))
        if level is Level.PANIC or (level is Level.DPANIC and self.settings.development):
            raise Panic(message)
        if level is Level.FATAL:
            with contextlib.suppress(FlushError):
                self.flush()
            self._logger.exit_hook(1)

    # -- debug ----------------------------------------------------------------

    def debug(self, *values: Any) -> None:
        self._write(Level.DEBUG, _sprint(values))

    def debugf(self, template: str, *args: Any) -> None:
        self._write(Level.DEBUG, _sprintf(template, args))

    def debugw(self, message: str, *keys_and_values: Any, **fields: Any) -> None:
        self._write(Level.DEBUG, *_sweeten(message, keys_and_values, fields))

    # -- info -----------------------------------------------------------------

    def info(self, *values: Any) -> None:
        self._write(Level.INFO, _sprint(values))

    def infof(self, template: str, *args: Any) -> None:
        self._write(Level.INFO, _sprintf(template, args))

    def infow(self, message: str, *keys_and_values: Any, **fields: Any) -> None:
        self._write(Level.INFO, *_sweeten(message, keys_and_values, fields))

    # -- warn -----------------------------------------------------------------

    def warn(self, *values: Any) -> None:
        self._write(Level.WARN, _sprint(values))

    def warnf(self, template: str, *args: Any) -> None:
        self._write(Level.WARN, _sprintf(template, args))

    def warnw(self, message: str, *keys_and_values: Any, **fields: Any) -> None:
        self._write(Level.WARN, *_sweeten(message, keys_and_values, fields))

    # -- error ----------------------------------------------------------------

    def error(self, *values: Any) -> None:
        self._write(Level.ERROR, _sprint(values))

    def errorf(self, template: str, *args: Any) -> None:
        self._write(Level.ERROR, _sprintf(template, args))

    def errorw(self, message: str, *keys_and_values: Any, **fields: Any) -> None:
        self._write(Level.ERROR, *_sweeten(message, keys_and_values, fields))

    # -- dpanic ---------------------------------------------------------------

    def dpanic(self, *values: Any) -> None:
        self._write(Level.DPANIC, _sprint(values))

    def dpanicf(self, template: str, *args: Any) -> None:
        self._write(Level.DPANIC, _sprintf(template, args))

    def dpanicw(self, message: str, *keys_and_values: Any, **fields: Any) -> None:
        self._write(Level.DPANIC, *_sweeten(message, keys_and_values, fields))

    # -- panic ----------------------------------------------------------------

    def panic(self, *values: Any) -> None:
        self._write(Level.PANIC, _sprint(values))

    def panicf(self, template: str, *args: Any) -> None:
        self._write(Level.PANIC, _sprintf(template, args))

    def panicw(self, message: str, *keys_and_values: Any, **fields: Any) -> None:
        self._write(Level.PANIC, *_sweeten(message, keys_and_values, fields))

    # -- fatal ----------------------------------------------------------------

    def fatal(self, *values: Any) -> None:
        self._write(Level.FATAL, _sprint(values))

    def fatalf(self, template: str, *args: Any) -> None:
        self._write(Level.FATAL, _sprintf(template, args))

    def fatalw(self, message: str, *keys_and_values: Any, **fields: Any) -> None:
        self._write(Level.FATAL, *_sweeten(message, keys_and_values, fields))

    # -- context & lifecycle --------------------------------------------------

    def with_fields(self, *keys_and_values: Any, **fields: Any) -> Logger:
        """Return a logger sharing these cores with ``fields`` bound to every record.

        An odd trailing value is kept under the ``ignored`` key.
        """
        pairs, dangling = _pairs(keys_and_values)
        if dangling is not _MISSING:
            pairs["ignored"] = dangling
        pairs.update(fields)
        return self.bind(**_escape(pairs, USER_RESERVED_KEYS))

    def report_panic(self, *extras: Any, handler: PanicHandler = suppress) -> PanicReporter:
        """Context manager / decorator logging any exception escaping its block."""
        return PanicReporter(lambda: self, extras, handler=handler)

    def flush(self) -> None:
        """Flush every sink.

        Raises:
            FlushError: if any sink failed; all sinks are still attempted.
        """
        self._logger.flush()

    sync = flush

    def close(self) -> None:
        """Flush and release every sink; later writes reopen the files."""
        with contextlib.suppress(FlushError):
            self.flush()
        self._logger.close()
