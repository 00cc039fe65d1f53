"""
Process-wide default logger.

A convenience for the outermost application layer; library code should
accept a ``Logger`` instead. The default instance is built from
``LogSettings()`` on first use, exactly once, and can be replaced with
``initialize``. Replacement swaps the reference under a lock and only
then closes the previous logger's sinks.
"""

from __future__ import annotations

import threading
from typing import Any

from .config import LogSettings
from .core import Logger
from .levels import Level
from .panics import PanicHandler, PanicReporter, suppress

_lock = threading.RLock()
_default: Logger | None = None


def get_logger() -> Logger:
    """Return the default logger, creating it from defaults on first use."""
    global _default
    logger = _default
    if logger is not None:
        return logger
    with _lock:
        if _default is None:
            _default = Logger.from_settings(LogSettings())
        return _default


def get_configuration() -> LogSettings:
    """The live settings of the default logger (not a copy)."""
    return get_logger().settings


def initialize(settings: LogSettings | None = None, **overrides: Any) -> Logger:
    """Rebuild the default logger from ``settings`` plus ``overrides``.

    Raises:
        ConfigurationError: if an override is invalid.
    """
    global _default
    if settings is None:
        settings = LogSettings()
    settings = settings.merged(**overrides)
    logger = Logger.from_settings(settings)
    with _lock:
        previous, _default = _default, logger
    if previous is not None:
        previous.close()
    return logger


def reset() -> None:
    """Close and forget the default logger; the next call rebuilds it."""
    global _default
    with _lock:
        previous, _default = _default, None
    if previous is not None:
        previous.close()


# =============================================================================
# Leveled functions
# =============================================================================


def debug(*values: Any) -> None:
    get_logger().debug(*values)


def debugf(template: str, *args: Any) -> None:
    get_logger().debugf(template, *args)


def debugw(message: str, *keys_and_values: Any, **fields: Any) -> None:
    get_logger().debugw(message, *keys_and_values, **fields)


def info(*values: Any) -> None:
    get_logger().info(*values)


def infof(template: str, *args: Any) -> None:
    get_logger().infof(template, *args)


def infow(message: str, *keys_and_values: Any, **fields: Any) -> None:
    get_logger().infow(message, *keys_and_values, **fields)


def warn(*values: Any) -> None:
    get_logger().warn(*values)


def warnf(template: str, *args: Any) -> None:
    get_logger().warnf(template, *args)


def warnw(message: str, *keys_and_values: Any, **fields: Any) -> None:
    get_logger().warnw(message, *keys_and_values, **fields)


def error(*values: Any) -> None:
    get_logger().error(*values)


def errorf(template: str, *args: Any) -> None:
    get_logger().errorf(template, *args)


def errorw(message: str, *keys_and_values: Any, **fields: Any) -> None:
    get_logger().errorw(message, *keys_and_values, **fields)


def dpanic(*values: Any) -> None:
    get_logger().dpanic(*values)


def dpanicf(template: str, *args: Any) -> None:
    get_logger().dpanicf(template, *args)


def dpanicw(message: str, *keys_and_values: Any, **fields: Any) -> None:
    get_logger().dpanicw(message, *keys_and_values, **fields)


def panic(*values: Any) -> None:
    get_logger().panic(*values)


def panicf(template: str, *args: Any) -> None:
    get_logger().panicf(template, *args)


def panicw(message: str, *keys_and_values: Any, **fields: Any) -> None:
    get_logger().panicw(message, *keys_and_values, **fields)


def fatal(*values: Any) -> None:
    get_logger().fatal(*values)


def fatalf(template: str, *args: Any) -> None:
    get_logger().fatalf(template, *args)


def fatalw(message: str, *keys_and_values: Any, **fields: Any) -> None:
    get_logger().fatalw(message, *keys_and_values, **fields)


def log(level: Level | str, message: Any, /, **fields: Any) -> None:
    get_logger().log(level, message, **fields)


# =============================================================================
# Context, panics and lifecycle
# =============================================================================


def with_fields(*keys_and_values: Any, **fields: Any) -> Logger:
    return get_logger().with_fields(*keys_and_values, **fields)


def report_panic(*extras: Any, handler: PanicHandler = suppress) -> PanicReporter:
    """Guard a block or function with the default logger.

    Usage::

        with teelog.report_panic(request):
            handle(request)

    The logger is looked up when the guarded block exits, so decorated
    functions follow later calls to ``initialize``.
    """
    return PanicReporter(get_logger, extras, handler=handler)


def flush() -> None:
    """Flush the default logger's sinks; raises ``FlushError`` on failure."""
    get_logger().flush()


sync = flush
