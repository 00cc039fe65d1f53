"""
Interceptors for capturing standard library and third-party logs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from .core import Logger
from .levels import Level


class StdlibHandler(logging.Handler):
    """
    Forward standard library logging records into a teelog logger.

    Records keep their stdlib logger name under the ``logger`` field and are
    written at the nearest teelog level. CRITICAL maps to DPANIC; nothing
    forwarded here ever raises ``Panic`` or exits.
    """

    def __init__(self, resolve_logger: Callable[[], Logger], level: int = logging.NOTSET):
        super().__init__(level)
        self._resolve_logger = resolve_logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            fields: dict[str, Any] = {"logger": record.name}
            if record.exc_info:
                fields["exc_info"] = record.exc_info
            self._resolve_logger().log(Level.from_stdlib(record.levelno), message, **fields)
        except Exception:
            self.handleError(record)


def intercept_stdlib(
    logger: Logger | None = None,
    *,
    names: Iterable[str] = (),
    level: int = logging.NOTSET,
) -> StdlibHandler:
    """Route stdlib logging into teelog.

    With no ``names`` the root logger's handlers are replaced; otherwise each
    named logger has its handlers replaced and stops propagating, so records
    are not written twice. Without ``logger`` the default logger is used,
    looked up per record.
    """
    if logger is None:
        from .facade import get_logger

        resolve = get_logger
    else:
        resolve = lambda: logger  # noqa: E731

    handler = StdlibHandler(resolve)
    targets = list(names)
    if not targets:
        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(level or logging.DEBUG)
        return handler

    for name in targets:
        lg = logging.getLogger(name)
        lg.handlers = [handler]
        lg.propagate = False
        if level:
            lg.setLevel(level)
    return handler
