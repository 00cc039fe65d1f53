"""
Panic stack reporting.

``PanicReporter`` guards a block (or a function, as a decorator). When an
``Exception`` escapes it, the reporter logs the recovered value, one record
per stack frame live at the time of the raise (innermost first), and a deep
dump of each extra diagnostic. The exception is then handed to a handler
which decides whether it is suppressed or re-raised.
"""

from __future__ import annotations

import traceback
from contextlib import ContextDecorator
from types import TracebackType
from typing import TYPE_CHECKING, Any, Callable, Sequence

from .exceptions import Panic
from .formatters import safe_pformat, safe_str
from .levels import Level

if TYPE_CHECKING:
    from .core import Logger

PanicHandler = Callable[[BaseException], bool]


def suppress(exc: BaseException) -> bool:
    """Swallow the exception; execution resumes after the guarded block."""
    return True


def reraise(exc: BaseException) -> bool:
    """Let the exception keep propagating after it has been logged."""
    return False


def stack_frames(tb: TracebackType | None) -> list[traceback.FrameSummary]:
    """Every frame live when the exception was raised, innermost first."""
    if tb is None:
        return []
    outer_frame = tb.tb_frame.f_back
    outer = traceback.extract_stack(outer_frame) if outer_frame is not None else []
    inner = traceback.extract_tb(tb)
    return list(reversed(list(outer) + list(inner)))


class PanicReporter(ContextDecorator):
    """Log-and-handle guard for exceptions escaping a block.

    Args:
        resolve_logger: Returns the logger to report to; resolved at exit
            time so a decorator keeps following re-initialization.
        extras: Diagnostic values dumped after the stack.
        handler: Receives the exception; a truthy return suppresses it.
    """

    def __init__(
        self,
        resolve_logger: Callable[[], Logger],
        extras: Sequence[Any] = (),
        *,
        handler: PanicHandler = suppress,
    ) -> None:
        self._resolve_logger = resolve_logger
        self.extras = tuple(extras)
        self.handler = handler

    def __enter__(self) -> PanicReporter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        # SystemExit, KeyboardInterrupt and friends always propagate.
        if exc is None or not isinstance(exc, Exception):
            return False
        self.report(exc, tb)
        return bool(self.handler(exc))

    def report(self, exc: BaseException, tb: TracebackType | None = None) -> None:
        logger = self._resolve_logger()
        value = safe_str(exc.value) if isinstance(exc, Panic) else f"{type(exc).__name__}: {safe_str(exc)}"
        logger.log(Level.ERROR, value, stack_info=False)

        for i, frame in enumerate(stack_frames(tb if tb is not None else exc.__traceback__)):
            logger.log(
                Level.ERROR,
                f"frame {i}:[func:{frame.name},file:{frame.filename},line:{frame.lineno}]",
                stack_info=False,
            )

        for i, extra in enumerate(self.extras):
            logger.log(Level.ERROR, f"EXTRAS#{i} DATA:{safe_pformat(extra)}", stack_info=False)
