"""
Entry encoders and color utilities.
"""

from __future__ import annotations

import pprint
from typing import Any

import orjson
from structlog.typing import EventDict

# =============================================================================
# ANSI Color Codes
# =============================================================================

_RESET = "\x1b[0m"

LEVEL_COLORS = {
    "DEBUG": "\x1b[35m",  # Magenta
    "INFO": "\x1b[34m",  # Blue
    "WARN": "\x1b[33m",  # Yellow
    "ERROR": "\x1b[31m",  # Red
    "DPANIC": "\x1b[31m",
    "PANIC": "\x1b[31m",
    "FATAL": "\x1b[31m",
}


def colorize(text: str, level_name: str) -> str:
    """Wrap ``text`` in the ANSI color of ``level_name`` (uppercase)."""
    color = LEVEL_COLORS.get(level_name)
    if not color:
        return text
    return f"{color}{text}{_RESET}"


# =============================================================================
# Safe Rendering
# =============================================================================


def _unprintable(value: Any, exc: Exception) -> str:
    return f"<unprintable {type(value).__name__}: {exc!r}>"


def safe_str(value: Any) -> str:
    """``str(value)``, or a placeholder when the value cannot render itself."""
    try:
        return str(value)
    except Exception as exc:
        return _unprintable(value, exc)


def safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception as exc:
        return _unprintable(value, exc)


def safe_pformat(value: Any) -> str:
    """Deep, multi-line ``pprint`` dump that falls back to a placeholder."""
    try:
        return pprint.pformat(value)
    except Exception as exc:
        return _unprintable(value, exc)


# =============================================================================
# JSON Serialization
# =============================================================================


def _fallback(value: Any) -> str:
    return safe_repr(value)


def orjson_dumps(v: Any) -> str:
    """Compact JSON via orjson; unsupported values are rendered with ``repr``."""
    try:
        return orjson.dumps(
            v,
            default=_fallback,
            option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS,
        ).decode()
    except orjson.JSONEncodeError:
        return safe_repr(v)


# =============================================================================
# Console Encoder
# =============================================================================


class ConsoleEncoder:
    """Renders an event dict as one human-readable, tab-separated entry.

    Layout: ``<timestamp>\\t<LEVEL>\\t<message>[\\t<fields JSON>]``, then the
    captured stack or exception text on the following lines, if any.
    """

    RESERVED_KEYS = frozenset({"timestamp", "level", "event", "stack", "exception"})
    SEPARATOR = "\t"

    def __init__(self, *, use_color: bool = False) -> None:
        self.use_color = use_color

    def encode(self, event_dict: EventDict) -> str:
        level_name = str(event_dict.get("level", "info")).upper()
        level_text = colorize(level_name, level_name) if self.use_color else level_name

        parts = [
            str(event_dict.get("timestamp", "")),
            level_text,
            str(event_dict.get("event", "")),
        ]
        fields = {k: v for k, v in event_dict.items() if k not in self.RESERVED_KEYS}
        if fields:
            parts.append(orjson_dumps(fields))

        entry = self.SEPARATOR.join(parts)
        for key in ("stack", "exception"):
            trailer = event_dict.get(key)
            if trailer:
                entry = f"{entry}\n{trailer}"
        return entry
