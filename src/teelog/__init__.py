"""
teelog: leveled, structured logging fanned out to console and rotating files.

Every record goes through one structlog processor chain and is then written
to each destination whose level predicate accepts it:

- ``<log_dir>/<file_name>.log``: everything at or above the minimum level
- ``<log_dir>/<file_name>_err.log`` and stderr: ERROR and above
- stdout: below ERROR

Library: structlog + orjson, configured through pydantic-settings.
"""

from .config import LogSettings
from .core import Logger
from .exceptions import ConfigurationError, FlushError, Panic, TeelogError
from .facade import (
    debug,
    debugf,
    debugw,
    dpanic,
    dpanicf,
    dpanicw,
    error,
    errorf,
    errorw,
    fatal,
    fatalf,
    fatalw,
    flush,
    get_configuration,
    get_logger,
    info,
    infof,
    infow,
    initialize,
    log,
    panic,
    panicf,
    panicw,
    report_panic,
    sync,
    warn,
    warnf,
    warnw,
    with_fields,
)
from .interceptors import StdlibHandler, intercept_stdlib
from .levels import Level
from .panics import PanicReporter, reraise, suppress

__all__ = [
    "ConfigurationError",
    "FlushError",
    "Level",
    "LogSettings",
    "Logger",
    "Panic",
    "PanicReporter",
    "StdlibHandler",
    "TeelogError",
    "debug",
    "debugf",
    "debugw",
    "dpanic",
    "dpanicf",
    "dpanicw",
    "error",
    "errorf",
    "errorw",
    "fatal",
    "fatalf",
    "fatalw",
    "flush",
    "get_configuration",
    "get_logger",
    "info",
    "infof",
    "infow",
    "initialize",
    "intercept_stdlib",
    "log",
    "panic",
    "panicf",
    "panicw",
    "report_panic",
    "reraise",
    "suppress",
    "sync",
    "warn",
    "warnf",
    "warnw",
    "with_fields",
]
