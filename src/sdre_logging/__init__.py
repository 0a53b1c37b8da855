"""
sdre-logging - Colorized console logging on top of the standard logging module

Call ``enable()`` once at startup, then use the emitters the same way as the
standard ``logging`` functions:

    >>> import sdre_logging as log
    >>> log.enable(1)  # 0 info, 1 debug, 2 trace
    >>> log.debug("loaded %d frames", 12)
    >>> log.warn("queue is %d%% full", 90)

Lines look like ``[INFO ][2021-08-22T15:49:01][main.py:42] message``.
Configuration defaults come from ``LOG_*`` environment variables, see
``sdre_logging.core.config.settings``.
"""

from sdre_logging.core.logging import (
    ConsoleLogger,
    Level,
    LevelRegistry,
    debug,
    disable,
    disable_level,
    enable,
    enable_level,
    error,
    get_logger,
    get_registry,
    info,
    is_enabled,
    reset,
    resolve_level,
    trace,
    warn,
    warning,
)

__version__ = "0.1.0"
__description__ = (
    "Colorized, timestamp and location annotated console output for the "
    "standard logging module."
)

__all__ = [
    "ConsoleLogger",
    "Level",
    "LevelRegistry",
    "debug",
    "disable",
    "disable_level",
    "enable",
    "enable_level",
    "error",
    "get_logger",
    "get_registry",
    "info",
    "is_enabled",
    "reset",
    "resolve_level",
    "trace",
    "warn",
    "warning",
]
