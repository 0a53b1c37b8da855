"""
sdre-logging console logging.

Components:
    - levels: Severity levels, selector resolution and the enabled-level registry
    - formatter: Line layout, palette and the structlog processor chain
    - handler: Console handler choosing stream and color per record
    - logger: ``enable()``/``disable()`` and the emitters

Output format::

    [INFO ][2021-08-22T15:49:01][main.py:42] This is an info message
    [DEBUG][2021-08-22T15:49:01][main.py:43] This is a debug message
    [WARN ][2021-08-22T15:49:01][main.py:44] This is a warning message

Tags and timestamps are colored when the stream is a terminal.
"""

from sdre_logging.core.logging.levels import Level, LevelRegistry, get_registry, resolve_level
from sdre_logging.core.logging.logger import (
    ConsoleLogger,
    debug,
    disable,
    disable_level,
    enable,
    enable_level,
    error,
    get_logger,
    info,
    is_enabled,
    reset,
    trace,
    warn,
    warning,
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
