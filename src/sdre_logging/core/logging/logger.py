"""
Enabling call and emission surface.

``enable()`` is called once at startup. It installs a ``ConsoleHandler`` on the
root logger, so records from every standard ``logging`` logger are rendered
the same way, and enables the requested threshold in the level registry.

The emitters (``trace``, ``debug``, ``info``, ``warn``, ``error``) take a
%-style message and positional arguments like ``logging.Logger`` methods.
A call whose level is disabled returns before any formatting happens; an
enabled call records the caller's file and line.

Example:
    >>> import sdre_logging as log
    >>> log.enable("info")
    >>> log.debug("not shown")
    >>> log.info("Hello %s!", "World")
    [INFO ][2023-05-01T10:00:00][main.py:3] Hello World!
"""

import logging
import threading
from typing import Any, Optional

from sdre_logging.core.config.settings import Settings, get_settings
from sdre_logging.core.exceptions.custom_exceptions import ConfigurationError
from sdre_logging.core.logging.formatter import ConsoleFormatter, render_message
from sdre_logging.core.logging.handler import ConsoleHandler
from sdre_logging.core.logging.levels import (
    CHECKED_ATTR,
    TRACE,
    Level,
    LevelRegistry,
    LevelSelector,
    get_registry,
    resolve_level,
)

DEFAULT_LOGGER_NAME = "sdre_logging"

# Root logger level used while nothing is enabled.
_SILENT = logging.CRITICAL + 10

_install_lock = threading.Lock()
_installed: Optional[ConsoleHandler] = None
_saved_root_level: Optional[int] = None


class ConsoleLogger:
    """
    Emission handle bound to a standard logger and a level registry.

    Subsystems can receive a handle instead of reaching for module-level
    state. Handles share the registry they were built with, so enabling or
    disabling a level affects every handle on it.
    """

    def __init__(self, name: str = DEFAULT_LOGGER_NAME, registry: Optional[LevelRegistry] = None) -> None:
        self.name = name
        self.registry = registry if registry is not None else get_registry()
        self._logger = logging.getLogger(name)
        if self.registry is not get_registry():
            # a private registry decides alone; open the stdlib level gate
            self._logger.setLevel(TRACE)

    def is_enabled_for(self, level: Level) -> bool:
        return self.registry.is_enabled(level)

    def log(self, level: Level, msg: Any, *args: Any, exc_info: Any = None, stacklevel: int = 1) -> None:
        """Emit ``msg % args`` at ``level`` if that level is enabled."""
        if not self.registry.is_enabled(level):
            return
        text = render_message(msg, args)
        # one extra frame for this method
        self._logger.log(
            int(level),
            text,
            exc_info=exc_info,
            extra={CHECKED_ATTR: True},
            stacklevel=stacklevel + 1,
        )

    def trace(self, msg: Any, *args: Any, exc_info: Any = None, stacklevel: int = 1) -> None:
        self.log(Level.TRACE, msg, *args, exc_info=exc_info, stacklevel=stacklevel + 1)

    def debug(self, msg: Any, *args: Any, exc_info: Any = None, stacklevel: int = 1) -> None:
        self.log(Level.DEBUG, msg, *args, exc_info=exc_info, stacklevel=stacklevel + 1)

    def info(self, msg: Any, *args: Any, exc_info: Any = None, stacklevel: int = 1) -> None:
        self.log(Level.INFO, msg, *args, exc_info=exc_info, stacklevel=stacklevel + 1)

    def warn(self, msg: Any, *args: Any, exc_info: Any = None, stacklevel: int = 1) -> None:
        self.log(Level.WARN, msg, *args, exc_info=exc_info, stacklevel=stacklevel + 1)

    warning = warn

    def error(self, msg: Any, *args: Any, exc_info: Any = None, stacklevel: int = 1) -> None:
        self.log(Level.ERROR, msg, *args, exc_info=exc_info, stacklevel=stacklevel + 1)

    def __repr__(self) -> str:
        return f"<ConsoleLogger {self.name} {self.registry!r}>"


_default_logger = ConsoleLogger()


def get_logger(name: Optional[str] = None, registry: Optional[LevelRegistry] = None) -> ConsoleLogger:
    """
    Get an emission handle.

    Args:
        name: Standard logger name, typically ``__name__``
        registry: Registry to check; defaults to the process-wide one

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.warn("disk at %d%%", 91)
    """
    if name is None and registry is None:
        return _default_logger
    return ConsoleLogger(name or DEFAULT_LOGGER_NAME, registry)


def _root_level_for(threshold: Optional[Level]) -> int:
    return int(threshold) if threshold is not None else _SILENT


def _sync_root_level(registry: LevelRegistry) -> None:
    if _installed is not None:
        logging.getLogger().setLevel(_root_level_for(registry.threshold))


def enable(selector: LevelSelector = None, *, settings: Optional[Settings] = None) -> None:
    """
    Enable console logging.

    Installs the console handler on the root logger, replacing one installed
    by an earlier call, and enables ``selector`` and everything more severe.
    Never raises: an invalid environment configuration is replaced by the
    defaults and reported as a WARN line.

    Args:
        selector: Integer (read by ``LOG_LEVEL_SCHEME``, verbosity counts by
            default), level name, ``Level``, ``"all"`` or ``"off"``. ``None``
            uses ``LOG_LEVEL``.
        settings: Explicit settings; loaded from the environment when omitted
    """
    global _installed, _saved_root_level

    config_error: Optional[ConfigurationError] = None
    if settings is None:
        try:
            settings = get_settings()
        except ConfigurationError as exc:
            config_error = exc
            settings = Settings.model_construct()

    handler = ConsoleHandler(color=settings.LOG_COLOR, split_streams=settings.LOG_SPLIT_STREAMS)
    handler.setFormatter(ConsoleFormatter.from_settings(settings))
    registry = get_registry()
    handler.addFilter(registry.filter)

    if selector is None:
        selector = settings.LOG_LEVEL

    root = logging.getLogger()
    with _install_lock:
        if _installed is not None:
            root.removeHandler(_installed)
        else:
            _saved_root_level = root.level
        root.addHandler(handler)
        _installed = handler
        threshold = registry.enable(selector, scheme=settings.LOG_LEVEL_SCHEME)
        root.setLevel(_root_level_for(threshold))

    if config_error is not None:
        _default_logger.warn(
            "Ignoring invalid logging configuration: %s",
            "; ".join(config_error.details.get("errors", [])) or config_error.message,
        )


def enable_level(level: Level) -> None:
    """Turn on a single level without touching the others."""
    registry = get_registry()
    with _install_lock:
        registry.enable_level(level)
        _sync_root_level(registry)


def disable_level(level: Level) -> None:
    """Turn off a single level; already-written lines are unaffected."""
    registry = get_registry()
    with _install_lock:
        registry.disable_level(level)
        _sync_root_level(registry)


def disable() -> None:
    """Turn off every level. The handler stays installed."""
    registry = get_registry()
    with _install_lock:
        registry.disable()
        _sync_root_level(registry)


def reset() -> None:
    """Remove the installed handler, restore the root level and disable all levels."""
    global _installed, _saved_root_level

    root = logging.getLogger()
    with _install_lock:
        if _installed is not None:
            root.removeHandler(_installed)
            _installed.close()
            if _saved_root_level is not None:
                root.setLevel(_saved_root_level)
        _installed = None
        _saved_root_level = None
        get_registry().disable()


def installed_handler() -> Optional[ConsoleHandler]:
    return _installed


def is_enabled(level: Level) -> bool:
    return get_registry().is_enabled(level)


def trace(msg: Any, *args: Any, exc_info: Any = None) -> None:
    _default_logger.log(Level.TRACE, msg, *args, exc_info=exc_info, stacklevel=2)


def debug(msg: Any, *args: Any, exc_info: Any = None) -> None:
    _default_logger.log(Level.DEBUG, msg, *args, exc_info=exc_info, stacklevel=2)


def info(msg: Any, *args: Any, exc_info: Any = None) -> None:
    _default_logger.log(Level.INFO, msg, *args, exc_info=exc_info, stacklevel=2)


def warn(msg: Any, *args: Any, exc_info: Any = None) -> None:
    _default_logger.log(Level.WARN, msg, *args, exc_info=exc_info, stacklevel=2)


warning = warn


def error(msg: Any, *args: Any, exc_info: Any = None) -> None:
    _default_logger.log(Level.ERROR, msg, *args, exc_info=exc_info, stacklevel=2)


__all__ = [
    "ConsoleLogger",
    "debug",
    "disable",
    "disable_level",
    "enable",
    "enable_level",
    "error",
    "get_logger",
    "info",
    "installed_handler",
    "is_enabled",
    "reset",
    "resolve_level",
    "trace",
    "warn",
    "warning",
]
