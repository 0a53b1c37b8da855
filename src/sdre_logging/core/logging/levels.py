"""
Severity levels and the enabled-level registry.

Levels reuse the standard library's numeric values so records produced here
and records produced by any other ``logging`` user compare directly. TRACE
(5) is registered with ``logging`` on import.

Selectors accepted by ``resolve_level``:
    - ``Level`` members
    - integers, read by the selected scheme:
        verbosity (default): 0 info, 1 debug, 2 and up trace
        kernel: syslog-style 0-3 error, 4 warn, 5 info, 6 debug, 7 trace
    - names: trace, debug, info, warn, warning, error, critical, all, off, none
    - decimal strings, read like integers
    - ``None``, meaning "use the configured default"
"""

import logging
import threading
from enum import IntEnum
from typing import FrozenSet, Iterable, Optional, Union

from sdre_logging.core.config.settings import LevelScheme

TRACE = 5

# Set on records whose level was already checked by the emitting handle.
CHECKED_ATTR = "sdre_checked"

logging.addLevelName(TRACE, "TRACE")


class Level(IntEnum):
    """Severity levels, ordered from most to least verbose."""

    TRACE = TRACE
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR

    @property
    def tag(self) -> str:
        """Five-column display tag, e.g. ``"INFO "``."""
        return f"{self.name:<5}"

    @classmethod
    def from_levelno(cls, levelno: int) -> "Level":
        """Map any numeric logging level to the closest level at or below it."""
        for level in reversed(cls):
            if levelno >= level:
                return level
        return cls.TRACE


LevelSelector = Union[Level, int, str, None]

DEFAULT_LEVEL = Level.INFO

_NAMED_SELECTORS = {
    "trace": Level.TRACE,
    "all": Level.TRACE,
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "critical": Level.ERROR,
    "off": None,
    "none": None,
}


def _from_verbosity(count: int) -> Level:
    if count >= 2:
        return Level.TRACE
    if count == 1:
        return Level.DEBUG
    return DEFAULT_LEVEL


_KERNEL_LEVELS = {
    0: Level.ERROR,
    1: Level.ERROR,
    2: Level.ERROR,
    3: Level.ERROR,
    4: Level.WARN,
    5: Level.INFO,
    6: Level.DEBUG,
    7: Level.TRACE,
}


def _from_number(number: int, scheme: LevelScheme, default: Level) -> Level:
    if number < 0:
        return default
    if scheme == "kernel":
        return _KERNEL_LEVELS.get(number, default)
    return _from_verbosity(number)


def resolve_level(
    selector: LevelSelector,
    default: Level = DEFAULT_LEVEL,
    scheme: LevelScheme = "verbosity",
) -> Optional[Level]:
    """
    Resolve a selector to the least severe level that should be enabled.

    Returns ``None`` when the selector turns logging off. Unknown selectors
    resolve to ``default`` rather than raising. ``scheme`` decides how
    integers (and decimal strings) are read.

    Example:
        >>> resolve_level(0), resolve_level(1), resolve_level(255)
        (<Level.INFO: 20>, <Level.DEBUG: 10>, <Level.TRACE: 5>)
        >>> resolve_level("Warning")
        <Level.WARN: 30>
        >>> resolve_level(4, scheme="kernel")
        <Level.WARN: 30>
    """
    if selector is None:
        return default
    if isinstance(selector, Level):
        return selector
    if isinstance(selector, bool):
        return default
    if isinstance(selector, int):
        return _from_number(selector, scheme, default)
    if isinstance(selector, str):
        key = selector.strip().lower()
        if key in _NAMED_SELECTORS:
            return _NAMED_SELECTORS[key]
        if key.isdigit():
            return _from_number(int(key), scheme, default)
    return default


def levels_from(threshold: Optional[Level]) -> FrozenSet[Level]:
    """All levels at least as severe as ``threshold``."""
    if threshold is None:
        return frozenset()
    return frozenset(level for level in Level if level >= threshold)


class LevelRegistry:
    """
    Process-wide set of enabled severity levels.

    The enabled set is an immutable ``frozenset`` swapped under a lock, so
    ``is_enabled`` can be called from any thread without locking while
    ``enable``/``disable`` calls stay consistent with each other.
    """

    def __init__(self, enabled: Iterable[Level] = ()) -> None:
        self._lock = threading.Lock()
        self._enabled: FrozenSet[Level] = frozenset(enabled)

    @property
    def enabled(self) -> FrozenSet[Level]:
        return self._enabled

    @property
    def threshold(self) -> Optional[Level]:
        """Least severe enabled level, or ``None`` when nothing is enabled."""
        enabled = self._enabled
        return min(enabled) if enabled else None

    def is_enabled(self, level: Union[Level, int]) -> bool:
        if not isinstance(level, Level):
            level = Level.from_levelno(level)
        return level in self._enabled

    def enable(
        self,
        selector: LevelSelector = None,
        default: Level = DEFAULT_LEVEL,
        scheme: LevelScheme = "verbosity",
    ) -> Optional[Level]:
        """Enable ``selector`` and every more severe level, disabling the rest."""
        threshold = resolve_level(selector, default, scheme)
        with self._lock:
            self._enabled = levels_from(threshold)
        return threshold

    def enable_level(self, level: Level) -> None:
        with self._lock:
            self._enabled = self._enabled | {level}

    def disable_level(self, level: Level) -> None:
        with self._lock:
            self._enabled = self._enabled - {level}

    def disable(self) -> None:
        with self._lock:
            self._enabled = frozenset()

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Handler filter: keep records whose severity is enabled.

        Records already checked by a ``ConsoleLogger`` against its own
        registry pass through.
        """
        if getattr(record, CHECKED_ATTR, False):
            return True
        return self.is_enabled(record.levelno)

    def __repr__(self) -> str:
        names = ", ".join(level.name for level in sorted(self._enabled))
        return f"LevelRegistry({{{names}}})"


_registry = LevelRegistry()


def get_registry() -> LevelRegistry:
    """Return the process-wide registry used by the module-level emitters."""
    return _registry
