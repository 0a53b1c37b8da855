"""
Console handler writing formatted lines to stdout/stderr.

Streams are looked up on ``sys`` at write time, so redirecting or capturing
``sys.stdout``/``sys.stderr`` after ``enable()`` is honored. Whether a stream
gets color is decided by rich's terminal detection, which also respects
``FORCE_COLOR``, ``NO_COLOR`` and ``TERM=dumb``.

Detection results are cached per stream, mode and value of the color
variables, so changing ``NO_COLOR`` or ``FORCE_COLOR`` takes effect on the
next line. The cache keeps references to the last 16 stream objects it saw;
``clear_color_cache()`` drops them.
"""

import logging
import os
import sys
from functools import lru_cache
from typing import IO, Optional, Tuple

from rich.color import ColorSystem
from rich.console import COLOR_SYSTEMS, Console

from sdre_logging.core.config.settings import ColorMode
from sdre_logging.core.logging.formatter import COLOR_SYSTEM_KEY


def detect_color_system(stream: IO[str], mode: ColorMode = "auto") -> Optional[ColorSystem]:
    """
    Color system to use for ``stream``, or ``None`` for plain text.

    ``auto`` colors terminals only, ``always`` forces escape codes even when
    the stream is redirected, ``never`` disables them.
    """
    if mode == "never":
        return None
    console = Console(file=stream, force_terminal=True if mode == "always" else None)
    if console.no_color or console.color_system is None:
        return None
    return COLOR_SYSTEMS[console.color_system]


COLOR_ENV_VARS = ("NO_COLOR", "FORCE_COLOR", "TERM", "COLORTERM", "TTY_COMPATIBLE")


# env only keys the cache
@lru_cache(maxsize=16)
def _cached_color_system(stream: IO[str], mode: ColorMode, env: Tuple[Optional[str], ...]) -> Optional[ColorSystem]:
    return detect_color_system(stream, mode)


def resolve_color_system(stream: IO[str], mode: ColorMode = "auto") -> Optional[ColorSystem]:
    """Cached ``detect_color_system``; unhashable streams are detected each time."""
    try:
        return _cached_color_system(stream, mode, tuple(os.environ.get(name) for name in COLOR_ENV_VARS))
    except TypeError:
        return detect_color_system(stream, mode)


def clear_color_cache() -> None:
    _cached_color_system.cache_clear()


class ConsoleHandler(logging.Handler):
    """
    Write records to the standard streams.

    With ``split_streams`` trace/debug/info lines go to stdout and warn/error
    lines to stderr; otherwise every line goes to stderr. A closed or broken
    stream drops the line silently.
    """

    terminator = "\n"

    def __init__(self, color: ColorMode = "auto", split_streams: bool = True, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.color = color
        self.split_streams = split_streams

    def stream_for(self, levelno: int) -> Optional[IO[str]]:
        if self.split_streams and levelno < logging.WARNING:
            return sys.stdout
        return sys.stderr

    def emit(self, record: logging.LogRecord) -> None:
        stream = self.stream_for(record.levelno)
        if stream is None:
            return
        try:
            setattr(record, COLOR_SYSTEM_KEY, resolve_color_system(stream, self.color))
            line = self.format(record)
            stream.write(line + self.terminator)
            stream.flush()
        except RecursionError:
            raise
        except (OSError, ValueError):
            # closed or broken stream
            return
        except Exception:
            self.handleError(record)

    def __repr__(self) -> str:
        level = logging.getLevelName(self.level)
        return f"<{self.__class__.__name__} color={self.color} split={self.split_streams} ({level})>"
