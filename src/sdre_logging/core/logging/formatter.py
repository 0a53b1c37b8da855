"""
Console line formatting.

A line looks like::

    [INFO ][2021-08-22T15:49:01][main.py:42] Hello World!

The severity tag and the timestamp are wrapped in ANSI styles when a color
system is given; with ``color_system=None`` the line is plain text. Rendering
goes through structlog's stdlib ``ProcessorFormatter`` so records from any
``logging`` logger reaching the console handler are formatted the same way.

Functions:
    render_message(): %-style interpolation that never raises
    format_timestamp(): render a POSIX time with a strftime format
    format_line(): build one line from its parts (pure)

Classes:
    Palette: rich styles for tags, timestamp and location
    ConsoleLineRenderer: final structlog processor producing the line
    ConsoleFormatter: logging formatter wiring the processor chain
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import structlog
from rich.color import ColorSystem
from rich.style import Style

from sdre_logging.core.config.settings import Settings
from sdre_logging.core.logging.levels import Level

COLOR_SYSTEM_KEY = "color_system"
DEFAULT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _default_level_styles() -> Dict[Level, Style]:
    return {
        Level.TRACE: Style.parse("bold magenta"),
        Level.DEBUG: Style.parse("bold cyan"),
        Level.INFO: Style.parse("bold green"),
        Level.WARN: Style.parse("bold yellow"),
        Level.ERROR: Style.parse("bold red"),
    }


def _detached(style: Style) -> Style:
    return Style(
        color=style.color,
        bgcolor=style.bgcolor,
        bold=style.bold,
        dim=style.dim,
        italic=style.italic,
        underline=style.underline,
        blink=style.blink,
        blink2=style.blink2,
        reverse=style.reverse,
        conceal=style.conceal,
        strike=style.strike,
        underline2=style.underline2,
        frame=style.frame,
        encircle=style.encircle,
        overline=style.overline,
    )


@dataclass(frozen=True, eq=False)
class Palette:
    """
    Styles applied to the parts of a line.

    Fields cannot be reassigned, but the instance holds a render cache, so
    palettes compare and hash by identity.
    """

    levels: Dict[Level, Style] = field(default_factory=_default_level_styles)
    timestamp: Style = field(default_factory=lambda: Style.parse("bold #9f5001"))
    location: Style = field(default_factory=Style.null)
    _per_system: Dict[Tuple[Style, ColorSystem], Style] = field(default_factory=dict, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Palette":
        return cls(
            levels={
                Level.TRACE: Style.parse(settings.LOG_STYLE_TRACE),
                Level.DEBUG: Style.parse(settings.LOG_STYLE_DEBUG),
                Level.INFO: Style.parse(settings.LOG_STYLE_INFO),
                Level.WARN: Style.parse(settings.LOG_STYLE_WARN),
                Level.ERROR: Style.parse(settings.LOG_STYLE_ERROR),
            },
            timestamp=Style.parse(settings.LOG_STYLE_TIMESTAMP),
            location=Style.parse(settings.LOG_STYLE_LOCATION),
        )

    def style_for(self, level: Level) -> Style:
        return self.levels.get(level, Style.null())

    def paint(self, text: str, style: Style, color_system: Optional[ColorSystem]) -> str:
        """Wrap ``text`` in the escape codes of ``style``, or return it unchanged."""
        if color_system is None or not style:
            return text
        # rich caches codes on the Style instance for the first color system
        # it renders with, so each system gets its own instance
        key = (style, color_system)
        local = self._per_system.get(key)
        if local is None:
            local = self._per_system.setdefault(key, _detached(style))
        return local.render(text, color_system=color_system)


DEFAULT_PALETTE = Palette()


def _safe_str(obj: Any) -> str:
    try:
        return str(obj)
    except Exception:
        return f"<unrepresentable {type(obj).__name__}>"


def _safe_repr(obj: Any) -> str:
    try:
        return repr(obj)
    except Exception:
        return f"<unrepresentable {type(obj).__name__}>"


def render_message(msg: Any, args: Any = ()) -> str:
    """
    Interpolate ``msg % args`` the way ``LogRecord.getMessage`` does.

    A single non-empty mapping argument is used for named placeholders. If
    interpolation fails the message is returned as-is, followed by a
    placeholder carrying the arguments.

    Example:
        >>> render_message("%d items from %s", (3, "queue"))
        '3 items from queue'
        >>> render_message("no placeholders", (1,))
        'no placeholders <unformattable args: (1,)>'
    """
    text = _safe_str(msg)
    if not args:
        return text
    if isinstance(args, tuple) and len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        args = args[0]
    try:
        return text % args
    except Exception:
        return f"{text} <unformattable args: {_safe_repr(args)}>"


def format_timestamp(created: float, time_format: str = DEFAULT_TIME_FORMAT, utc: bool = False) -> str:
    """Render a POSIX timestamp in local time, or UTC when ``utc`` is set."""
    if utc:
        moment = datetime.fromtimestamp(created, tz=timezone.utc)
    else:
        moment = datetime.fromtimestamp(created)
    try:
        return moment.strftime(time_format)
    except ValueError:
        return moment.strftime(DEFAULT_TIME_FORMAT)


def format_line(
    level: Level,
    message: str,
    timestamp: str,
    filename: Optional[str] = None,
    lineno: Optional[int] = None,
    *,
    palette: Palette = DEFAULT_PALETTE,
    color_system: Optional[ColorSystem] = None,
) -> str:
    """
    Build a single console line.

    Args:
        level: Severity of the record
        message: Fully interpolated message text, inserted verbatim
        timestamp: Pre-rendered timestamp
        filename: Caller's file name; the location block is omitted if empty
        lineno: Caller's line number
        palette: Styles for the tag, timestamp and location
        color_system: rich color system of the target stream, ``None`` for
            plain text

    Returns:
        str: The line, without a trailing newline
    """

    def paint(text: str, style: Style) -> str:
        return palette.paint(text, style, color_system)

    parts = [
        f"[{paint(level.tag, palette.style_for(level))}]",
        f"[{paint(timestamp, palette.timestamp)}]",
    ]
    if filename:
        location = filename if lineno is None else f"{filename}:{lineno}"
        parts.append(f"[{paint(location, palette.location)}]")
    return "".join(parts) + " " + message


def add_level(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Store the record's severity as a ``Level`` under ``level``."""
    record = event_dict.get("_record")
    if record is not None:
        event_dict["level"] = Level.from_levelno(record.levelno)
    return event_dict


class RecordTimeStamper:
    """
    Add a ``timestamp`` rendered from ``record.created``.

    structlog's own ``TimeStamper`` reads the clock when the processor runs;
    this one uses the creation time of the record so a fixed clock value
    always renders the same text.
    """

    def __init__(self, fmt: str = DEFAULT_TIME_FORMAT, utc: bool = False, key: str = "timestamp") -> None:
        self.fmt = fmt
        self.utc = utc
        self.key = key

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        record = event_dict.get("_record")
        if record is not None:
            event_dict[self.key] = format_timestamp(record.created, self.fmt, self.utc)
        return event_dict


class ConsoleLineRenderer:
    """Final processor: turn the event dict into the console line."""

    def __init__(self, palette: Palette = DEFAULT_PALETTE, show_location: bool = True) -> None:
        self.palette = palette
        self.show_location = show_location

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]) -> str:
        filename = event_dict.get("filename") if self.show_location else None
        line = format_line(
            event_dict.get("level", Level.INFO),
            _safe_str(event_dict.get("event", "")),
            event_dict.get("timestamp", ""),
            filename,
            event_dict.get("lineno"),
            palette=self.palette,
            color_system=event_dict.get(COLOR_SYSTEM_KEY),
        )
        exception = event_dict.get("exception")
        if exception:
            line = f"{line}\n{exception}"
        return line


class ConsoleFormatter(structlog.stdlib.ProcessorFormatter):
    """
    ``logging.Formatter`` producing console lines.

    The color system is read from the ``color_system`` attribute that the
    console handler attaches to each record before formatting.
    """

    def __init__(
        self,
        palette: Palette = DEFAULT_PALETTE,
        time_format: str = DEFAULT_TIME_FORMAT,
        utc: bool = False,
        show_location: bool = True,
    ) -> None:
        super().__init__(
            processors=[
                structlog.processors.format_exc_info,
                ConsoleLineRenderer(palette, show_location),
            ],
            foreign_pre_chain=[
                add_level,
                RecordTimeStamper(time_format, utc),
                structlog.processors.CallsiteParameterAdder(
                    {
                        structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO,
                    }
                ),
                structlog.stdlib.ExtraAdder(allow=[COLOR_SYSTEM_KEY]),
            ],
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConsoleFormatter":
        return cls(
            palette=Palette.from_settings(settings),
            time_format=settings.LOG_TIME_FORMAT,
            utc=settings.LOG_UTC,
            show_location=settings.LOG_SHOW_LOCATION,
        )

    def format(self, record: logging.LogRecord) -> str:
        if record.args or not isinstance(record.msg, str):
            record = logging.makeLogRecord(record.__dict__)
            record.msg = render_message(record.msg, record.args)
            record.args = ()
        return super().format(record)
