import logging
import sys

from rich.color import ColorSystem

from sdre_logging.core.config.settings import Settings
from sdre_logging.core.logging.formatter import (
    ConsoleFormatter,
    Palette,
    format_line,
    format_timestamp,
    render_message,
)
from sdre_logging.core.logging.levels import Level

EPOCH = "1970-01-01T00:00:00"


class Unprintable:
    def __str__(self):
        raise RuntimeError("no")

    def __repr__(self):
        raise RuntimeError("no")


def test_render_message_interpolates_like_logging():
    assert render_message("%d items from %s", (3, "queue")) == "3 items from queue"
    assert render_message("%(user)s logged in", ({"user": "fred"},)) == "fred logged in"
    assert render_message("plain") == "plain"
    assert render_message(42) == "42"


def test_render_message_substitutes_placeholders_instead_of_raising():
    assert render_message("no placeholders", (1,)) == "no placeholders <unformattable args: (1,)>"
    assert render_message("%d", ("x",)).startswith("%d <unformattable args:")
    assert render_message(Unprintable()) == "<unrepresentable Unprintable>"
    assert render_message("%s", (Unprintable(),)) == "%s <unformattable args: <unrepresentable tuple>>"


def test_format_timestamp_utc_and_custom_format():
    assert format_timestamp(0, utc=True) == EPOCH
    assert format_timestamp(86400, "%d/%m/%Y", utc=True) == "02/01/1970"


def test_format_line_plain():
    line = format_line(Level.INFO, "Hello World!", EPOCH, "main.py", 7)
    assert line == f"[INFO ][{EPOCH}][main.py:7] Hello World!"


def test_format_line_without_location():
    assert format_line(Level.WARN, "careful", EPOCH) == f"[WARN ][{EPOCH}] careful"


def test_format_line_keeps_message_verbatim():
    message = "100% done {x} \t tab, ünïcödé, [brackets]"
    line = format_line(Level.DEBUG, message, EPOCH, "a.py", 1)
    assert line.endswith(" " + message)
    assert "\x1b[" not in line


def test_format_line_colors_tag_and_timestamp():
    line = format_line(Level.INFO, "msg", EPOCH, "a.py", 1, color_system=ColorSystem.TRUECOLOR)
    assert "\x1b[1;32mINFO \x1b[0m" in line
    assert "38;2;159;80;1" in line
    assert line.endswith("[a.py:1] msg")


def test_format_line_uses_palette():
    palette = Palette.from_settings(Settings(LOG_STYLE_ERROR="underline blue", LOG_STYLE_LOCATION="dim"))
    line = format_line(Level.ERROR, "msg", EPOCH, "a.py", 1, palette=palette, color_system=ColorSystem.STANDARD)
    assert "\x1b[4;34mERROR\x1b[0m" in line
    assert "\x1b[2ma.py:1\x1b[0m" in line


def test_formatter_renders_record_deterministically(make_record):
    formatter = ConsoleFormatter(utc=True)
    first = formatter.format(make_record())
    second = formatter.format(make_record())
    assert first == second == f"[INFO ][{EPOCH}][worker.py:42] Hello World!"


def test_formatter_interpolates_record_args(make_record):
    formatter = ConsoleFormatter(utc=True)
    assert formatter.format(make_record(msg="%s frames", args=(12,))).endswith("] 12 frames")
    assert formatter.format(make_record(msg="%s %s", args=(1,))).endswith("] %s %s <unformattable args: (1,)>")


def test_formatter_maps_foreign_levels(make_record):
    formatter = ConsoleFormatter(utc=True)
    assert formatter.format(make_record(level=logging.CRITICAL)).startswith("[ERROR]")
    assert formatter.format(make_record(level=5)).startswith("[TRACE]")


def test_formatter_hides_location_when_configured(make_record):
    formatter = ConsoleFormatter.from_settings(Settings(LOG_UTC=True, LOG_SHOW_LOCATION=False))
    assert formatter.format(make_record()) == f"[INFO ][{EPOCH}] Hello World!"


def test_formatter_uses_color_system_from_record(make_record):
    formatter = ConsoleFormatter(utc=True)
    line = formatter.format(make_record(color_system=ColorSystem.TRUECOLOR))
    assert "\x1b[1;32mINFO \x1b[0m" in line


def test_formatter_appends_traceback(make_record):
    try:
        raise KeyError("missing")
    except KeyError:
        exc_info = sys.exc_info()

    lines = ConsoleFormatter(utc=True).format(make_record(level=logging.ERROR, msg="lookup failed", exc_info=exc_info))
    first, *rest = lines.splitlines()
    assert first == f"[ERROR][{EPOCH}][worker.py:42] lookup failed"
    assert rest[0].startswith("Traceback")
    assert "KeyError: 'missing'" in rest[-1]


def test_palette_renders_each_color_system_independently():
    palette = Palette()
    standard = format_line(Level.INFO, "msg", EPOCH, palette=palette, color_system=ColorSystem.STANDARD)
    truecolor = format_line(Level.INFO, "msg", EPOCH, palette=palette, color_system=ColorSystem.TRUECOLOR)
    assert "38;2;159;80;1" not in standard
    assert "38;2;159;80;1" in truecolor


def test_palettes_hash_and_compare_by_identity():
    palette = Palette()
    assert hash(palette) == hash(palette)
    assert palette == palette
    assert palette != Palette()
    assert {palette: "cached"}[palette] == "cached"
