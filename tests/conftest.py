"""
Pytest configuration and fixtures for sdre-logging tests
"""

import logging

import pytest

from sdre_logging.core.config.settings import Settings
from sdre_logging.core.logging import logger as console
from sdre_logging.core.logging.handler import clear_color_cache

_COLOR_ENV = ("FORCE_COLOR", "NO_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE", "COLORTERM")


@pytest.fixture(autouse=True)
def clean_logging(monkeypatch):
    """Start every test with nothing installed and a neutral color environment"""
    for name in _COLOR_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TERM", "xterm")
    root_level = logging.getLogger().level
    console.reset()
    clear_color_cache()
    yield
    console.reset()
    clear_color_cache()
    logging.getLogger().setLevel(root_level)


@pytest.fixture
def plain_settings() -> Settings:
    """Settings without color so output can be compared as text"""
    return Settings(LOG_COLOR="never")


@pytest.fixture
def color_settings() -> Settings:
    """Settings forcing color even though capsys is not a terminal"""
    return Settings(LOG_COLOR="always")


@pytest.fixture
def make_record():
    """Build a LogRecord with a fixed creation time"""

    def _make(level=logging.INFO, msg="Hello World!", args=(), created=0.0, **attrs):
        record = logging.LogRecord(
            name="tests",
            level=level,
            pathname="/srv/app/worker.py",
            lineno=42,
            msg=msg,
            args=args,
            exc_info=attrs.pop("exc_info", None),
        )
        record.created = created
        record.__dict__.update(attrs)
        return record

    return _make
