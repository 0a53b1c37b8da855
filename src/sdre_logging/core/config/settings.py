"""
Configuration management for sdre-logging.

Settings are read with Pydantic settings from environment variables and an
optional ``.env`` file. They only supply defaults: everything here can also be
passed explicitly to ``enable()``.

Classes:
    Settings: Console logging configuration

Environment Variables:
    LOG_LEVEL: Default level selector (integer or level name)
    LOG_LEVEL_SCHEME: How integer levels are read - verbosity or kernel
    LOG_COLOR: Color policy - auto, always or never
    LOG_TIME_FORMAT: strftime format for the timestamp field
    LOG_UTC: Render timestamps in UTC instead of local time
    LOG_SHOW_LOCATION: Include the [file:line] block
    LOG_SPLIT_STREAMS: Send warn/error to stderr and the rest to stdout
    LOG_STYLE_<LEVEL>: rich style string for a severity tag
    LOG_STYLE_TIMESTAMP: rich style string for the timestamp
    LOG_STYLE_LOCATION: rich style string for the location block

Example:
    >>> from sdre_logging.core.config.settings import Settings
    >>> settings = Settings(LOG_LEVEL=1, LOG_COLOR="never")
    >>> settings.LOG_TIME_FORMAT
    '%Y-%m-%dT%H:%M:%S'
"""

from typing import Literal, Union

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.errors import StyleSyntaxError
from rich.style import Style

from sdre_logging.core.exceptions.custom_exceptions import ConfigurationError

ColorMode = Literal["auto", "always", "never"]
LevelScheme = Literal["verbosity", "kernel"]


class Settings(BaseSettings):
    """
    Console logging settings with environment variable support.

    Attributes:
        LOG_LEVEL: Default selector used when ``enable()`` is called without
            one. Integers are read by ``LOG_LEVEL_SCHEME``, strings are level
            names.
        LOG_LEVEL_SCHEME: ``verbosity`` reads integers as counts (0 info,
            1 debug, 2+ trace); ``kernel`` reads them as syslog priorities
            (0-3 error, 4 warn, 5 info, 6 debug, 7 trace).
        LOG_COLOR: ``auto`` colors only terminal streams, ``always`` forces
            escape codes, ``never`` disables them.
        LOG_TIME_FORMAT: strftime format of the timestamp field
        LOG_UTC: Use UTC rather than the local timezone
        LOG_SHOW_LOCATION: Render the caller's file and line
        LOG_SPLIT_STREAMS: stdout for trace/debug/info, stderr for warn/error.
            When false every line goes to stderr.

        LOG_STYLE_TRACE: Style of the TRACE tag
        LOG_STYLE_DEBUG: Style of the DEBUG tag
        LOG_STYLE_INFO: Style of the INFO tag
        LOG_STYLE_WARN: Style of the WARN tag
        LOG_STYLE_ERROR: Style of the ERROR tag
        LOG_STYLE_TIMESTAMP: Style of the timestamp
        LOG_STYLE_LOCATION: Style of the file:line block
    """

    # Level and output
    LOG_LEVEL: Union[int, str] = "info"
    LOG_LEVEL_SCHEME: LevelScheme = "verbosity"
    LOG_COLOR: ColorMode = "auto"
    LOG_TIME_FORMAT: str = "%Y-%m-%dT%H:%M:%S"
    LOG_UTC: bool = False
    LOG_SHOW_LOCATION: bool = True
    LOG_SPLIT_STREAMS: bool = True

    # Palette
    LOG_STYLE_TRACE: str = "bold magenta"
    LOG_STYLE_DEBUG: str = "bold cyan"
    LOG_STYLE_INFO: str = "bold green"
    LOG_STYLE_WARN: str = "bold yellow"
    LOG_STYLE_ERROR: str = "bold red"
    LOG_STYLE_TIMESTAMP: str = "bold #9f5001"
    LOG_STYLE_LOCATION: str = ""

    @field_validator("LOG_COLOR", "LOG_LEVEL_SCHEME", mode="before")
    @classmethod
    def normalize_choice(cls, v: object) -> object:
        """Accept any casing and surrounding whitespace for choice fields."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator(
        "LOG_STYLE_TRACE",
        "LOG_STYLE_DEBUG",
        "LOG_STYLE_INFO",
        "LOG_STYLE_WARN",
        "LOG_STYLE_ERROR",
        "LOG_STYLE_TIMESTAMP",
        "LOG_STYLE_LOCATION",
    )
    @classmethod
    def validate_style(cls, v: str) -> str:
        """
        Validate a style string with rich's style parser.

        Raises:
            ValueError: If rich cannot parse the style definition
        """
        try:
            Style.parse(v)
        except StyleSyntaxError as exc:
            raise ValueError(f"invalid style {v!r}: {exc}") from exc
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


def get_settings() -> Settings:
    """
    Load settings from the environment.

    Raises:
        ConfigurationError: If any environment value fails validation, or
            the ``.env`` file cannot be read or decoded. The messages are kept
            in ``details["errors"]``.
    """
    try:
        return Settings()
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigurationError(
            "Invalid logging configuration",
            error_code="CONFIG_INVALID_LOGGING",
            details={"errors": errors},
        ) from exc
    except (UnicodeDecodeError, OSError) as exc:
        raise ConfigurationError(
            "Unreadable logging configuration",
            error_code="CONFIG_INVALID_LOGGING",
            details={"errors": [f".env: {exc}"]},
        ) from exc
