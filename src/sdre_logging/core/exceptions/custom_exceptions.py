"""
Exception hierarchy for sdre-logging.

Emission calls never raise; these exceptions only surface from the
configuration layer, where a broken environment is reported to whoever
loads the settings explicitly. ``enable()`` catches them and falls back to
defaults so host code is never interrupted by its logger.

Exception Hierarchy:
    SdreLoggingError (base)
    └── ConfigurationError: Invalid environment or .env configuration

Example:
    >>> from sdre_logging.core.config.settings import get_settings
    >>> try:
    ...     settings = get_settings()
    ... except ConfigurationError as e:
    ...     print(e.error_code, e.details["errors"])
"""

from typing import Any, Dict, Optional


class SdreLoggingError(Exception):
    """
    Base exception class for all sdre-logging errors.

    Attributes:
        message (str): Human-readable error description
        error_code (str): Machine-readable error identifier, defaults to the
            class name
        details (Dict[str, Any]): Additional contextual information
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(SdreLoggingError):
    """
    Raised when logging configuration cannot be loaded.

    Common scenarios:
        - ``LOG_COLOR`` set to something other than auto/always/never
        - A ``LOG_STYLE_*`` value that rich cannot parse
        - A non-boolean ``LOG_UTC`` or ``LOG_SPLIT_STREAMS``

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid logging configuration",
        ...     error_code="CONFIG_INVALID_LOGGING",
        ...     details={"errors": ["LOG_COLOR: Input should be 'auto', ..."]},
        ... )
    """

    pass
