import pytest
from pydantic import ValidationError

from sdre_logging.core.config.settings import Settings, get_settings
from sdre_logging.core.exceptions.custom_exceptions import ConfigurationError, SdreLoggingError


def test_defaults():
    settings = Settings()
    assert settings.LOG_LEVEL == "info"
    assert settings.LOG_COLOR == "auto"
    assert settings.LOG_TIME_FORMAT == "%Y-%m-%dT%H:%M:%S"
    assert settings.LOG_UTC is False
    assert settings.LOG_SPLIT_STREAMS is True
    assert settings.LOG_STYLE_TIMESTAMP == "bold #9f5001"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LOG_COLOR", " Always ")
    monkeypatch.setenv("LOG_UTC", "true")
    monkeypatch.setenv("LOG_STYLE_INFO", "italic blue")

    settings = get_settings()
    assert settings.LOG_COLOR == "always"
    assert settings.LOG_UTC is True
    assert settings.LOG_STYLE_INFO == "italic blue"


def test_integer_level_is_kept():
    assert Settings(LOG_LEVEL=2).LOG_LEVEL == 2


def test_invalid_style_is_rejected():
    with pytest.raises(ValidationError):
        Settings(LOG_STYLE_ERROR="bold not-a-color")


def test_get_settings_wraps_validation_errors(monkeypatch):
    monkeypatch.setenv("LOG_COLOR", "rainbow")
    monkeypatch.setenv("LOG_SPLIT_STREAMS", "sometimes")

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    error = exc_info.value
    assert isinstance(error, SdreLoggingError)
    assert error.error_code == "CONFIG_INVALID_LOGGING"
    assert len(error.details["errors"]) == 2
    assert any(message.startswith("LOG_COLOR:") for message in error.details["errors"])
    assert isinstance(error.__cause__, ValidationError)


def test_error_code_defaults_to_class_name():
    error = ConfigurationError("broken")
    assert error.error_code == "ConfigurationError"
    assert error.details == {}
    assert str(error) == "broken"


def test_level_scheme_default_and_override(monkeypatch):
    assert Settings().LOG_LEVEL_SCHEME == "verbosity"

    monkeypatch.setenv("LOG_LEVEL_SCHEME", " KERNEL ")
    assert get_settings().LOG_LEVEL_SCHEME == "kernel"


def test_get_settings_wraps_undecodable_env_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_bytes(b"LOG_LEVEL=\xff\xfe\n")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    error = exc_info.value
    assert error.error_code == "CONFIG_INVALID_LOGGING"
    assert error.details["errors"][0].startswith(".env:")
    assert isinstance(error.__cause__, UnicodeDecodeError)
