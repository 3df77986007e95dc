from zoneinfo import ZoneInfo

import pytest

from todo_bridge.config import get_config
from todo_bridge.constants import DEFAULT_API_URL
from todo_bridge.exceptions import ConfigurationError


def test_defaults() -> None:
    config = get_config()

    assert config.api_url == DEFAULT_API_URL
    assert config.dark_mode is False
    assert config.display_timezone == ZoneInfo("UTC")
    assert config.log_level == "INFO"


def test_get_config_is_cached() -> None:
    assert get_config() is get_config()


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TODO_API_URL", "http://localhost:3000/tasks/")
    monkeypatch.setenv("DARK_MODE", "true")
    monkeypatch.setenv("DISPLAY_TIMEZONE", "Europe/Zurich")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = get_config()

    assert config.api_url == "http://localhost:3000/tasks"
    assert config.dark_mode is True
    assert config.display_timezone == ZoneInfo("Europe/Zurich")
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    "name, value",
    [
        ("TODO_API_URL", "ftp://example.com/tasks"),
        ("DISPLAY_TIMEZONE", "Mars/Olympus"),
        ("LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values_raise_configuration_error(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_config()
