"""Configuration management for todo-bridge."""

from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_API_URL, DEFAULT_DISPLAY_TIMEZONE, DEFAULT_LOG_LEVEL
from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=None,  # Don't load from .env file
        case_sensitive=True,
        extra="ignore",
    )

    TODO_API_URL: str = Field(
        default=DEFAULT_API_URL, description="URL of the remote task collection"
    )
    DARK_MODE: bool = Field(default=False, description="Initial display mode")
    DISPLAY_TIMEZONE: str = Field(
        default=DEFAULT_DISPLAY_TIMEZONE, description="Timezone for rendered timestamps"
    )
    LOG_LEVEL: str = Field(default=DEFAULT_LOG_LEVEL, description="Root log level")

    @field_validator("TODO_API_URL")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an http(s) URL; drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("TODO_API_URL must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("DISPLAY_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown DISPLAY_TIMEZONE: {v}") from e
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return v

    @property
    def api_url(self) -> str:
        """Get remote task collection URL."""
        return self.TODO_API_URL

    @property
    def dark_mode(self) -> bool:
        return self.DARK_MODE

    @property
    def display_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.DISPLAY_TIMEZONE)

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL


# Global settings instance
_settings: Optional[Settings] = None


def get_config() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e
    return _settings


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment."""
    global _settings
    _settings = None
