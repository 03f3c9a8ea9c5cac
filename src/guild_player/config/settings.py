"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import NonNegativeInt, PositiveFloat, VolumeFloat


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/guild_player.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: int = Field(
        default=5000,
        ge=1000,
        le=30000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: int = Field(
        default=10,
        ge=1,
        le=60,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class AudioSettings(BaseModel):
    """Audio resource configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    default_volume: VolumeFloat = 0.5
    ffmpeg_before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    ffmpeg_options: str = "-vn"
    ytdlp_format: str = "bestaudio/best"
    stream_cache_ttl_s: int = Field(
        default=3600,
        ge=0,
        validation_alias=AliasChoices("stream_cache_ttl_s", "stream_cache_ttl"),
    )


class SessionSettings(BaseModel):
    """Playback session and voice-connection supervision policy."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    readiness_timeout_s: PositiveFloat = 20.0
    ambiguous_disconnect_grace_s: PositiveFloat = 5.0
    # Discord closes the voice websocket with 4014 both when the bot is moved
    # to another channel and when it is kicked.
    ambiguous_close_code: int = 4014
    max_rejoin_attempts: NonNegativeInt = 5
    rejoin_backoff_step_s: float = Field(default=5.0, ge=0)
    max_consecutive_failures: int = Field(default=10, ge=1)
    default_playback_speed: PositiveFloat = 1.0


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, LOG_LEVEL (top-level)
    - SESSION__READINESS_TIMEOUT_S, SESSION__MAX_REJOIN_ATTEMPTS, etc.
    - DATABASE__URL, AUDIO__DEFAULT_VOLUME, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
