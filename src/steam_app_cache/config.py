"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/87.0.4280.88 Safari/537.36"
)


class SteamAPIConfig(BaseSettings):
    """Steam API specific configuration."""

    model_config = SettingsConfigDict(env_prefix="STEAM_")

    api_key: SecretStr = Field(
        default=...,
        description="Steam Web API key from https://steamcommunity.com/dev/apikey",
    )
    base_url: str = Field(
        default="https://api.steampowered.com",
        description="Base URL for Steam Web API",
    )
    store_url: str = Field(
        default="https://store.steampowered.com/api",
        description="Base URL for Steam Store API",
    )
    language: str = Field(
        default="en",
        description="Language code sent to the achievement schema endpoint",
    )
    requests_per_minute: int = Field(
        default=40,
        ge=1,
        le=200,
        description="Rate limit for Store API requests per minute",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=5,
        le=120,
        description="HTTP request timeout in seconds",
    )
    user_agent: str = Field(
        default=BROWSER_USER_AGENT,
        description="User-Agent header sent with every request",
    )


class SteamDbConfig(BaseSettings):
    """Secondary DLC source (SteamDB) configuration."""

    model_config = SettingsConfigDict(env_prefix="STEAMDB_")

    base_url: str = Field(
        default="https://steamdb.info",
        description="Base URL for SteamDB app pages",
    )
    timeout_seconds: int = Field(
        default=15,
        ge=1,
        le=120,
        description="HTTP request timeout in seconds",
    )


class CacheConfig(BaseSettings):
    """Local application cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    database_path: Path = Field(
        default=Path("steamapps.cache"),
        description="SQLite file holding the application records",
    )
    max_age_hours: float = Field(
        default=24.0,
        gt=0,
        description="Age of the cache file after which the catalog is refetched",
    )
    page_size: int = Field(
        default=50000,
        ge=1,
        le=50000,
        description="max_results sent to the catalog endpoint",
    )

    @field_validator("database_path")
    @classmethod
    def expand_database_path(cls, v: Path) -> Path:
        """Expand a leading ~ in the database path."""
        return v.expanduser()


class RetryConfig(BaseSettings):
    """Retry behavior configuration."""

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of retry attempts",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=30.0,
        description="Base delay between retries (exponential backoff)",
    )
    max_delay_seconds: float = Field(
        default=60.0,
        ge=0.0,
        le=300.0,
        description="Maximum delay between retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.5,
        le=4.0,
        description="Base for exponential backoff calculation",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    steam: SteamAPIConfig = Field(default_factory=SteamAPIConfig)
    steamdb: SteamDbConfig = Field(default_factory=SteamDbConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
