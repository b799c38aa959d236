"""Environment-based configuration using pydantic-settings.

Example:
    >>> from joinflow.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.group.strict_fillers
    True
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # JOINFLOW_GROUP_STRICT_FILLERS=false
    # JOINFLOW_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="JOINFLOW_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    include_timestamps: bool = True


class GroupSettings(BaseSettings):
    """Behaviour of groups when slots are misused or written late."""

    model_config = SettingsConfigDict(
        env_prefix="JOINFLOW_GROUP_",
        extra="ignore",
    )

    strict_fillers: bool = Field(
        default=True,
        description="Raise SlotError when a slot filler is invoked twice",
    )
    log_discarded: bool = Field(
        default=True,
        description="Log writes that arrive after the group has resolved",
    )


class JoinflowSettings(BaseSettings):
    """Root settings for joinflow.

    Example environment variables:
        JOINFLOW_DEBUG=true
        JOINFLOW_LOG_LEVEL=DEBUG
        JOINFLOW_LOG_FORMAT=json
        JOINFLOW_GROUP_STRICT_FILLERS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="JOINFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    group: GroupSettings = Field(default_factory=GroupSettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> JoinflowSettings:
    """Get the global settings instance (cached)."""
    return JoinflowSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    The next get_settings() call reloads configuration from the environment.
    """
    get_settings.cache_clear()
