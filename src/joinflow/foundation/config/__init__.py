"""Configuration management using pydantic-settings."""

from .settings import (
    GroupSettings,
    JoinflowSettings,
    LoggingSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "GroupSettings",
    "JoinflowSettings",
    "LoggingSettings",
    "clear_settings_cache",
    "get_settings",
]
