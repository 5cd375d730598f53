"""
sdhook Configuration Module.

Each sub-module is an independent concern with its own environment variable
prefix:

    SDHOOK_*      hook options (project, log names, delivery mode, ...)
    SDHOOK_LOG_*  sdhook's own diagnostic logging

Usage:
    from sdhook.config import settings

    settings.hook.project_id
    settings.logging.level
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .hook import HookSettings
from .logging import LogFormat, LoggingSettings, LogLevel


class Settings(BaseSettings):
    """Composite settings aggregating the configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def hook(self) -> HookSettings:
        return HookSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "HookSettings",
    "LoggingSettings",
    "LogFormat",
    "LogLevel",
]
