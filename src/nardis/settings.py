"""Application-wide configuration loaded from the environment."""

from __future__ import annotations

from functools import cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nardis.shared.logging_config import LoggingConfiguration


class NardisSettings(BaseSettings):
    """Centralized settings for running the Nardis simulation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NARDIS_",
        extra="ignore",
    )

    database_url: str = "sqlite:///nardis.db"
    log_enabled: bool = False
    log_level: str = "INFO"
    player_name: str = "Player"
    simulation_turns: int = Field(default=50, ge=0)
    rng_seed: int | None = None

    def logging_configuration(self) -> LoggingConfiguration:
        """Build the logging configuration described by these settings."""
        return LoggingConfiguration(enabled=self.log_enabled, level=self.log_level)


@cache
def get_settings() -> NardisSettings:
    """Return the cached settings instance."""

    return NardisSettings()


__all__ = ["NardisSettings", "get_settings"]
