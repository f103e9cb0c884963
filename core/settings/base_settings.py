from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class MarketplaceBaseSettings(BaseSettings):
    """
    Base for every settings section.
    Reads the process environment and an optional .env file; unknown keys are ignored.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
