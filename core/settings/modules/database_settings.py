from __future__ import annotations

from typing import Literal

from pydantic_settings import SettingsConfigDict

from core.settings.base_settings import MarketplaceBaseSettings


class DatabaseSettings(MarketplaceBaseSettings):
    """
    Storage backend settings.
    Loaded from DB_* variables.
    """

    model_config = SettingsConfigDict(env_prefix="DB_")

    backend: Literal["memory", "sql"] = "memory"
    url: str = "sqlite+aiosqlite:///./marketplace.db"
    echo: bool = False

    @property
    def uses_sql(self) -> bool:
        return self.backend == "sql"
