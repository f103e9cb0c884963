from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from core.settings.base_settings import MarketplaceBaseSettings

MIN_TIMEOUT_SECONDS = 1.0


class CourierSettings(MarketplaceBaseSettings):
    """
    Courier provider API settings.
    Loaded from COURIER_* variables.
    """

    model_config = SettingsConfigDict(env_prefix="COURIER_")

    enabled: bool = False
    provider: str = "custom"
    base_url: str = ""
    consignment_path: str = ""
    tracking_path: str = ""
    api_key: str = ""
    secret_key: str = ""
    bearer_token: str = ""
    timeout_seconds: float = Field(12.0)

    @field_validator("timeout_seconds")
    @classmethod
    def _min_timeout(cls, value: float) -> float:
        return max(MIN_TIMEOUT_SECONDS, value)
