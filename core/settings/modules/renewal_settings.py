from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from core.settings.base_settings import MarketplaceBaseSettings

MAX_BATCH_SIZE = 300


class RenewalSettings(MarketplaceBaseSettings):
    """
    Recurring billing scheduler settings.
    Loaded from RENEWAL_* variables.
    """

    model_config = SettingsConfigDict(env_prefix="RENEWAL_")

    enabled: bool = True
    interval_seconds: float = Field(1800.0, gt=0)
    batch_size: int = 100

    @field_validator("batch_size")
    @classmethod
    def _clamp_batch_size(cls, value: int) -> int:
        return min(max(value, 1), MAX_BATCH_SIZE)
