from __future__ import annotations

from decimal import Decimal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from core.settings.base_settings import MarketplaceBaseSettings


class CommissionSettings(MarketplaceBaseSettings):
    """
    Marketplace-wide default commission.
    Loaded from COMMISSION_* variables.
    """

    model_config = SettingsConfigDict(env_prefix="COMMISSION_")

    default_type: str = Field("percentage", description="percentage | fixed | hybrid")
    default_value: Decimal = Field(Decimal("10"), ge=0)
    default_fixed: Decimal = Field(Decimal("0"), ge=0)
