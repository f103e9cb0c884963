from __future__ import annotations

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from core.settings.base_settings import MarketplaceBaseSettings


class NotificationSettings(MarketplaceBaseSettings):
    """
    Customer notification settings.
    Loaded from NOTIFY_* variables.
    """

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    webhook_enabled: bool = False
    webhook_url: str = ""
    sender_name: str = "Marketplace"
    timeout_seconds: float = Field(10.0, gt=0)
