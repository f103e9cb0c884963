from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.commission_settings import CommissionSettings
from core.settings.modules.courier_settings import CourierSettings
from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.notification_settings import NotificationSettings
from core.settings.modules.renewal_settings import RenewalSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    commission: CommissionSettings
    courier: CourierSettings
    renewal: RenewalSettings
    database: DatabaseSettings
    notifications: NotificationSettings


def load_app_settings() -> AppSettings:
    """Read every section from the environment (uncached)."""
    return AppSettings(
        commission=CommissionSettings(),
        courier=CourierSettings(),
        renewal=RenewalSettings(),
        database=DatabaseSettings(),
        notifications=NotificationSettings(),
    )


@lru_cache()
def get_app_settings() -> AppSettings:
    return load_app_settings()
