# Settings modules
from .app_settings import AppSettings, get_app_settings, load_app_settings
from .commission_settings import CommissionSettings
from .courier_settings import CourierSettings
from .database_settings import DatabaseSettings
from .notification_settings import NotificationSettings
from .renewal_settings import RenewalSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "load_app_settings",
    "CommissionSettings",
    "CourierSettings",
    "DatabaseSettings",
    "NotificationSettings",
    "RenewalSettings",
]
