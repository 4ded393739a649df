# Settings modules
from .analytics_settings import AnalyticsSettings
from .app_settings import AppSettings, get_app_settings
from .database_settings import DatabaseSettings

__all__ = [
    "AnalyticsSettings",
    "AppSettings",
    "DatabaseSettings",
    "get_app_settings",
]
