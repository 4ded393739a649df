# Settings package
from orderguard.settings.modules import (
    AnalyticsSettings,
    AppSettings,
    DatabaseSettings,
    get_app_settings,
)

__all__ = ["get_app_settings", "AppSettings", "AnalyticsSettings", "DatabaseSettings"]
