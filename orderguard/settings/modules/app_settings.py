from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from orderguard.settings.modules.analytics_settings import AnalyticsSettings
from orderguard.settings.modules.database_settings import DatabaseSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    analytics: AnalyticsSettings
    database: DatabaseSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        analytics=AnalyticsSettings(),
        database=DatabaseSettings(),
    )
