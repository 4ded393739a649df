from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from orderguard.settings.base import OrderGuardBaseSettings


class AnalyticsSettings(OrderGuardBaseSettings):
    """
    Validation and aggregation settings.
    Loaded from .env with exact variable name matching.
    """

    validation_enabled: bool = Field(default=True, alias="ORDERGUARD_VALIDATION_ENABLED")
    require_uuid_ids: bool = Field(default=False, alias="ORDERGUARD_REQUIRE_UUID_IDS")
    max_total_amount: Decimal = Field(
        default=Decimal("999999.99"), gt=0, alias="ORDERGUARD_MAX_TOTAL_AMOUNT"
    )
    default_limit: int = Field(default=100, ge=1, alias="ORDERGUARD_DEFAULT_LIMIT")
    max_limit: int = Field(default=100, ge=1, alias="ORDERGUARD_MAX_LIMIT")
    top_customers: int = Field(default=5, ge=0, alias="ORDERGUARD_TOP_CUSTOMERS")
