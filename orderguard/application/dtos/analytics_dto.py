"""Application DTOs for aggregation results."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, Field


class OrderTotals(BaseModel):
    """Totals computed over accepted orders."""

    total_revenue: Decimal = Field(default=Decimal("0"), description="Sum of valid item subtotals")
    average_order_value: Decimal = Field(default=Decimal("0"), description="Revenue / order count, 0 when empty")
    total_items: Decimal = Field(default=Decimal("0"), description="Sum of valid item quantities")
    total_orders: int = Field(default=0, ge=0, description="Accepted order count")

    model_config = {"frozen": True}


class OrderStatistics(OrderTotals):
    """Totals plus a per-status order count."""

    status_counts: Dict[str, int] = Field(default_factory=dict, description="Orders per status")


class CalculationBreakdown(OrderTotals):
    """Totals plus the bookkeeping used to compute them (for debugging)."""

    processed_orders: int = Field(default=0, ge=0)
    skipped_orders: int = Field(default=0, ge=0)
    skipped_items: int = Field(default=0, ge=0)
    warnings: Tuple[str, ...] = Field(default=())


class StatusBreakdown(BaseModel):
    """Aggregates for the orders sharing one status."""

    status: str
    count: int = Field(..., ge=0)
    percentage: Decimal = Field(..., description="Share of accepted orders, 0-100")
    total_revenue: Decimal
    average_order_value: Decimal

    model_config = {"frozen": True}


class CustomerSummary(BaseModel):
    """Spend of one customer across accepted orders."""

    customer_id: str
    order_count: int = Field(..., ge=0)
    total_spent: Decimal

    model_config = {"frozen": True}


class DateRange(BaseModel):
    """Earliest and latest creation timestamps seen."""

    earliest: datetime
    latest: datetime

    model_config = {"frozen": True}


class ExtendedOrderStatistics(OrderStatistics):
    """Statistics with per-status breakdown, top customers and date range."""

    status_breakdown: Tuple[StatusBreakdown, ...] = Field(default=())
    top_customers: Tuple[CustomerSummary, ...] = Field(default=())
    date_range: Optional[DateRange] = None
