"""Application DTOs."""

from .analytics_dto import (
    CalculationBreakdown,
    CustomerSummary,
    DateRange,
    ExtendedOrderStatistics,
    OrderStatistics,
    OrderTotals,
    StatusBreakdown,
)
from .envelope import (
    EnvelopeMeta,
    ErrorKind,
    Failure,
    ResultEnvelope,
    Success,
    is_failure,
    is_success,
)
from .order_dto import OrderDTO, OrderItemDTO

__all__ = [
    "CalculationBreakdown",
    "CustomerSummary",
    "DateRange",
    "EnvelopeMeta",
    "ErrorKind",
    "ExtendedOrderStatistics",
    "Failure",
    "OrderDTO",
    "OrderItemDTO",
    "OrderStatistics",
    "OrderTotals",
    "ResultEnvelope",
    "StatusBreakdown",
    "Success",
    "is_failure",
    "is_success",
]
