"""Application layer - services, interfaces, and DTOs."""

from .dtos import (
    CalculationBreakdown,
    ErrorKind,
    ExtendedOrderStatistics,
    Failure,
    OrderDTO,
    OrderItemDTO,
    OrderStatistics,
    OrderTotals,
    ResultEnvelope,
    Success,
    is_failure,
    is_success,
)
from .interfaces import DiagnosticSink, NullDiagnosticSink
from .services import OrderAnalyticsService, OrderQueryService, SchemaValidator

__all__ = [
    # DTOs
    "CalculationBreakdown",
    "ErrorKind",
    "ExtendedOrderStatistics",
    "Failure",
    "OrderDTO",
    "OrderItemDTO",
    "OrderStatistics",
    "OrderTotals",
    "ResultEnvelope",
    "Success",
    "is_failure",
    "is_success",
    # Services
    "OrderAnalyticsService",
    "OrderQueryService",
    "SchemaValidator",
    # Interfaces
    "DiagnosticSink",
    "NullDiagnosticSink",
]
