"""Domain layer - pure domain models and interfaces."""

from .entities import Order, OrderItem
from .enums import UNKNOWN_STATUS, OrderStatus
from .exceptions import OrderGuardError, QueryValidationError, StorageError
from .repositories import OrderSource
from .value_objects import ExecutionID, OrderQuery, ValidationError, ValidationOutcome

__all__ = [
    "ExecutionID",
    "Order",
    "OrderGuardError",
    "OrderItem",
    "OrderQuery",
    "OrderSource",
    "OrderStatus",
    "QueryValidationError",
    "StorageError",
    "UNKNOWN_STATUS",
    "ValidationError",
    "ValidationOutcome",
]
