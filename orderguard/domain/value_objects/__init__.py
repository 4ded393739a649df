"""Domain value objects."""

from .value_objects import ExecutionID
from .validation import Severity, ValidationError, ValidationOutcome
from .order_query import SORT_ORDERS, SORTABLE_FIELDS, OrderQuery

__all__ = [
    "ExecutionID",
    "OrderQuery",
    "Severity",
    "SORT_ORDERS",
    "SORTABLE_FIELDS",
    "ValidationError",
    "ValidationOutcome",
]
