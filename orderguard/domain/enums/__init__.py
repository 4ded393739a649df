"""Domain enums."""

from .order_status import UNKNOWN_STATUS, OrderStatus

__all__ = ["OrderStatus", "UNKNOWN_STATUS"]
