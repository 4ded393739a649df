"""Domain entities."""

from .order import Order, OrderItem, parse_timestamp

__all__ = ["Order", "OrderItem", "parse_timestamp"]
