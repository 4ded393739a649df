"""Repository interfaces."""

from .order_source import OrderSource

__all__ = ["OrderSource"]
