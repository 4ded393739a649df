"""Persistence adapters."""
from .in_memory_order_source import InMemoryOrderSource

__all__ = ["InMemoryOrderSource"]
