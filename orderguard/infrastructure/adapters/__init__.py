"""Infrastructure adapters."""
from .persistence import InMemoryOrderSource

__all__ = ["InMemoryOrderSource"]
