"""Database-backed order sources."""
from .sqlalchemy_order_source import SqlAlchemyOrderSource

__all__ = ["SqlAlchemyOrderSource"]
