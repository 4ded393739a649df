"""Database infrastructure."""
from .config import create_engine, get_session_factory, init_database
from .models import Base, OrderItemModel, OrderModel
from .repositories import SqlAlchemyOrderSource

__all__ = [
    "Base",
    "OrderItemModel",
    "OrderModel",
    "SqlAlchemyOrderSource",
    "create_engine",
    "get_session_factory",
    "init_database",
]
