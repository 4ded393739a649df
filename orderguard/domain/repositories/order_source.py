"""Storage collaborator interface for raw order records."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..value_objects import OrderQuery


class OrderSource(ABC):
    """
    Abstract read-only source of raw order records.

    Implementations return raw, unvalidated data: a sequence of mappings,
    ``None`` when the store supplies nothing, or whatever shape the backend
    produced. Read failures are raised as StorageError.
    """

    @abstractmethod
    async def fetch_orders(self, query: OrderQuery) -> Optional[Any]:
        """Fetch raw order records matching the query.

        Args:
            query: Filters, sort and limit to apply

        Returns:
            Raw collection of order records, or None
        """
        pass

    @abstractmethod
    async def fetch_order(self, order_id: str) -> Optional[Any]:
        """Fetch one raw order record by identifier.

        Args:
            order_id: Order identifier

        Returns:
            Raw order record if found, None otherwise
        """
        pass
