"""
In-memory OrderSource implementation.

Holds raw order payloads for tests and demos. Payloads are stored as given,
so malformed records reach the query service exactly like bad storage rows.
"""
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional
import logging

from orderguard.application.services.schema_validator import to_decimal
from orderguard.domain.entities import parse_timestamp
from orderguard.domain.repositories import OrderSource
from orderguard.domain.value_objects import OrderQuery


logger = logging.getLogger(__name__)


class InMemoryOrderSource(OrderSource):
    """
    In-memory implementation of OrderSource.

    Filters on customer_id and status, sorts and applies the limit the
    same way the SQL-backed source does.
    """

    def __init__(self, orders: Optional[Iterable[Any]] = None):
        """Initialize storage with optional raw payloads."""
        self._storage: List[Any] = list(orders or [])
        logger.info(f"InMemoryOrderSource initialized with {len(self._storage)} record(s)")

    async def fetch_orders(self, query: OrderQuery) -> Optional[Any]:
        """
        Return raw records matching the query.

        Args:
            query: Filters, sort and limit

        Returns:
            List of raw records (non-mapping records are passed through
            only when no filter is set)
        """
        rows = [row for row in self._storage if _matches(row, query)]

        ranked = [row for row in rows if _sort_key(row, query.sort_by) is not None]
        unranked = [row for row in rows if _sort_key(row, query.sort_by) is None]
        ranked.sort(key=lambda row: _sort_key(row, query.sort_by), reverse=query.descending)

        result = ranked + unranked
        if query.limit is not None:
            result = result[: query.limit]

        logger.info(f"Found {len(result)} record(s) in memory (limit: {query.limit})")
        return result

    async def fetch_order(self, order_id: str) -> Optional[Any]:
        """
        Return the raw record with the given ID.

        Args:
            order_id: Order ID to lookup

        Returns:
            Raw record if found, None otherwise
        """
        for row in self._storage:
            if isinstance(row, Mapping) and row.get("id") == order_id:
                return row
        logger.info(f"Order not found in memory: {order_id}")
        return None


def _matches(row: Any, query: OrderQuery) -> bool:
    if query.customer_id is None and query.status is None:
        return True
    if not isinstance(row, Mapping):
        return False
    if query.customer_id is not None and row.get("customer_id") != query.customer_id:
        return False
    if query.status is not None and row.get("status") != query.status:
        return False
    return True


def _sort_key(row: Any, field: str) -> Any:
    # Rows without a usable value sort last in either direction
    if not isinstance(row, Mapping):
        return None
    value = row.get(field)
    if field == "total_amount":
        return to_decimal(value)
    return parse_timestamp(value)
