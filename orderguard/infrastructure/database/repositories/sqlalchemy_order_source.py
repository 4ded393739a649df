"""
SQLAlchemy OrderSource Implementation.

Reads orders with their items and returns them as raw mappings, so stored
rows go through the same validation as caller input.
"""
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from orderguard.domain.exceptions import StorageError
from orderguard.domain.repositories import OrderSource
from orderguard.domain.value_objects import OrderQuery
from orderguard.infrastructure.database.models import OrderItemModel, OrderModel


logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "created_at": OrderModel.created_at,
    "updated_at": OrderModel.updated_at,
    "total_amount": OrderModel.total_amount,
}


class SqlAlchemyOrderSource(OrderSource):
    """
    SQLAlchemy implementation of OrderSource.

    Opens a short-lived session per read from the given factory.
    """

    def __init__(self, session_factory):
        """
        Initialize source with a session factory.

        Args:
            session_factory: Callable returning an AsyncSession context manager
        """
        self._session_factory = session_factory

    async def fetch_orders(self, query: OrderQuery) -> Optional[Any]:
        """
        Fetch orders matching the query.

        Args:
            query: Filters, sort and limit

        Returns:
            List of raw order mappings

        Raises:
            StorageError: If the read fails
        """
        stmt = select(OrderModel).options(selectinload(OrderModel.items))

        if query.customer_id is not None:
            stmt = stmt.where(OrderModel.customer_id == query.customer_id)
        if query.status is not None:
            stmt = stmt.where(OrderModel.status == query.status)

        column = _SORT_COLUMNS.get(query.sort_by, OrderModel.created_at)
        stmt = stmt.order_by(column.desc() if query.descending else column.asc())

        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                models = result.scalars().all()
                rows = [self._to_record(model) for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch orders: {e}")
            raise StorageError(str(e), code=type(e).__name__) from e

        logger.info(f"Fetched {len(rows)} order row(s)")
        return rows

    async def fetch_order(self, order_id: str) -> Optional[Any]:
        """
        Fetch one order by ID.

        Args:
            order_id: Order ID to lookup

        Returns:
            Raw order mapping if found, None otherwise

        Raises:
            StorageError: If the read fails
        """
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        )

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
                return self._to_record(model) if model is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch order {order_id}: {e}")
            raise StorageError(str(e), code=type(e).__name__) from e

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _to_record(self, model: OrderModel) -> Dict[str, Any]:
        return {
            "id": model.id,
            "customer_id": model.customer_id,
            "total_amount": model.total_amount,
            "status": model.status,
            "items": [self._item_to_record(item) for item in model.items],
            "created_at": model.created_at.isoformat() if model.created_at else None,
            "updated_at": model.updated_at.isoformat() if model.updated_at else None,
        }

    def _item_to_record(self, item: OrderItemModel) -> Dict[str, Any]:
        return {
            "id": item.id,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "price": item.price,
        }
