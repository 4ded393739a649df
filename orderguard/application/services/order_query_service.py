"""
Order Query Service.

Read-only access to stored orders. Rows coming back from storage are
treated exactly like caller input: they go through the partitioner before
anything is returned or aggregated.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from orderguard.application.dtos import (
    EnvelopeMeta,
    ErrorKind,
    Failure,
    OrderDTO,
    OrderItemDTO,
    ResultEnvelope,
    Success,
)
from orderguard.application.interfaces import DiagnosticSink, resolve_sink
from orderguard.application.services.aggregation_engine import AggregationEngine
from orderguard.application.services.record_partitioner import (
    PartitionResult,
    RecordPartitioner,
)
from orderguard.application.services.schema_validator import (
    OrderSchema,
    SchemaValidator,
    is_uuid,
)
from orderguard.domain.entities import Order
from orderguard.domain.enums import OrderStatus
from orderguard.domain.exceptions import QueryValidationError, StorageError
from orderguard.domain.repositories import OrderSource
from orderguard.domain.value_objects import (
    SORT_ORDERS,
    SORTABLE_FIELDS,
    ExecutionID,
    OrderQuery,
)
from orderguard.settings import AnalyticsSettings


logger = logging.getLogger(__name__)


class OrderQueryService:
    """
    Async query service over an OrderSource.

    Stored IDs are expected to be UUIDs, so the validator used here always
    enforces the UUID shape regardless of settings.
    """

    def __init__(
        self,
        source: OrderSource,
        settings: Optional[AnalyticsSettings] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.source = source
        self._settings = settings or AnalyticsSettings()
        self._sink = resolve_sink(sink)
        self._validator = SchemaValidator(
            OrderSchema.from_settings(self._settings, require_uuid_ids=True)
        )
        self._partitioner = RecordPartitioner(
            self._validator,
            validation_enabled=self._settings.validation_enabled,
            sink=self._sink,
        )
        self._engine = AggregationEngine(
            self._validator,
            sink=self._sink,
            top_customers=self._settings.top_customers,
        )

    # =========================================================================
    # PUBLIC OPERATIONS
    # =========================================================================

    async def get_orders(self, query: Optional[OrderQuery] = None) -> ResultEnvelope:
        """
        List stored orders matching a query.

        Args:
            query: Filters, limit and sort (defaults if omitted)

        Returns:
            Success[List[OrderDTO]] or Failure
        """
        operation = "get_orders"
        execution_id = ExecutionID.generate()
        logger.info(f"[{execution_id}] Fetching orders: {query}")

        try:
            effective = self._checked_query(query)
            rows = await self.source.fetch_orders(effective)
            partition = self._partitioner.partition(rows)
            dtos = [self._order_to_dto(order) for order in partition.accepted]
        except QueryValidationError as e:
            return self._invalid_input(execution_id, operation, e.errors)
        except StorageError as e:
            return self._database_error(execution_id, operation, e)
        except Exception as e:
            return self._unexpected(execution_id, operation, e)

        logger.info(f"[{execution_id}] Returned {len(dtos)} order(s)")
        return Success(
            data=dtos,
            message=f"Retrieved {len(dtos)} order(s)",
            meta=self._meta(partition, execution_id),
        )

    async def get_order_by_id(self, order_id: Any) -> ResultEnvelope:
        """
        Fetch one stored order.

        Args:
            order_id: Order ID (UUID string)

        Returns:
            Success[Optional[OrderDTO]] or Failure; a missing row is
            Success with ``data=None``
        """
        operation = "get_order_by_id"
        execution_id = ExecutionID.generate()
        logger.info(f"[{execution_id}] Fetching order: {order_id}")

        if not isinstance(order_id, str) or not order_id.strip():
            return self._invalid_input(execution_id, operation, ["Order ID is required"])
        if not is_uuid(order_id):
            return self._invalid_input(execution_id, operation, ["Invalid order ID format"])

        try:
            row = await self.source.fetch_order(order_id)
            if row is None:
                logger.info(f"[{execution_id}] Order not found: {order_id}")
                return Success(
                    data=None,
                    message="Order not found",
                    meta=EnvelopeMeta(execution_id=str(execution_id)),
                )
            partition = self._partitioner.partition([row])
            dto = self._order_to_dto(partition.accepted[0]) if partition.accepted else None
        except StorageError as e:
            return self._database_error(execution_id, operation, e)
        except Exception as e:
            return self._unexpected(execution_id, operation, e)

        if dto is None:
            logger.warning(f"[{execution_id}] Stored order {order_id} failed validation")
            message = "Stored order is invalid"
        else:
            message = "Order retrieved successfully"

        return Success(data=dto, message=message, meta=self._meta(partition, execution_id))

    async def get_order_stats(self, query: Optional[OrderQuery] = None) -> ResultEnvelope:
        """
        Compute statistics over stored orders matching a query.

        Args:
            query: Filters, limit and sort (defaults if omitted)

        Returns:
            Success[OrderStatistics] or Failure
        """
        operation = "get_order_stats"
        execution_id = ExecutionID.generate()
        logger.info(f"[{execution_id}] Computing order stats: {query}")

        try:
            effective = self._checked_query(query)
            rows = await self.source.fetch_orders(effective)
            partition = self._partitioner.partition(rows)
            report = self._engine.statistics(partition.accepted)
        except QueryValidationError as e:
            return self._invalid_input(execution_id, operation, e.errors)
        except StorageError as e:
            return self._database_error(execution_id, operation, e)
        except Exception as e:
            return self._unexpected(execution_id, operation, e)

        message = (
            "Order statistics calculated successfully"
            if partition.accepted
            else "No valid orders found"
        )
        return Success(
            data=report.result,
            message=message,
            meta=self._meta(partition, execution_id, report.warnings),
        )

    # =========================================================================
    # QUERY CHECKS
    # =========================================================================

    def _checked_query(self, query: Optional[OrderQuery]) -> OrderQuery:
        query = query or OrderQuery()
        errors: List[str] = []
        max_limit = self._settings.max_limit

        if query.customer_id is not None and not is_uuid(query.customer_id):
            errors.append("Invalid customer ID format")

        if query.status is not None and query.status not in OrderStatus.values():
            errors.append(
                f"Invalid status {query.status!r}, expected one of: "
                f"{', '.join(OrderStatus.values())}"
            )

        if query.limit is not None:
            if isinstance(query.limit, bool) or not isinstance(query.limit, int):
                errors.append("Limit must be an integer")
            elif not 1 <= query.limit <= max_limit:
                errors.append(f"Limit must be between 1 and {max_limit}")

        if query.sort_by not in SORTABLE_FIELDS:
            errors.append(
                f"Invalid sort field {query.sort_by!r}, expected one of: "
                f"{', '.join(SORTABLE_FIELDS)}"
            )

        if query.sort_order not in SORT_ORDERS:
            errors.append("Sort order must be 'asc' or 'desc'")

        if errors:
            raise QueryValidationError(errors)

        if query.limit is None:
            return replace(query, limit=min(self._settings.default_limit, max_limit))
        return query

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _order_to_dto(self, order: Order) -> OrderDTO:
        items: List[OrderItemDTO] = []
        skipped = 0
        for index, raw_item in enumerate(order.items):
            if not self._validator.validate_item(raw_item, path=f"items[{index}]").is_valid:
                skipped += 1
                continue
            item = self._validator.narrow_item(raw_item)
            items.append(
                OrderItemDTO(
                    id=item.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.subtotal,
                )
            )

        return OrderDTO(
            id=order.id,
            customer_id=order.customer_id,
            total_amount=order.total_amount,
            status=order.status,
            items=items,
            skipped_items=skipped,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    def _meta(
        self,
        partition: PartitionResult,
        execution_id: ExecutionID,
        extra_warnings: tuple = (),
    ) -> EnvelopeMeta:
        return EnvelopeMeta(
            processed_count=partition.processed_count,
            skipped_count=partition.skipped_count,
            warnings=partition.warnings + tuple(extra_warnings),
            execution_id=str(execution_id),
        )

    # =========================================================================
    # FAILURES
    # =========================================================================

    def _invalid_input(
        self, execution_id: ExecutionID, operation: str, errors: List[str]
    ) -> Failure:
        logger.warning(f"[{execution_id}] {operation} rejected: {errors}")
        return Failure(
            error_kind=ErrorKind.INVALID_INPUT,
            message="; ".join(errors),
            details=self._details(execution_id, operation, errors=list(errors)),
        )

    def _database_error(
        self, execution_id: ExecutionID, operation: str, error: StorageError
    ) -> Failure:
        logger.error(f"[{execution_id}] {operation} storage failure: {error.message}")
        self._sink.error(
            "Storage failure", {"operation": operation, "execution_id": str(execution_id)}
        )
        return Failure(
            error_kind=ErrorKind.DATABASE,
            message=f"Database error: {error.message}",
            details=self._details(execution_id, operation, code=error.code),
        )

    def _unexpected(self, execution_id: ExecutionID, operation: str, error: Exception) -> Failure:
        logger.error(
            f"[{execution_id}] {operation} failed: {type(error).__name__}: {error}",
            exc_info=True,
        )
        self._sink.error(
            "An unexpected error occurred",
            {"operation": operation, "execution_id": str(execution_id)},
        )
        return Failure(
            error_kind=ErrorKind.UNKNOWN,
            message="An unexpected error occurred",
            details=self._details(execution_id, operation, error_type=type(error).__name__),
        )

    @staticmethod
    def _details(execution_id: ExecutionID, operation: str, **extra: Any) -> Dict[str, Any]:
        details: Dict[str, Any] = {"operation": operation, "execution_id": str(execution_id)}
        details.update(extra)
        return details
