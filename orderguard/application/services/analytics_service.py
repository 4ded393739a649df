"""
Order analytics service.

Public entry points for totals, statistics and the debugging breakdown.
Every method returns a Success or Failure envelope and never raises:
bad input data degrades to a zeroed Success with warnings, only an
internal fault becomes a Failure.
"""

import logging
from typing import Any, Callable, Optional

from orderguard.application.dtos import (
    CalculationBreakdown,
    EnvelopeMeta,
    ErrorKind,
    Failure,
    ResultEnvelope,
    Success,
)
from orderguard.application.interfaces import DiagnosticSink, resolve_sink
from orderguard.application.services.aggregation_engine import (
    AggregationEngine,
    AggregationReport,
)
from orderguard.application.services.record_partitioner import (
    PartitionResult,
    RecordPartitioner,
)
from orderguard.application.services.schema_validator import OrderSchema, SchemaValidator
from orderguard.domain.value_objects import ExecutionID
from orderguard.settings import AnalyticsSettings


logger = logging.getLogger(__name__)

NO_VALID_ORDERS_MESSAGE = "No valid orders found"


class OrderAnalyticsService:
    """
    Validates untrusted order collections and aggregates the valid subset.

    Stateless apart from read-only configuration: calls are independent
    and safe to run concurrently on one instance.
    """

    def __init__(
        self,
        settings: Optional[AnalyticsSettings] = None,
        sink: Optional[DiagnosticSink] = None,
        validator: Optional[SchemaValidator] = None,
    ) -> None:
        """Initialize analytics service.

        Args:
            settings: Validation/aggregation settings (env defaults if omitted)
            sink: Diagnostic sink (no-op if omitted)
            validator: Validator override; built from settings if omitted
        """
        self._settings = settings or AnalyticsSettings()
        self._sink = resolve_sink(sink)
        self._validator = validator or SchemaValidator(OrderSchema.from_settings(self._settings))
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

    def calculate_order_totals(self, orders: Any) -> ResultEnvelope:
        """Compute revenue, item count, order count and average order value.

        Args:
            orders: Raw order collection (may be None or malformed)

        Returns:
            Success[OrderTotals] or Failure
        """
        return self._run(
            "calculate_order_totals",
            orders,
            self._engine.totals,
            "Order totals calculated successfully",
        )

    def get_order_statistics(self, orders: Any) -> ResultEnvelope:
        """Compute totals plus per-status order counts.

        Args:
            orders: Raw order collection (may be None or malformed)

        Returns:
            Success[OrderStatistics] or Failure
        """
        return self._run(
            "get_order_statistics",
            orders,
            self._engine.statistics,
            "Order statistics calculated successfully",
        )

    def get_extended_statistics(self, orders: Any) -> ResultEnvelope:
        """Compute statistics with status breakdown, top customers and date range.

        Args:
            orders: Raw order collection (may be None or malformed)

        Returns:
            Success[ExtendedOrderStatistics] or Failure
        """
        return self._run(
            "get_extended_statistics",
            orders,
            self._engine.extended_statistics,
            "Extended order statistics calculated successfully",
        )

    def get_calculation_breakdown(self, orders: Any) -> ResultEnvelope:
        """Compute totals and return the warnings and skip counts alongside.

        Args:
            orders: Raw order collection (may be None or malformed)

        Returns:
            Success[CalculationBreakdown] or Failure
        """
        return self._run(
            "get_calculation_breakdown",
            orders,
            self._engine.totals,
            "Calculation breakdown generated",
            build=_breakdown,
        )

    def _run(
        self,
        operation: str,
        orders: Any,
        compute: Callable[[Any], AggregationReport],
        success_message: str,
        build: Optional[Callable[[PartitionResult, AggregationReport], Any]] = None,
    ) -> ResultEnvelope:
        execution_id = ExecutionID.generate()
        logger.info(f"[{execution_id}] {operation} started")

        try:
            partition = self._partitioner.partition(orders)
            report = compute(partition.accepted)
            data = build(partition, report) if build else report.result
        except ArithmeticError as e:
            return self._fault(
                execution_id, operation, e, "Calculation failed: numeric result out of range"
            )
        except Exception as e:
            return self._fault(execution_id, operation, e, "An unexpected error occurred")

        warnings = partition.warnings + report.warnings
        message = success_message if partition.accepted else NO_VALID_ORDERS_MESSAGE

        logger.info(
            f"[{execution_id}] {operation} completed - "
            f"processed={partition.processed_count}, "
            f"skipped={partition.skipped_count}, "
            f"warnings={len(warnings)}"
        )

        return Success(
            data=data,
            message=message,
            meta=EnvelopeMeta(
                processed_count=partition.processed_count,
                skipped_count=partition.skipped_count,
                warnings=warnings,
                execution_id=str(execution_id),
            ),
        )

    def _fault(
        self,
        execution_id: ExecutionID,
        operation: str,
        error: Exception,
        message: str,
    ) -> Failure:
        logger.error(
            f"[{execution_id}] {operation} failed: {type(error).__name__}: {error}",
            exc_info=True,
        )
        self._sink.error(
            message,
            {"operation": operation, "execution_id": str(execution_id), "error": type(error).__name__},
        )
        return Failure(
            error_kind=ErrorKind.UNKNOWN,
            message=message,
            details={
                "operation": operation,
                "execution_id": str(execution_id),
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )


def _breakdown(partition: PartitionResult, report: AggregationReport) -> CalculationBreakdown:
    totals = report.result
    return CalculationBreakdown(
        total_revenue=totals.total_revenue,
        average_order_value=totals.average_order_value,
        total_items=totals.total_items,
        total_orders=totals.total_orders,
        processed_orders=partition.processed_count,
        skipped_orders=partition.skipped_count,
        skipped_items=report.skipped_items,
        warnings=partition.warnings + report.warnings,
    )
