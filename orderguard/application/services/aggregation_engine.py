"""
Aggregation over accepted orders.

Every operation is total: it is defined for any accepted sequence,
including the empty one. Items are re-checked one by one; a broken item
contributes nothing but never removes its order from the counts.

Accumulation is Decimal, left to right in input order. Decimal context
faults (e.g. Overflow) are not caught here.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from orderguard.application.dtos import (
    CustomerSummary,
    DateRange,
    ExtendedOrderStatistics,
    OrderStatistics,
    OrderTotals,
    StatusBreakdown,
)
from orderguard.application.interfaces import DiagnosticSink, resolve_sink
from orderguard.application.services.schema_validator import SchemaValidator
from orderguard.domain.entities import Order
from orderguard.domain.enums import UNKNOWN_STATUS

R = TypeVar("R")

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class OrderContribution:
    """What one accepted order adds to the aggregates."""

    order: Order
    revenue: Decimal
    item_count: Decimal

    @property
    def status(self) -> str:
        status = self.order.status
        return status if isinstance(status, str) and status else UNKNOWN_STATUS


@dataclass(frozen=True)
class AggregationReport(Generic[R]):
    """Aggregation result plus item-level bookkeeping."""

    result: R
    warnings: Tuple[str, ...] = ()
    skipped_items: int = 0


def average(total: Decimal, count: int) -> Decimal:
    """total / count, or exactly 0 when count is 0."""
    if count <= 0:
        return ZERO
    return total / count


class AggregationEngine:
    """Computes totals and statistics from accepted orders."""

    def __init__(
        self,
        validator: SchemaValidator,
        sink: Optional[DiagnosticSink] = None,
        top_customers: int = 5,
    ) -> None:
        self._validator = validator
        self._sink = resolve_sink(sink)
        self._top_customers = top_customers

    # =========================================================================
    # PUBLIC OPERATIONS
    # =========================================================================

    def totals(self, accepted: Sequence[Order]) -> AggregationReport[OrderTotals]:
        """Revenue, item count, order count and average order value."""
        contributions, warnings, skipped_items = self._contributions(accepted)
        return AggregationReport(
            result=OrderTotals(**self._totals_fields(contributions)),
            warnings=warnings,
            skipped_items=skipped_items,
        )

    def statistics(self, accepted: Sequence[Order]) -> AggregationReport[OrderStatistics]:
        """Totals plus number of orders per status."""
        contributions, warnings, skipped_items = self._contributions(accepted)
        return AggregationReport(
            result=OrderStatistics(
                **self._totals_fields(contributions),
                status_counts=self._status_counts(contributions),
            ),
            warnings=warnings,
            skipped_items=skipped_items,
        )

    def extended_statistics(
        self, accepted: Sequence[Order]
    ) -> AggregationReport[ExtendedOrderStatistics]:
        """Statistics plus status breakdown, top customers and date range."""
        contributions, warnings, skipped_items = self._contributions(accepted)
        return AggregationReport(
            result=ExtendedOrderStatistics(
                **self._totals_fields(contributions),
                status_counts=self._status_counts(contributions),
                status_breakdown=self._status_breakdown(contributions),
                top_customers=self._customer_ranking(contributions),
                date_range=self._date_range(contributions),
            ),
            warnings=warnings,
            skipped_items=skipped_items,
        )

    # =========================================================================
    # ACCUMULATION
    # =========================================================================

    def _contributions(
        self, accepted: Sequence[Order]
    ) -> Tuple[List[OrderContribution], Tuple[str, ...], int]:
        contributions: List[OrderContribution] = []
        warnings: List[str] = []
        skipped_items = 0

        for order in accepted:
            revenue = ZERO
            item_count = ZERO
            order_label = order.id or "<unknown>"

            for index, raw_item in enumerate(order.items):
                outcome = self._validator.validate_item(
                    raw_item, path=f"items[{index}]", order_id=order.id or None
                )
                if not outcome.is_valid:
                    skipped_items += 1
                    warnings.append(
                        f"Invalid item {_item_label(raw_item, index)} in order "
                        f"{order_label}, skipping: {outcome.summary()}"
                    )
                    continue

                item = self._validator.narrow_item(raw_item)
                revenue += item.subtotal
                item_count += item.quantity

            contributions.append(OrderContribution(order, revenue, item_count))

        if skipped_items:
            self._sink.warn("Skipped invalid items", {"count": skipped_items})

        return contributions, tuple(warnings), skipped_items

    def _totals_fields(self, contributions: List[OrderContribution]) -> Dict[str, Any]:
        revenue = ZERO
        item_count = ZERO
        for contribution in contributions:
            revenue += contribution.revenue
            item_count += contribution.item_count

        return {
            "total_revenue": revenue,
            "average_order_value": average(revenue, len(contributions)),
            "total_items": item_count,
            "total_orders": len(contributions),
        }

    def _status_counts(self, contributions: List[OrderContribution]) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for contribution in contributions:
            counts[contribution.status] = counts.get(contribution.status, 0) + 1
        return counts

    def _status_breakdown(
        self, contributions: List[OrderContribution]
    ) -> Tuple[StatusBreakdown, ...]:
        grouped: Dict[str, List[OrderContribution]] = {}
        for contribution in contributions:
            grouped.setdefault(contribution.status, []).append(contribution)

        total_orders = len(contributions)
        breakdown = []
        for status, members in grouped.items():
            revenue = ZERO
            for member in members:
                revenue += member.revenue
            breakdown.append(
                StatusBreakdown(
                    status=status,
                    count=len(members),
                    percentage=average(Decimal(len(members)) * HUNDRED, total_orders),
                    total_revenue=revenue,
                    average_order_value=average(revenue, len(members)),
                )
            )
        return tuple(breakdown)

    def _customer_ranking(
        self, contributions: List[OrderContribution]
    ) -> Tuple[CustomerSummary, ...]:
        spent: Dict[str, Decimal] = {}
        counts: Dict[str, int] = {}
        for contribution in contributions:
            customer_id = contribution.order.customer_id
            if not customer_id:
                continue
            spent[customer_id] = spent.get(customer_id, ZERO) + contribution.revenue
            counts[customer_id] = counts.get(customer_id, 0) + 1

        # sorted() is stable, so ties keep first-appearance order
        ranked = sorted(spent, key=lambda customer_id: spent[customer_id], reverse=True)
        return tuple(
            CustomerSummary(
                customer_id=customer_id,
                order_count=counts[customer_id],
                total_spent=spent[customer_id],
            )
            for customer_id in ranked[: self._top_customers]
        )

    def _date_range(self, contributions: List[OrderContribution]) -> Optional[DateRange]:
        stamps: List[datetime] = [
            stamp
            for stamp in (c.order.created_at_datetime for c in contributions)
            if stamp is not None
        ]
        if not stamps:
            return None
        return DateRange(earliest=min(stamps), latest=max(stamps))


def _item_label(raw_item: Any, index: int) -> str:
    if isinstance(raw_item, Mapping):
        item_id = raw_item.get("id")
        if isinstance(item_id, str) and item_id.strip():
            return item_id
    return f"at index {index}"
