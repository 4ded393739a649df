"""Tests for OrderAnalyticsService envelopes."""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from orderguard.application.dtos import (
    CalculationBreakdown,
    ErrorKind,
    ExtendedOrderStatistics,
    OrderStatistics,
    OrderTotals,
    is_failure,
    is_success,
)
from orderguard.application.services import OrderAnalyticsService, SchemaValidator
from orderguard.application.services.record_partitioner import MISSING_COLLECTION_WARNING
from orderguard.settings import AnalyticsSettings
from tests.factories import BrokenSink, make_item, make_order


ZERO = Decimal("0")


def _assert_zeroed(totals):
    assert totals.total_revenue == ZERO
    assert totals.average_order_value == ZERO
    assert totals.total_items == ZERO
    assert totals.total_orders == 0


class TestDegradedInput:

    def test_absent_input_is_zeroed_success_with_warning(self, analytics_service):
        result = analytics_service.calculate_order_totals(None)

        assert is_success(result)
        _assert_zeroed(result.data)
        assert result.message == "No valid orders found"
        assert MISSING_COLLECTION_WARNING in result.meta.warnings

    def test_empty_input_is_zeroed_success_without_absence_warning(self, analytics_service):
        result = analytics_service.calculate_order_totals([])

        assert is_success(result)
        _assert_zeroed(result.data)
        assert result.message == "No valid orders found"
        assert result.meta.warnings == ()

    @pytest.mark.parametrize("raw", ["not a list", 42, {"orders": []}])
    def test_wrong_shape_is_zeroed_success(self, analytics_service, raw):
        result = analytics_service.get_order_statistics(raw)

        assert is_success(result)
        _assert_zeroed(result.data)
        assert result.data.status_counts == {}
        assert result.meta.warnings == ("Orders input is not an array",)

    def test_all_invalid_records(self, analytics_service):
        result = analytics_service.calculate_order_totals([{}, None, "x"])

        assert is_success(result)
        _assert_zeroed(result.data)
        assert result.meta.skipped_count == 3
        assert result.meta.processed_count == 0
        assert len(result.meta.warnings) == 3


class TestTotals:

    def test_mixed_validity(self, analytics_service):
        orders = [
            make_order(items=[make_item(price=50, quantity=2), make_item(id="item-2", price=50, quantity=1)]),
            {"id": "order-2", "customer_id": "cust-2", "total_amount": 10, "status": "pending"},
        ]

        result = analytics_service.calculate_order_totals(orders)

        assert is_success(result)
        assert isinstance(result.data, OrderTotals)
        assert result.data.total_revenue == Decimal("150")
        assert result.data.total_items == Decimal("3")
        assert result.data.total_orders == 1
        assert result.meta.skipped_count == 1
        assert result.meta.processed_count == 1
        assert result.message == "Order totals calculated successfully"

    def test_advisory_only_order_is_accepted(self, analytics_service):
        orders = [
            make_order(items=[make_item(price=-50, quantity=1), make_item(id="item-2", price=75, quantity=2)])
        ]

        result = analytics_service.calculate_order_totals(orders)

        assert result.data.total_revenue == Decimal("100")
        assert result.data.total_items == Decimal("3")
        assert result.data.total_orders == 1
        assert result.meta.skipped_count == 0
        assert result.meta.warnings == ("Order order-1: Item price is negative (items[0].price)",)

    def test_invalid_item_excluded_but_order_kept(self, analytics_service):
        orders = [
            make_order(items=[make_item(price=40, quantity=1), make_item(id="item-bad", quantity="three")])
        ]

        result = analytics_service.calculate_order_totals(orders)

        assert result.data.total_revenue == Decimal("40")
        assert result.data.total_items == Decimal("1")
        assert result.data.total_orders == 1
        assert any("item-bad" in warning for warning in result.meta.warnings)

    def test_order_count_matches_accepted_and_items_match_quantities(self, analytics_service):
        orders = [
            make_order(id=f"order-{n}", items=[make_item(quantity=n + 1), make_item(id="bad", price=None)])
            for n in range(5)
        ] + [{"id": "broken"}]

        result = analytics_service.calculate_order_totals(orders)

        assert result.data.total_orders == result.meta.processed_count == 5
        assert result.data.total_items == Decimal(1 + 2 + 3 + 4 + 5)

    def test_float_inputs_are_exact(self, analytics_service):
        orders = [make_order(items=[make_item(price=0.1, quantity=1), make_item(id="item-2", price=0.2, quantity=1)])]

        result = analytics_service.calculate_order_totals(orders)

        assert result.data.total_revenue == Decimal("0.3")

    def test_idempotent(self, analytics_service):
        orders = [make_order(items=[make_item(price=19.99, quantity=3)])]

        first = analytics_service.calculate_order_totals(orders)
        second = analytics_service.calculate_order_totals(orders)

        assert first.data == second.data
        assert first.meta.execution_id != second.meta.execution_id

    def test_input_is_not_mutated(self, analytics_service):
        orders = [make_order(items=[make_item(price=5, quantity=2)])]
        snapshot = [dict(orders[0], items=[dict(orders[0]["items"][0])])]

        analytics_service.get_extended_statistics(orders)

        assert orders == snapshot


class TestStatistics:

    def test_status_counts_and_average(self, analytics_service):
        statuses = ["pending", "completed", "cancelled", "completed"]
        orders = [
            make_order(id=f"order-{n}", status=status, items=[make_item(price=25 * (n + 1))])
            for n, status in enumerate(statuses)
        ]

        result = analytics_service.get_order_statistics(orders)

        assert isinstance(result.data, OrderStatistics)
        assert result.data.status_counts == {"pending": 1, "completed": 2, "cancelled": 1}
        assert result.data.total_revenue == Decimal("250")
        assert result.data.average_order_value == Decimal("250") / 4

    def test_extended_statistics(self, analytics_service):
        orders = [
            make_order(id="a", customer_id="c1", status="completed", items=[make_item(price=30)],
                       created_at="2024-02-01T00:00:00Z"),
            make_order(id="b", customer_id="c2", status="pending", items=[make_item(price=10)],
                       created_at="2024-01-01T00:00:00Z"),
        ]

        result = analytics_service.get_extended_statistics(orders)

        assert isinstance(result.data, ExtendedOrderStatistics)
        assert result.message == "Extended order statistics calculated successfully"
        assert [c.customer_id for c in result.data.top_customers] == ["c1", "c2"]
        assert result.data.date_range.earliest.month == 1
        assert {row.status for row in result.data.status_breakdown} == {"completed", "pending"}


class TestBreakdown:

    def test_breakdown_carries_bookkeeping(self, analytics_service):
        orders = [
            make_order(items=[make_item(price=10), make_item(id="item-2", quantity=None)]),
            "junk",
        ]

        result = analytics_service.get_calculation_breakdown(orders)

        assert isinstance(result.data, CalculationBreakdown)
        assert result.data.processed_orders == 1
        assert result.data.skipped_orders == 1
        assert result.data.skipped_items == 1
        assert result.data.total_revenue == Decimal("10")
        assert result.data.warnings == result.meta.warnings
        assert len(result.data.warnings) == 2


class TestFaults:

    def test_decimal_overflow_is_unknown_error(self, analytics_service, sink):
        orders = [make_order(items=[make_item(price=Decimal("9E+999999"), quantity=10)])]

        result = analytics_service.calculate_order_totals(orders)

        assert is_failure(result)
        assert result.error_kind == ErrorKind.UNKNOWN
        assert result.details["operation"] == "calculate_order_totals"
        assert result.details["error_type"] == "Overflow"
        assert "error" in sink.levels()

    def test_unexpected_exception_is_unknown_error(self, settings):
        validator = MagicMock(spec=SchemaValidator)
        validator.validate.side_effect = RuntimeError("boom")
        service = OrderAnalyticsService(settings=settings, validator=validator)

        result = service.get_order_statistics([make_order()])

        assert is_failure(result)
        assert result.error_kind == ErrorKind.UNKNOWN
        assert result.message == "An unexpected error occurred"
        assert result.details["execution_id"]

    def test_each_operation_returns_envelope(self, analytics_service):
        for operation in (
            analytics_service.calculate_order_totals,
            analytics_service.get_order_statistics,
            analytics_service.get_calculation_breakdown,
            analytics_service.get_extended_statistics,
        ):
            assert is_success(operation([make_order(), None, 5]))


class TestConfiguration:

    def test_validation_disabled_accepts_incomplete_records(self):
        service = OrderAnalyticsService(settings=AnalyticsSettings(validation_enabled=False))

        result = service.get_order_statistics([{"id": "x", "items": [make_item(price=7)]}, "junk"])

        assert result.data.total_orders == 1
        assert result.data.total_revenue == Decimal("7")
        assert result.data.status_counts == {"unknown": 1}
        assert result.meta.skipped_count == 1

    def test_require_uuid_ids(self):
        service = OrderAnalyticsService(settings=AnalyticsSettings(require_uuid_ids=True))

        result = service.calculate_order_totals([make_order()])

        assert result.data.total_orders == 0
        assert result.meta.skipped_count == 1


def test_concurrent_calls_are_independent(analytics_service):
    batches = [
        [make_order(id=f"order-{n}", items=[make_item(price=n, quantity=1)])] * n
        for n in range(1, 9)
    ]

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(analytics_service.calculate_order_totals, batches))

    for n, result in zip(range(1, 9), results):
        assert result.data.total_orders == n
        assert result.data.total_revenue == Decimal(n * n)


class TestFailingSink:

    @pytest.fixture
    def service(self, settings):
        return OrderAnalyticsService(settings=settings, sink=BrokenSink())

    @pytest.mark.parametrize(
        "operation",
        [
            "calculate_order_totals",
            "get_order_statistics",
            "get_calculation_breakdown",
            "get_extended_statistics",
        ],
    )
    @pytest.mark.parametrize(
        "orders",
        [None, "junk", [], [make_order(), {"id": "bad"}, make_order(items=[make_item(quantity="x")])]],
    )
    def test_operations_succeed_when_sink_raises(self, service, operation, orders):
        result = getattr(service, operation)(orders)

        assert is_success(result)

    def test_fault_still_returns_failure(self, service):
        orders = [make_order(items=[make_item(price=Decimal("9E+999999"), quantity=10)])]

        result = service.calculate_order_totals(orders)

        assert is_failure(result)
        assert result.error_kind == ErrorKind.UNKNOWN
