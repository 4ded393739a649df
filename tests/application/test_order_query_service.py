"""Tests for OrderQueryService."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from orderguard.application.dtos import ErrorKind, OrderDTO, OrderStatistics, is_failure, is_success
from orderguard.application.services import OrderQueryService
from orderguard.domain.exceptions import StorageError
from orderguard.domain.repositories import OrderSource
from orderguard.domain.value_objects import OrderQuery
from orderguard.infrastructure.adapters.persistence import InMemoryOrderSource
from orderguard.settings import AnalyticsSettings
from tests.factories import BrokenSink, make_item, make_order, new_uuid


CUSTOMER_A = new_uuid()
CUSTOMER_B = new_uuid()


def _stored_order(customer_id=CUSTOMER_A, **overrides):
    fields = dict(id=new_uuid(), customer_id=customer_id)
    fields.update(overrides)
    return make_order(**fields)


@pytest_asyncio.fixture
async def mock_source():
    """Mock order source."""
    source = AsyncMock(spec=OrderSource)
    source.fetch_orders = AsyncMock(return_value=[])
    source.fetch_order = AsyncMock(return_value=None)
    return source


@pytest.fixture
def stored_orders():
    return [
        _stored_order(status="completed", total_amount=50, created_at="2024-01-01T00:00:00Z",
                      items=[make_item(price=25, quantity=2)]),
        _stored_order(status="pending", total_amount=20, created_at="2024-03-01T00:00:00Z",
                      items=[make_item(price=20, quantity=1)]),
        _stored_order(customer_id=CUSTOMER_B, status="completed", total_amount=5,
                      created_at="2024-02-01T00:00:00Z", items=[make_item(price=5, quantity=1)]),
    ]


@pytest.fixture
def query_service(stored_orders, sink):
    return OrderQueryService(InMemoryOrderSource(stored_orders), settings=AnalyticsSettings(), sink=sink)


class TestGetOrders:

    @pytest.mark.asyncio
    async def test_returns_dtos_sorted_newest_first(self, query_service, stored_orders):
        result = await query_service.get_orders()

        assert is_success(result)
        assert all(isinstance(dto, OrderDTO) for dto in result.data)
        assert [dto.id for dto in result.data] == [
            stored_orders[1]["id"],
            stored_orders[2]["id"],
            stored_orders[0]["id"],
        ]
        assert result.data[2].items[0].subtotal == Decimal("50")

    @pytest.mark.asyncio
    async def test_filters_and_limit(self, query_service):
        result = await query_service.get_orders(
            OrderQuery(customer_id=CUSTOMER_A, status="completed", limit=5, sort_order="asc")
        )

        assert [dto.status for dto in result.data] == ["completed"]
        assert result.data[0].customer_id == CUSTOMER_A

    @pytest.mark.asyncio
    async def test_sort_by_total_amount_ascending(self, query_service):
        result = await query_service.get_orders(OrderQuery(sort_by="total_amount", sort_order="asc", limit=2))

        assert [dto.total_amount for dto in result.data] == [Decimal("5"), Decimal("20")]

    @pytest.mark.asyncio
    async def test_default_limit_is_passed_to_source(self, mock_source):
        service = OrderQueryService(mock_source, settings=AnalyticsSettings(default_limit=25))

        await service.get_orders(OrderQuery())

        query = mock_source.fetch_orders.await_args.args[0]
        assert query.limit == 25

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query, message",
        [
            (OrderQuery(customer_id="cust-1"), "Invalid customer ID format"),
            (OrderQuery(status="shipped"), "Invalid status 'shipped'"),
            (OrderQuery(limit=0), "Limit must be between 1 and 100"),
            (OrderQuery(limit=101), "Limit must be between 1 and 100"),
            (OrderQuery(sort_by="id"), "Invalid sort field 'id'"),
            (OrderQuery(sort_order="up"), "Sort order must be 'asc' or 'desc'"),
        ],
    )
    async def test_invalid_query_is_invalid_input(self, mock_source, query, message):
        service = OrderQueryService(mock_source)

        result = await service.get_orders(query)

        assert is_failure(result)
        assert result.error_kind == ErrorKind.INVALID_INPUT
        assert message in result.message
        mock_source.fetch_orders.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_query_errors_reported_together(self, mock_source):
        service = OrderQueryService(mock_source)

        result = await service.get_orders(OrderQuery(customer_id="x", limit=0))

        assert len(result.details["errors"]) == 2

    @pytest.mark.asyncio
    async def test_storage_error_is_database_error(self, mock_source, sink):
        mock_source.fetch_orders.side_effect = StorageError("connection refused", code="OperationalError")
        service = OrderQueryService(mock_source, sink=sink)

        result = await service.get_orders()

        assert is_failure(result)
        assert result.error_kind == ErrorKind.DATABASE
        assert result.message == "Database error: connection refused"
        assert result.details["code"] == "OperationalError"
        assert "error" in sink.levels()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_unknown_error(self, mock_source):
        mock_source.fetch_orders.side_effect = KeyError("rows")
        service = OrderQueryService(mock_source)

        result = await service.get_orders()

        assert result.error_kind == ErrorKind.UNKNOWN
        assert result.message == "An unexpected error occurred"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rows", [None, "rows", {"id": "x"}])
    async def test_absent_or_malformed_rows_are_empty_success(self, mock_source, rows):
        mock_source.fetch_orders.return_value = rows
        service = OrderQueryService(mock_source)

        result = await service.get_orders()

        assert is_success(result)
        assert result.data == []
        assert len(result.meta.warnings) == 1

    @pytest.mark.asyncio
    async def test_invalid_rows_are_skipped(self, mock_source):
        good = _stored_order()
        mock_source.fetch_orders.return_value = [good, make_order(id="legacy-1"), None]
        service = OrderQueryService(mock_source)

        result = await service.get_orders()

        assert [dto.id for dto in result.data] == [good["id"]]
        assert result.meta.skipped_count == 2

    @pytest.mark.asyncio
    async def test_bad_items_are_dropped_from_dto(self, mock_source):
        mock_source.fetch_orders.return_value = [
            _stored_order(items=[make_item(), make_item(id="bad", price="x")])
        ]
        service = OrderQueryService(mock_source)

        result = await service.get_orders()

        assert len(result.data[0].items) == 1
        assert result.data[0].skipped_items == 1


class TestGetOrderById:

    @pytest.mark.asyncio
    async def test_found(self, query_service, stored_orders):
        order_id = stored_orders[0]["id"]

        result = await query_service.get_order_by_id(order_id)

        assert is_success(result)
        assert result.data.id == order_id
        assert result.message == "Order retrieved successfully"

    @pytest.mark.asyncio
    async def test_not_found_is_success_with_no_data(self, query_service):
        result = await query_service.get_order_by_id(new_uuid())

        assert is_success(result)
        assert result.data is None
        assert result.message == "Order not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "order_id, message",
        [("", "Order ID is required"), ("   ", "Order ID is required"), (None, "Order ID is required"),
         ("order-1", "Invalid order ID format")],
    )
    async def test_bad_id_is_invalid_input(self, mock_source, order_id, message):
        service = OrderQueryService(mock_source)

        result = await service.get_order_by_id(order_id)

        assert result.error_kind == ErrorKind.INVALID_INPUT
        assert result.message == message
        mock_source.fetch_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_row_is_success_with_skip(self, mock_source):
        order_id = new_uuid()
        mock_source.fetch_order.return_value = {"id": order_id, "status": "pending"}
        service = OrderQueryService(mock_source)

        result = await service.get_order_by_id(order_id)

        assert is_success(result)
        assert result.data is None
        assert result.meta.skipped_count == 1
        assert result.meta.warnings

    @pytest.mark.asyncio
    async def test_storage_error(self, mock_source):
        mock_source.fetch_order.side_effect = StorageError("timeout")
        service = OrderQueryService(mock_source)

        result = await service.get_order_by_id(new_uuid())

        assert result.error_kind == ErrorKind.DATABASE
        assert result.message == "Database error: timeout"


class TestGetOrderStats:

    @pytest.mark.asyncio
    async def test_stats_over_stored_orders(self, query_service):
        result = await query_service.get_order_stats()

        assert isinstance(result.data, OrderStatistics)
        assert result.data.total_orders == 3
        assert result.data.total_revenue == Decimal("75")
        assert result.data.status_counts == {"pending": 1, "completed": 2}

    @pytest.mark.asyncio
    async def test_stats_for_one_customer(self, query_service):
        result = await query_service.get_order_stats(OrderQuery(customer_id=CUSTOMER_B))

        assert result.data.total_orders == 1
        assert result.data.total_revenue == Decimal("5")

    @pytest.mark.asyncio
    async def test_no_rows(self, mock_source):
        service = OrderQueryService(mock_source)

        result = await service.get_order_stats()

        assert result.message == "No valid orders found"
        assert result.data.total_orders == 0


class TestFailingSink:

    @pytest.mark.asyncio
    async def test_storage_error_with_failing_sink(self, mock_source):
        mock_source.fetch_orders.side_effect = StorageError("down")
        service = OrderQueryService(mock_source, sink=BrokenSink())

        result = await service.get_orders()

        assert result.error_kind == ErrorKind.DATABASE

    @pytest.mark.asyncio
    async def test_unexpected_error_with_failing_sink(self, mock_source):
        mock_source.fetch_order.side_effect = ValueError("bad row")
        service = OrderQueryService(mock_source, sink=BrokenSink())

        result = await service.get_order_by_id(new_uuid())

        assert result.error_kind == ErrorKind.UNKNOWN

    @pytest.mark.asyncio
    async def test_degraded_rows_with_failing_sink(self, mock_source):
        mock_source.fetch_orders.return_value = None
        service = OrderQueryService(mock_source, sink=BrokenSink())

        result = await service.get_order_stats()

        assert is_success(result)
        assert result.data.total_orders == 0
