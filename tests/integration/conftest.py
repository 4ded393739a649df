"""Pytest configuration and fixtures for integration tests."""

from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from api.dependencies import get_analytics_service, get_order_query_service
from api.main import app
from orderguard.application.services import OrderAnalyticsService, OrderQueryService
from orderguard.infrastructure.adapters.persistence import InMemoryOrderSource
from orderguard.infrastructure.database import (
    Base,
    OrderItemModel,
    OrderModel,
    get_session_factory,
)
from orderguard.settings import AnalyticsSettings
from tests.factories import make_item, make_order, new_uuid


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Create test session factory."""
    yield get_session_factory(test_engine)


@pytest_asyncio.fixture
async def seeded_orders(test_session_factory):
    """Insert three orders (one with a bad status) and return their IDs."""
    customer_id = new_uuid()
    ids = [new_uuid(), new_uuid(), new_uuid()]

    async with test_session_factory() as session:
        session.add_all([
            OrderModel(
                id=ids[0],
                customer_id=customer_id,
                total_amount=Decimal("100.00"),
                status="completed",
                created_at=datetime(2024, 1, 10, 9, 0),
                items=[
                    OrderItemModel(id="item-1", product_id="prod-1", quantity=Decimal("2"), price=Decimal("30.00"), position=0),
                    OrderItemModel(id="item-2", product_id="prod-2", quantity=Decimal("1"), price=Decimal("40.00"), position=1),
                ],
            ),
            OrderModel(
                id=ids[1],
                customer_id=customer_id,
                total_amount=Decimal("15.00"),
                status="pending",
                created_at=datetime(2024, 2, 10, 9, 0),
                items=[
                    OrderItemModel(id="item-3", product_id="prod-3", quantity=Decimal("3"), price=Decimal("5.00"), position=0),
                ],
            ),
            OrderModel(
                id=ids[2],
                customer_id=new_uuid(),
                total_amount=Decimal("10.00"),
                status="lost",
                created_at=datetime(2024, 3, 10, 9, 0),
                items=[],
            ),
        ])
        await session.commit()

    return {"customer_id": customer_id, "ids": ids}


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def stored_orders():
    customer_id = new_uuid()
    return [
        make_order(id=new_uuid(), customer_id=customer_id, status="completed",
                   created_at="2024-01-01T00:00:00Z", items=[make_item(price=10, quantity=2)]),
        make_order(id=new_uuid(), customer_id=customer_id, status="pending",
                   created_at="2024-02-01T00:00:00Z", items=[make_item(price=5, quantity=1)]),
        make_order(id="not-a-uuid", customer_id=customer_id),
    ]


@pytest.fixture
def order_source(stored_orders):
    return InMemoryOrderSource(stored_orders)


@pytest.fixture
def test_client(order_source) -> TestClient:
    """Create FastAPI test client with in-memory order storage."""
    settings = AnalyticsSettings()

    app.dependency_overrides[get_analytics_service] = lambda: OrderAnalyticsService(settings=settings)
    app.dependency_overrides[get_order_query_service] = lambda: OrderQueryService(
        order_source, settings=settings
    )

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
