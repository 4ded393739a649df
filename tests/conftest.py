"""Shared fixtures."""

import pytest

from orderguard.application.services import OrderAnalyticsService, SchemaValidator
from orderguard.settings import AnalyticsSettings
from tests.factories import RecordingSink


@pytest.fixture
def validator() -> SchemaValidator:
    return SchemaValidator()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def settings() -> AnalyticsSettings:
    return AnalyticsSettings()


@pytest.fixture
def analytics_service(settings, sink) -> OrderAnalyticsService:
    return OrderAnalyticsService(settings=settings, sink=sink)
