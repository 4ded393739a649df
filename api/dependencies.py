"""
FastAPI Dependencies.

Provides dependency injection for the analytics and order query services.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from sqlalchemy.ext.asyncio import AsyncEngine

from orderguard.application.interfaces import DiagnosticSink
from orderguard.application.services import OrderAnalyticsService, OrderQueryService
from orderguard.domain.repositories import OrderSource
from orderguard.infrastructure.database import SqlAlchemyOrderSource, create_engine, get_session_factory
from orderguard.infrastructure.logging import LoggingDiagnosticSink
from orderguard.settings import get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_diagnostic_sink: Optional[DiagnosticSink] = None
_analytics_service: Optional[OrderAnalyticsService] = None
_database_engine: Optional[AsyncEngine] = None
_order_source: Optional[OrderSource] = None
_order_query_service: Optional[OrderQueryService] = None


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_diagnostic_sink() -> DiagnosticSink:
    global _diagnostic_sink
    if _diagnostic_sink is None:
        _diagnostic_sink = LoggingDiagnosticSink()
        logger.info("Created LoggingDiagnosticSink instance")
    return _diagnostic_sink


def get_analytics_service() -> OrderAnalyticsService:
    global _analytics_service
    if _analytics_service is None:
        settings = get_app_settings()
        _analytics_service = OrderAnalyticsService(
            settings=settings.analytics,
            sink=get_diagnostic_sink(),
        )
        logger.info(
            f"Created OrderAnalyticsService "
            f"(validation_enabled={settings.analytics.validation_enabled})"
        )
    return _analytics_service


def get_database_engine() -> AsyncEngine:
    global _database_engine
    if _database_engine is None:
        _database_engine = create_engine(get_app_settings().database)
    return _database_engine


def get_order_source() -> OrderSource:
    global _order_source
    if _order_source is None:
        _order_source = SqlAlchemyOrderSource(get_session_factory(get_database_engine()))
        logger.info("Created SqlAlchemyOrderSource instance")
    return _order_source


def get_order_query_service() -> OrderQueryService:
    global _order_query_service
    if _order_query_service is None:
        _order_query_service = OrderQueryService(
            source=get_order_source(),
            settings=get_app_settings().analytics,
            sink=get_diagnostic_sink(),
        )
        logger.info("Created OrderQueryService instance")
    return _order_query_service


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _diagnostic_sink, _analytics_service, _database_engine
    global _order_source, _order_query_service

    _diagnostic_sink = None
    _analytics_service = None
    _database_engine = None
    _order_source = None
    _order_query_service = None

    logger.info("Dependencies reset")
