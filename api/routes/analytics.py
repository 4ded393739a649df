"""
Order analytics endpoints.

Accept an untrusted order collection and return totals or statistics.
Malformed data never produces an HTTP error: the envelope carries the
warnings and skip counts instead.
"""
from collections.abc import Mapping
from typing import Any
import logging

from fastapi import APIRouter, Body, Depends

from api.dependencies import get_analytics_service
from api.responses import envelope_response
from orderguard.application.services import OrderAnalyticsService


logger = logging.getLogger(__name__)
router = APIRouter()


def _orders(body: Any) -> Any:
    # Non-object bodies go to the partitioner as-is and degrade there
    if isinstance(body, Mapping):
        return body.get("orders")
    return body


@router.post(
    "/totals",
    summary="Calculate order totals",
    description="Revenue, item count, order count and average order value",
)
def calculate_totals(
    body: Any = Body(None, description="Raw JSON body, normally {\"orders\": [...]}"),
    service: OrderAnalyticsService = Depends(get_analytics_service),
):
    return envelope_response(service.calculate_order_totals(_orders(body)))


@router.post(
    "/statistics",
    summary="Calculate order statistics",
    description="Totals plus the number of orders per status",
)
def calculate_statistics(
    body: Any = Body(None, description="Raw JSON body, normally {\"orders\": [...]}"),
    service: OrderAnalyticsService = Depends(get_analytics_service),
):
    return envelope_response(service.get_order_statistics(_orders(body)))


@router.post(
    "/breakdown",
    summary="Calculation breakdown",
    description="Totals with processed/skipped counts and every warning",
)
def calculation_breakdown(
    body: Any = Body(None, description="Raw JSON body, normally {\"orders\": [...]}"),
    service: OrderAnalyticsService = Depends(get_analytics_service),
):
    return envelope_response(service.get_calculation_breakdown(_orders(body)))


@router.post(
    "/extended",
    summary="Extended order statistics",
    description="Statistics with status breakdown, top customers and date range",
)
def extended_statistics(
    body: Any = Body(None, description="Raw JSON body, normally {\"orders\": [...]}"),
    service: OrderAnalyticsService = Depends(get_analytics_service),
):
    return envelope_response(service.get_extended_statistics(_orders(body)))
