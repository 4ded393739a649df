"""
Orders endpoints.

Read-only access to stored orders. Query constraints are checked by the
service, so bad filters come back as 400 envelopes rather than 422s.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_order_query_service
from api.responses import envelope_response
from orderguard.application.services import OrderQueryService
from orderguard.domain.value_objects import OrderQuery


logger = logging.getLogger(__name__)
router = APIRouter()


def _build_query(
    customer_id: Optional[str] = Query(None, description="Filter by customer ID (UUID)"),
    status: Optional[str] = Query(None, description="Filter by order status"),
    limit: Optional[int] = Query(None, description="Maximum number of orders to return"),
    sort_by: str = Query("created_at", description="created_at, updated_at or total_amount"),
    sort_order: str = Query("desc", description="asc or desc"),
) -> OrderQuery:
    return OrderQuery(
        customer_id=customer_id,
        status=status,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


# =============================================================================
# LIST ORDERS
# =============================================================================

@router.get(
    "",
    summary="List orders",
    description="List stored orders that pass validation",
)
async def list_orders(
    query: OrderQuery = Depends(_build_query),
    service: OrderQueryService = Depends(get_order_query_service),
):
    return envelope_response(await service.get_orders(query))


# =============================================================================
# ORDER STATISTICS
# =============================================================================

@router.get(
    "/stats",
    summary="Order statistics",
    description="Totals and status counts over stored orders",
)
async def order_stats(
    query: OrderQuery = Depends(_build_query),
    service: OrderQueryService = Depends(get_order_query_service),
):
    return envelope_response(await service.get_order_stats(query))


# =============================================================================
# GET ORDER BY ID
# =============================================================================

@router.get(
    "/{order_id}",
    summary="Get order by ID",
    description="Fetch one stored order; a missing order is a 200 with null data",
)
async def get_order(
    order_id: str,
    service: OrderQueryService = Depends(get_order_query_service),
):
    return envelope_response(await service.get_order_by_id(order_id))
