"""Application DTOs for Order reads."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    id: str = Field(..., description="Item ID")
    product_id: str = Field(..., description="Referenced product ID")
    quantity: Decimal = Field(..., description="Quantity ordered")
    price: Decimal = Field(..., description="Unit price")
    subtotal: Decimal = Field(..., description="quantity x price")

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: str = Field(..., description="Order ID")
    customer_id: str = Field(..., description="Owning customer ID")
    total_amount: Decimal = Field(..., description="Stored order total (informational)")
    status: str = Field(..., description="Order status")
    items: List[OrderItemDTO] = Field(default_factory=list, description="Structurally valid items")
    skipped_items: int = Field(default=0, ge=0, description="Items dropped as malformed")
    created_at: Optional[str] = Field(None, description="Creation timestamp")
    updated_at: Optional[str] = Field(None, description="Last update timestamp")

    model_config = {"frozen": True}
