"""
Order entities.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi

Instances are only ever built by the schema validator, which is the single
place that turns raw mappings into these types.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class OrderItem:
    """Individual line item within an order."""
    id: str
    product_id: str
    quantity: Decimal
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        """quantity x price, taken as given (no clamping)."""
        return self.quantity * self.price


@dataclass(frozen=True)
class Order:
    """
    Order accepted by validation.

    `items` keeps the raw item payloads; each one is checked again
    during aggregation so a bad item never invalidates its order.
    `total_amount` is informational only, revenue is recomputed from items.
    """
    id: str
    customer_id: str
    total_amount: Decimal
    status: str
    items: Tuple[Any, ...] = ()
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def created_at_datetime(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into an aware datetime.

    Naive values are assumed to be UTC. Returns None for anything that
    is not a parseable string.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
