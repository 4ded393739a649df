"""
Order Status Enum.

Lifecycle values an order can carry.
"""
from enum import Enum
from typing import Tuple


class OrderStatus(str, Enum):
    """Order lifecycle status values."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        """Return the raw status strings in declaration order."""
        return tuple(member.value for member in cls)


# Bucket for orders whose status could not be determined
UNKNOWN_STATUS = "unknown"
