"""Order query value object."""
from dataclasses import dataclass
from typing import Optional


SORTABLE_FIELDS = ("created_at", "updated_at", "total_amount")
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class OrderQuery:
    """
    Caller-supplied constraints for reading orders from storage.

    Values are kept exactly as supplied; the query service checks them
    before anything reaches the storage collaborator.
    """
    customer_id: Optional[str] = None
    status: Optional[str] = None
    limit: Optional[int] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"

    @property
    def descending(self) -> bool:
        return self.sort_order == "desc"
