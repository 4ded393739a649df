"""
Schema validation for raw order records.

Every field rule runs independently, so one pass reports every defect of a
record. No rule raises: unexpected shapes become blocking findings.

This module is also the only place that turns raw mappings into the typed
Order / OrderItem entities.
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from orderguard.domain.entities import Order, OrderItem, parse_timestamp
from orderguard.domain.enums import UNKNOWN_STATUS, OrderStatus
from orderguard.domain.value_objects import Severity, ValidationError, ValidationOutcome

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

DEFAULT_MAX_TOTAL_AMOUNT = Decimal("999999.99")


def is_uuid(value: Any) -> bool:
    """Check if value is a UUID-shaped string."""
    return isinstance(value, str) and UUID_PATTERN.match(value) is not None


def number_problem(value: Any) -> Optional[str]:
    """Describe why value is not a usable finite number, or None if it is."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return "must be a number"
    if isinstance(value, float) and not math.isfinite(value):
        return "must be finite"
    if isinstance(value, Decimal) and not value.is_finite():
        return "must be finite"
    return None


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a finite number to Decimal (floats via str, never binary)."""
    if number_problem(value) is not None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(str(value))


@dataclass(frozen=True)
class OrderSchema:
    """Field rules applied to orders and their items."""

    require_uuid_ids: bool = False
    max_total_amount: Decimal = DEFAULT_MAX_TOTAL_AMOUNT
    allowed_statuses: Tuple[str, ...] = field(default_factory=OrderStatus.values)

    @classmethod
    def from_settings(cls, settings: Any, require_uuid_ids: Optional[bool] = None) -> "OrderSchema":
        """Build a schema from AnalyticsSettings."""
        return cls(
            require_uuid_ids=settings.require_uuid_ids if require_uuid_ids is None else require_uuid_ids,
            max_total_amount=settings.max_total_amount,
        )


class SchemaValidator:
    """
    Validates raw orders and items against an OrderSchema.

    Stateless; one instance can be shared by concurrent callers.
    """

    def __init__(self, schema: Optional[OrderSchema] = None) -> None:
        self._schema = schema or OrderSchema()

    @property
    def schema(self) -> OrderSchema:
        return self._schema

    # =========================================================================
    # ORDERS
    # =========================================================================

    def validate(self, record: Any) -> ValidationOutcome:
        """Validate one raw order record.

        Args:
            record: Anything the caller supplied as an order

        Returns:
            ValidationOutcome with blocking and advisory findings
        """
        if not isinstance(record, Mapping):
            return ValidationOutcome(
                blocking=(
                    ValidationError(
                        field="order",
                        message="Missing or malformed order record",
                        value=type(record).__name__,
                    ),
                )
            )

        raw_id = record.get("id")
        order_id = raw_id if isinstance(raw_id, str) and raw_id else None
        blocking: List[ValidationError] = []
        advisory: List[ValidationError] = []

        self._check_identifier(
            record, "id", "Order ID is required", "Invalid order ID format", order_id, blocking
        )
        self._check_identifier(
            record, "customer_id", "Customer ID is required", "Invalid customer ID format", order_id, blocking
        )
        self._check_total(record, order_id, blocking, advisory)
        self._check_status(record, order_id, blocking)
        self._check_timestamps(record, order_id, advisory)
        self._check_items(record, order_id, blocking, advisory)

        return ValidationOutcome(blocking=tuple(blocking), advisory=tuple(advisory))

    def narrow(self, record: Mapping) -> Order:
        """Convert a record that passed validate() into an Order."""
        return Order(
            id=record["id"],
            customer_id=record["customer_id"],
            total_amount=to_decimal(record["total_amount"]),
            status=record["status"],
            items=_copy_items(record["items"]),
            created_at=_optional_text(record.get("created_at")),
            updated_at=_optional_text(record.get("updated_at")),
        )

    def coerce(self, record: Mapping) -> Order:
        """Leniently convert any mapping into an Order (validation disabled).

        Unusable fields fall back to empty strings, zero, no items and
        the unknown status.
        """
        status = record.get("status")
        items = record.get("items")
        return Order(
            id=_text(record.get("id")),
            customer_id=_text(record.get("customer_id")),
            total_amount=to_decimal(record.get("total_amount")) or Decimal("0"),
            status=status if isinstance(status, str) and status else UNKNOWN_STATUS,
            items=_copy_items(items) if isinstance(items, (list, tuple)) else (),
            created_at=_optional_text(record.get("created_at")),
            updated_at=_optional_text(record.get("updated_at")),
        )

    # =========================================================================
    # ITEMS
    # =========================================================================

    def validate_item(
        self,
        item: Any,
        path: str = "item",
        order_id: Optional[str] = None,
    ) -> ValidationOutcome:
        """Validate one raw order item.

        Args:
            item: Raw item payload
            path: Field path prefix, e.g. ``items[2]``
            order_id: Owning order ID, if known

        Returns:
            ValidationOutcome; zero/negative quantity and negative price
            are advisory only
        """
        if not isinstance(item, Mapping):
            return ValidationOutcome(
                blocking=(
                    ValidationError(
                        field=path,
                        message="Missing or malformed item record",
                        value=type(item).__name__,
                        order_id=order_id,
                    ),
                )
            )

        blocking: List[ValidationError] = []
        advisory: List[ValidationError] = []

        for key, label in (("id", "Item ID"), ("product_id", "Product ID")):
            value = item.get(key)
            if not isinstance(value, str) or not value.strip():
                blocking.append(
                    ValidationError(f"{path}.{key}", f"{label} is required", value, order_id)
                )

        quantity = item.get("quantity")
        problem = number_problem(quantity)
        if problem:
            blocking.append(
                ValidationError(f"{path}.quantity", f"Item quantity {problem}", quantity, order_id)
            )
        elif to_decimal(quantity) <= 0:
            advisory.append(
                ValidationError(
                    f"{path}.quantity",
                    "Item quantity is zero or negative",
                    quantity,
                    order_id,
                    Severity.ADVISORY,
                )
            )

        price = item.get("price")
        problem = number_problem(price)
        if problem:
            blocking.append(
                ValidationError(f"{path}.price", f"Item price {problem}", price, order_id)
            )
        elif to_decimal(price) < 0:
            advisory.append(
                ValidationError(
                    f"{path}.price", "Item price is negative", price, order_id, Severity.ADVISORY
                )
            )

        return ValidationOutcome(blocking=tuple(blocking), advisory=tuple(advisory))

    def narrow_item(self, item: Mapping) -> OrderItem:
        """Convert an item that passed validate_item() into an OrderItem."""
        return OrderItem(
            id=item["id"],
            product_id=item["product_id"],
            quantity=to_decimal(item["quantity"]),
            price=to_decimal(item["price"]),
        )

    # =========================================================================
    # FIELD RULES
    # =========================================================================

    def _check_identifier(
        self,
        record: Mapping,
        key: str,
        required_message: str,
        format_message: str,
        order_id: Optional[str],
        blocking: List[ValidationError],
    ) -> None:
        value = record.get(key)
        if not isinstance(value, str) or not value.strip():
            blocking.append(ValidationError(key, required_message, value, order_id))
        elif self._schema.require_uuid_ids and not is_uuid(value):
            blocking.append(ValidationError(key, format_message, value, order_id))

    def _check_total(
        self,
        record: Mapping,
        order_id: Optional[str],
        blocking: List[ValidationError],
        advisory: List[ValidationError],
    ) -> None:
        value = record.get("total_amount")
        if value is None:
            blocking.append(ValidationError("total_amount", "Total amount is required", value, order_id))
            return

        problem = number_problem(value)
        if problem:
            blocking.append(ValidationError("total_amount", f"Total amount {problem}", value, order_id))
            return

        amount = to_decimal(value)
        if amount > self._schema.max_total_amount:
            blocking.append(
                ValidationError(
                    "total_amount",
                    f"Total amount exceeds maximum of {self._schema.max_total_amount}",
                    value,
                    order_id,
                )
            )
        if amount < 0:
            advisory.append(
                ValidationError(
                    "total_amount", "Total amount is negative", value, order_id, Severity.ADVISORY
                )
            )

    def _check_status(
        self,
        record: Mapping,
        order_id: Optional[str],
        blocking: List[ValidationError],
    ) -> None:
        value = record.get("status")
        if value is None:
            blocking.append(ValidationError("status", "Status is required", value, order_id))
        elif not isinstance(value, str) or value not in self._schema.allowed_statuses:
            blocking.append(
                ValidationError(
                    "status",
                    f"Invalid status {value!r}, expected one of: "
                    f"{', '.join(self._schema.allowed_statuses)}",
                    value,
                    order_id,
                )
            )

    def _check_timestamps(
        self,
        record: Mapping,
        order_id: Optional[str],
        advisory: List[ValidationError],
    ) -> None:
        for key, label in (("created_at", "Created"), ("updated_at", "Updated")):
            value = record.get(key)
            if value is not None and parse_timestamp(value) is None:
                advisory.append(
                    ValidationError(
                        key,
                        f"{label} timestamp is not a valid ISO-8601 value",
                        value,
                        order_id,
                        Severity.ADVISORY,
                    )
                )

    def _check_items(
        self,
        record: Mapping,
        order_id: Optional[str],
        blocking: List[ValidationError],
        advisory: List[ValidationError],
    ) -> None:
        items = record.get("items")
        if items is None:
            blocking.append(ValidationError("items", "Items are required", items, order_id))
            return
        if not isinstance(items, (list, tuple)):
            blocking.append(ValidationError("items", "Items must be a list", items, order_id))
            return

        # Structurally broken items are reported during aggregation,
        # only their advisories surface here.
        for index, item in enumerate(items):
            outcome = self.validate_item(item, path=f"items[{index}]", order_id=order_id)
            if outcome.is_valid:
                advisory.extend(outcome.advisory)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _copy_items(items: Any) -> Tuple[Any, ...]:
    return tuple(dict(item) if isinstance(item, Mapping) else item for item in items)
