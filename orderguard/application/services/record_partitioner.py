"""
Record partitioning.

Splits an untrusted collection into accepted orders and a skip count.
Absent or wrongly-typed input is a normal outcome (zero accepted orders),
never an error.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from orderguard.application.interfaces import DiagnosticSink, resolve_sink
from orderguard.application.services.schema_validator import SchemaValidator
from orderguard.domain.entities import Order

MISSING_COLLECTION_WARNING = "Orders array was undefined or null"
NOT_A_LIST_WARNING = "Orders input is not an array"


@dataclass(frozen=True)
class PartitionResult:
    """Accepted orders (input order preserved) plus rejection bookkeeping."""

    accepted: Tuple[Order, ...] = ()
    skipped_count: int = 0
    warnings: Tuple[str, ...] = ()

    @property
    def processed_count(self) -> int:
        return len(self.accepted)


def describe_position(record: Any, index: int) -> str:
    """Name a record by its declared id, falling back to its index."""
    if isinstance(record, Mapping):
        order_id = record.get("id")
        if isinstance(order_id, str) and order_id.strip():
            return order_id
    return f"at index {index}"


class RecordPartitioner:
    """Runs each element through the validator and partitions the input."""

    def __init__(
        self,
        validator: SchemaValidator,
        validation_enabled: bool = True,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self._validator = validator
        self._validation_enabled = validation_enabled
        self._sink = resolve_sink(sink)

    def partition(self, raw: Any) -> PartitionResult:
        """Partition a raw collection.

        Args:
            raw: Whatever the caller or storage supplied (may be None)

        Returns:
            PartitionResult; never raises for bad data
        """
        if raw is None:
            self._sink.warn(MISSING_COLLECTION_WARNING)
            return PartitionResult(warnings=(MISSING_COLLECTION_WARNING,))

        if not isinstance(raw, (list, tuple)):
            self._sink.warn(NOT_A_LIST_WARNING, {"received_type": type(raw).__name__})
            return PartitionResult(warnings=(NOT_A_LIST_WARNING,))

        accepted: List[Order] = []
        warnings: List[str] = []
        skipped = 0

        for index, record in enumerate(raw):
            position = describe_position(record, index)

            if not self._validation_enabled:
                if isinstance(record, Mapping):
                    accepted.append(self._validator.coerce(record))
                else:
                    skipped += 1
                    warnings.append(f"Skipped malformed order {position}: not a record")
                continue

            outcome = self._validator.validate(record)

            if not outcome.is_valid:
                skipped += 1
                warnings.append(f"Skipped invalid order {position}: {outcome.summary()}")
                self._sink.warn(
                    "Skipped invalid order",
                    {"position": position, "blocking": len(outcome.blocking)},
                )
                continue

            for issue in outcome.advisory:
                warnings.append(f"Order {position}: {issue.message} ({issue.field})")

            accepted.append(self._validator.narrow(record))

        self._sink.debug(
            "Partition complete",
            {"accepted": len(accepted), "skipped": skipped, "warnings": len(warnings)},
        )

        return PartitionResult(
            accepted=tuple(accepted),
            skipped_count=skipped,
            warnings=tuple(warnings),
        )
