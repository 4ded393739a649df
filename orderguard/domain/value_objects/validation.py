"""
Validation findings.

A finding is either blocking (the record or item is unusable) or
advisory (usable, but worth reporting).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


class Severity(str, Enum):
    """How a validation finding affects the record."""

    BLOCKING = "blocking"
    ADVISORY = "advisory"


@dataclass(frozen=True)
class ValidationError:
    """
    Single validation finding.

    `field` may carry a positional path into a nested item,
    e.g. ``items[2].quantity``.
    """
    field: str
    message: str
    value: Any = None
    order_id: Optional[str] = None
    severity: Severity = Severity.BLOCKING

    def describe(self) -> str:
        """Return ``field: message``."""
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one record or item."""

    blocking: Tuple[ValidationError, ...] = ()
    advisory: Tuple[ValidationError, ...] = ()

    @property
    def is_valid(self) -> bool:
        """True when nothing blocks the record."""
        return not self.blocking

    def summary(self) -> str:
        """Join the blocking findings into one line."""
        return "; ".join(error.describe() for error in self.blocking)
