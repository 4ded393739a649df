"""
Domain exceptions.

Data-quality problems are never raised; they travel as validation
findings and warnings. These exceptions cover the fault tier only.
"""
from typing import List, Optional


class OrderGuardError(Exception):
    """Base class for orderguard faults."""


class StorageError(OrderGuardError):
    """Raised by storage collaborators when a read fails."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class QueryValidationError(OrderGuardError):
    """Raised when caller-supplied query constraints are unusable."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)
