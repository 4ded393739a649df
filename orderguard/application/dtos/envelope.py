"""
Result envelope returned by every public operation.

Malformed data is never a Failure: it comes back as a (possibly zeroed)
Success carrying warnings and skip counts. Failure is reserved for faults.
"""

from enum import Enum
from typing import Any, Dict, Generic, Literal, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Closed set of failure classifications."""

    VALIDATION = "validation_error"
    DATABASE = "database_error"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown_error"


class EnvelopeMeta(BaseModel):
    """Provenance of a successful result."""

    processed_count: int = Field(default=0, ge=0, description="Records that reached aggregation")
    skipped_count: int = Field(default=0, ge=0, description="Records rejected by validation")
    warnings: Tuple[str, ...] = Field(default=(), description="Accumulated advisory messages")
    execution_id: Optional[str] = Field(None, description="Execution ID for tracing")

    model_config = {"frozen": True}


class Success(BaseModel, Generic[T]):
    """Successful (possibly degraded) outcome."""

    success: Literal[True] = True
    data: T
    message: str = Field(default="", description="Human-readable summary")
    meta: EnvelopeMeta = Field(default_factory=EnvelopeMeta)

    model_config = {"frozen": True}


class Failure(BaseModel):
    """Faulted outcome with a classified error kind."""

    success: Literal[False] = False
    error_kind: ErrorKind
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


ResultEnvelope = Union[Success[T], Failure]


def is_success(envelope: Union[Success[Any], Failure]) -> bool:
    """Check if envelope is a Success."""
    return envelope.success is True


def is_failure(envelope: Union[Success[Any], Failure]) -> bool:
    """Check if envelope is a Failure."""
    return envelope.success is False
