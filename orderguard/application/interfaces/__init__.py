"""Application layer interfaces."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


class DiagnosticSink(ABC):
    """
    Interface for structured diagnostic events.

    The engine only ever talks to this narrow capability, never to a
    concrete logging backend.
    """

    @abstractmethod
    def info(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def warn(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def error(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass

    @abstractmethod
    def debug(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass


class NullDiagnosticSink(DiagnosticSink):
    """Sink used when no diagnostics capability was supplied."""

    def info(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass

    def warn(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass

    def error(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass

    def debug(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        pass


class SafeDiagnosticSink(DiagnosticSink):
    """
    Wraps an injected sink so a failing sink never breaks a caller.

    Sink errors are logged through the module logger and dropped.
    """

    def __init__(self, sink: DiagnosticSink) -> None:
        self._sink = sink

    @property
    def wrapped(self) -> DiagnosticSink:
        return self._sink

    def info(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._deliver("info", message, meta)

    def warn(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._deliver("warn", message, meta)

    def error(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._deliver("error", message, meta)

    def debug(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._deliver("debug", message, meta)

    def _deliver(self, level: str, message: str, meta: Optional[Dict[str, Any]]) -> None:
        try:
            getattr(self._sink, level)(message, meta)
        except Exception as e:
            logger.warning(
                f"Diagnostic sink {type(self._sink).__name__}.{level} failed: "
                f"{type(e).__name__}: {e} (event: {message})"
            )


def resolve_sink(sink: Optional[DiagnosticSink]) -> DiagnosticSink:
    """Return the given sink guarded against failures, or a no-op sink."""
    if sink is None:
        return NullDiagnosticSink()
    if isinstance(sink, (NullDiagnosticSink, SafeDiagnosticSink)):
        return sink
    return SafeDiagnosticSink(sink)
