"""
Logging infrastructure.

Provides logging utilities and the stdlib-backed diagnostic sink.
"""
import logging
from typing import Any, Dict, Optional

from orderguard.application.interfaces import DiagnosticSink


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance.

    Args:
        name: Logger name (usually module name)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


class LoggingDiagnosticSink(DiagnosticSink):
    """
    DiagnosticSink that writes to a stdlib logger.

    The structured payload is appended as ``key=value`` pairs and also
    attached to the record as ``meta``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or get_logger("orderguard")

    def info(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.INFO, message, meta)

    def warn(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.WARNING, message, meta)

    def error(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.ERROR, message, meta)

    def debug(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._emit(logging.DEBUG, message, meta)

    def _emit(self, level: int, message: str, meta: Optional[Dict[str, Any]]) -> None:
        if meta:
            pairs = " ".join(f"{key}={value}" for key, value in meta.items())
            message = f"{message} | {pairs}"
        self._logger.log(level, message, extra={"meta": dict(meta or {})})
