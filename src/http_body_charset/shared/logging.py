"""Structured logging utilities for charset resolution.

Provides a correlation-aware logger and the adapter that turns diagnostic
entries produced by the resolution pipeline into log lines.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from .result import DiagnosticEntry, DiagnosticSeverity


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID, e.g. the message being processed
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message with correlation info."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def report_diagnostics(
    diagnostics: Iterable[DiagnosticEntry], logger: CorrelationLogger
) -> int:
    """Write diagnostic entries to ``logger`` at their matching level.

    Entry details are passed through as logging ``extra`` along with the
    component that produced the entry.

    Returns:
        Number of entries reported
    """
    log_methods = {
        DiagnosticSeverity.DEBUG: logger.debug,
        DiagnosticSeverity.INFO: logger.info,
        DiagnosticSeverity.WARNING: logger.warning,
        DiagnosticSeverity.ERROR: logger.error,
    }

    count = 0
    for entry in diagnostics:
        extra: Dict[str, Any] = {"diagnostic_component": entry.component}
        if entry.details:
            extra.update(entry.details)
        log_methods[entry.severity](entry.message, extra=extra)
        count += 1
    return count
