"""Shared utilities for charset resolution.

This module provides configuration objects, diagnostic result types and
logging helpers used across the character and body layers.
"""

from .config import (
    CharsetConfig,
    ConfigError,
    ConfigValidationError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    report_diagnostics,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    has_severity,
)

__all__ = [
    "CharsetConfig",
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "get_logger",
    "report_diagnostics",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "has_severity",
]
