"""Result objects and diagnostic types for charset resolution.

Resolution functions never log directly. They return diagnostic entries that
describe what was tried and what failed, and callers decide how to report them.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Recoverable problems, e.g. unsupported declared charset
    ERROR = auto()      # Failures that were recovered with a fallback


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


def has_severity(
    diagnostics: List[DiagnosticEntry], severity: DiagnosticSeverity
) -> bool:
    """Return True if any entry in ``diagnostics`` has the given severity."""
    return any(entry.severity is severity for entry in diagnostics)
