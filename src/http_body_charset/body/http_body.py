"""HTTP message bodies that materialize their bytes as text.

A body holds raw bytes and optionally an explicit charset, e.g. one taken from
the ``Content-Type`` header. When there is no explicit charset the body asks
its resolution strategy for one the first time it is turned into text, and
remembers the answer so later materializations skip detection.
"""

import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Union

from ..character.encoding import (
    DetectionMethod,
    UnsupportedCharsetError,
    lookup_charset,
)
from ..character.resolution import (
    CharsetResolutionStrategy,
    DefaultCharsetStrategy,
    MetaCharsetStrategy,
    ResolutionOutcome,
)
from ..shared.config import CharsetConfig
from ..shared.logging import get_logger, report_diagnostics
from ..shared.result import DiagnosticEntry, DiagnosticSeverity

BodyContents = Union[bytes, bytearray, memoryview, str, None]


def charset_from_content_type(content_type: Optional[str]) -> Optional[str]:
    """Extract the ``charset`` parameter from a Content-Type header value.

    Args:
        content_type: Header value, e.g. ``'text/html; charset="UTF-8"'``

    Returns:
        The charset name without quotes, or None if absent or empty
    """
    if not content_type:
        return None

    for param in content_type.split(";")[1:]:
        name, sep, value = param.partition("=")
        if sep and name.strip().lower() == "charset":
            value = value.strip().strip("\"'").strip()
            return value or None
    return None


class ByteBody(ABC):
    """Contract a body offers to charset resolution."""

    @abstractmethod
    def raw_bytes(self) -> bytes:
        """The full body content."""

    @abstractmethod
    def get_explicit_charset(self) -> Optional[str]:
        """Charset known from outside resolution, e.g. a transport header."""

    @abstractmethod
    def set_resolved_charset(self, charset: Optional[str]) -> None:
        """Remember a resolved charset for later materializations."""

    @abstractmethod
    def default_charset(self) -> str:
        """Single-byte reference encoding used when nothing else applies."""


class HttpBody(ByteBody):
    """In-memory HTTP message body with lazy, cached charset resolution.

    The resolved charset and cached text are the only mutable state shared
    between readers. They are written under a lock, and a resolution that
    raced with a content change is discarded instead of cached. Concurrent
    materializations of the same contents may both run detection; they
    compute the same result.
    """

    def __init__(
        self,
        contents: BodyContents = None,
        charset: Optional[str] = None,
        strategy: Optional[CharsetResolutionStrategy] = None,
        config: Optional[CharsetConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize body.

        Args:
            contents: Raw bytes, or text to encode (see ``set_text``)
            charset: Explicit charset, bypasses resolution when set
            strategy: Resolution strategy, defaults to no detection
            config: Charset configuration
            correlation_id: Optional correlation ID for log records
        """
        self.config = config or CharsetConfig()
        self.strategy = strategy or DefaultCharsetStrategy()
        self.logger = get_logger(__name__, correlation_id, "http_body")

        self._lock = threading.Lock()
        self._contents = b""
        self._version = 0
        self._explicit_charset: Optional[str] = None
        self._resolved_charset: Optional[str] = None
        self._outcome: Optional[ResolutionOutcome] = None

        if charset:
            self.set_charset(charset)
        if isinstance(contents, str):
            self.set_text(contents)
        elif contents is not None:
            self.set_bytes(contents)

    @classmethod
    def response(
        cls,
        contents: BodyContents = None,
        charset: Optional[str] = None,
        config: Optional[CharsetConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> "HttpBody":
        """Create a body that detects meta charset declarations and UTF-8."""
        return cls(
            contents,
            charset=charset,
            strategy=MetaCharsetStrategy(config),
            config=config,
            correlation_id=correlation_id,
        )

    # ByteBody contract

    def raw_bytes(self) -> bytes:
        return self._contents

    def get_explicit_charset(self) -> Optional[str]:
        return self._explicit_charset

    def set_resolved_charset(self, charset: Optional[str]) -> None:
        """Remember a resolved charset, ``None`` forgets it.

        Unsupported names are logged and leave the current charset unchanged.
        """
        try:
            canonical = self._canonical_charset(charset)
        except UnsupportedCharsetError as e:
            self._warn_unsupported(charset, e)
            return

        with self._lock:
            if canonical != self._resolved_charset:
                self._resolved_charset = canonical
                self._invalidate()

    def default_charset(self) -> str:
        return self.config.default_charset

    # Contents

    def set_bytes(self, data: Union[bytes, bytearray, memoryview, None]) -> None:
        """Replace the contents, forgetting any resolved charset."""
        with self._lock:
            self._contents = bytes(data) if data is not None else b""
            self._resolved_charset = None
            self._invalidate()

    def set_text(self, text: Optional[str]) -> None:
        """Replace the contents with encoded ``text``.

        The explicit or resolved charset is used if there is one. Otherwise the
        strategy is asked which charset the text declares or plausibly uses,
        and the default charset is used if it has no answer. Characters the
        chosen charset cannot represent are replaced.
        """
        text = text or ""
        with self._lock:
            resolved = self._resolved_charset
            charset = self._explicit_charset or resolved

        if charset is None:
            detection = self.strategy.resolve_from_decoded_text(text)
            self._report(detection.diagnostics)
            charset = resolved = detection.charset

        try:
            data = text.encode(charset or self.default_charset(), errors="replace")
        except (LookupError, ValueError) as e:
            self.logger.error(
                f"Unable to encode with charset {charset}: {e}",
                extra={"charset_name": charset, "reason": str(e)},
            )
            self.logger.info(f"Using default charset: {self.default_charset()}")
            data = text.encode(self.default_charset(), errors="replace")
            resolved = None
        with self._lock:
            self._contents = data
            self._resolved_charset = resolved
            self._invalidate()

    def get_charset(self) -> Optional[str]:
        """Explicit charset if set, else the resolved one, else None."""
        return self._explicit_charset or self._resolved_charset

    def set_charset(self, charset: Optional[str]) -> None:
        """Set the explicit charset.

        ``None`` or an empty name clears it. Unsupported names are logged and
        leave the current charset unchanged.
        """
        try:
            canonical = self._canonical_charset(charset)
        except UnsupportedCharsetError as e:
            self._warn_unsupported(charset, e)
            return

        with self._lock:
            if canonical != self._explicit_charset:
                self._explicit_charset = canonical
                self._invalidate()

    # Materialization

    def materialize(self) -> ResolutionOutcome:
        """Turn the contents into text, resolving the charset if needed.

        Never raises. The outcome is cached until the contents or charset
        change.
        """
        with self._lock:
            if self._outcome is not None:
                return self._outcome
            data, version = self._contents, self._version
            explicit, resolved = self._explicit_charset, self._resolved_charset

        if explicit is not None:
            outcome = self._decode_known(data, explicit, DetectionMethod.EXPLICIT)
        elif resolved is not None:
            outcome = self._decode_known(data, resolved, DetectionMethod.CACHED)
        else:
            outcome = self.strategy.resolve_and_decode(data, self.default_charset())

        self._report(outcome.diagnostics)

        with self._lock:
            if version == self._version:
                if explicit is None and resolved is None and outcome.charset:
                    self._resolved_charset = outcome.charset
                self._outcome = outcome
        return outcome

    def to_text(self) -> str:
        """Body contents as text."""
        return self.materialize().text

    def _decode_known(
        self, data: bytes, charset: str, method: DetectionMethod
    ) -> ResolutionOutcome:
        try:
            text = data.decode(charset, errors=self.config.explicit_decode_errors)
        except (LookupError, ValueError) as e:
            default = self.default_charset()
            return ResolutionOutcome(
                text=data.decode(default),
                charset=None,
                method=DetectionMethod.FALLBACK,
                diagnostics=[
                    DiagnosticEntry(
                        severity=DiagnosticSeverity.ERROR,
                        message=f"Unable to decode with charset {charset}: {e}",
                        component="http_body",
                        details={"charset_name": charset, "reason": str(e)},
                    ),
                    DiagnosticEntry(
                        severity=DiagnosticSeverity.INFO,
                        message=f"Using default charset: {default}",
                        component="http_body",
                        details={"default_charset": default},
                    ),
                ],
            )
        return ResolutionOutcome(text=text, charset=charset, method=method)

    @staticmethod
    def _canonical_charset(charset: Optional[str]) -> Optional[str]:
        if not charset or not charset.strip():
            return None
        return lookup_charset(charset)

    def _warn_unsupported(self, charset: str, error: Exception) -> None:
        self.logger.warning(
            f"Ignoring unsupported charset: {charset}",
            extra={"charset_name": charset, "reason": str(error)},
        )

    def _invalidate(self) -> None:
        # Caller holds the lock
        self._version += 1
        self._outcome = None

    def _report(self, diagnostics: List[DiagnosticEntry]) -> None:
        if self.config.log_diagnostics and diagnostics:
            report_diagnostics(diagnostics, self.logger)

    def __len__(self) -> int:
        return len(self._contents)

    def __str__(self) -> str:
        return self.to_text()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HttpBody):
            return NotImplemented
        return self._contents == other._contents

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(length={len(self)}, "
            f"charset={self.get_charset()!r})"
        )
