"""Charset resolution pipeline for message bodies.

Resolution runs in a fixed order: an in-content (X)HTML meta declaration wins
when it names a usable charset, UTF-8 is assumed when the content survives a
round trip, and otherwise no charset is resolved and the text comes from the
single-byte reference decode, which cannot fail and keeps every byte.

Strategies are pluggable so that a body can choose how much detection it wants
without subclassing. The pipeline does not log; every outcome carries the
diagnostic entries that describe what was tried.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..shared.config import CharsetConfig
from ..shared.result import DiagnosticEntry, DiagnosticSeverity
from .encoding import (
    REFERENCE_ENCODING,
    UTF8,
    DetectionMethod,
    MetaCharsetScanner,
    UnsupportedCharsetError,
    Utf8Validator,
    is_reference_encoding,
    lookup_charset,
)

COMPONENT = "charset_resolution"


@dataclass
class CharsetDetection:
    """Charset learnt from text that was already decoded.

    Attributes:
        charset: Canonical charset name, or None if nothing could be determined
        method: How the charset was determined
        diagnostics: Entries describing recovered problems
        declared_charset: Raw declared name if a declaration was found
    """
    charset: Optional[str]
    method: DetectionMethod
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    declared_charset: Optional[str] = None


@dataclass
class ResolutionOutcome:
    """Text materialized from raw bytes plus the charset that produced it.

    ``text`` is always set. ``charset`` is None when the reference decode was
    used, in which case encoding ``text`` with the reference encoding gives
    back the original bytes.
    """
    text: str
    charset: Optional[str]
    method: DetectionMethod
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    declared_charset: Optional[str] = None

    @property
    def resolved(self) -> bool:
        """Whether a charset was resolved."""
        return self.charset is not None


def _unsupported_declaration(declared: str, error: Exception) -> DiagnosticEntry:
    return DiagnosticEntry(
        severity=DiagnosticSeverity.WARNING,
        message=(
            "Unable to determine (valid) charset with the (X)HTML meta charset: "
            f"{declared}"
        ),
        component=COMPONENT,
        details={"charset_name": declared, "reason": str(error)},
    )


class CharsetResolutionStrategy(ABC):
    """Interface for determining the charset of a body."""

    @abstractmethod
    def resolve_from_decoded_text(self, text: str) -> CharsetDetection:
        """Determine the true charset of text decoded under a placeholder."""

    @abstractmethod
    def resolve_and_decode(
        self, data: bytes, default_charset: str = REFERENCE_ENCODING
    ) -> ResolutionOutcome:
        """Resolve the charset of ``data`` and decode it. Never raises."""


class DefaultCharsetStrategy(CharsetResolutionStrategy):
    """No detection: bodies without an explicit charset use the default one."""

    def resolve_from_decoded_text(self, text: str) -> CharsetDetection:
        return CharsetDetection(charset=None, method=DetectionMethod.FALLBACK)

    def resolve_and_decode(
        self, data: bytes, default_charset: str = REFERENCE_ENCODING
    ) -> ResolutionOutcome:
        return ResolutionOutcome(
            text=bytes(data).decode(default_charset),
            charset=None,
            method=DetectionMethod.FALLBACK,
        )


class MetaCharsetStrategy(CharsetResolutionStrategy):
    """Resolve charsets from (X)HTML meta declarations and UTF-8 round trips.

    Implements a cascading strategy:
    1. Meta charset declaration, if it names a usable charset
    2. UTF-8 round-trip validation
    3. Reference decode with no charset resolved
    """

    def __init__(self, config: Optional[CharsetConfig] = None) -> None:
        """Initialize detection components."""
        self.config = config or CharsetConfig()
        self.scanner = MetaCharsetScanner(self.config.meta_scan_limit)
        self.utf8_validator = Utf8Validator()

    def _find_declaration(self, text: str) -> Optional[str]:
        if not self.config.enable_meta_detection:
            return None
        return self.scanner.find_declared_charset(text)

    def resolve_from_decoded_text(self, text: str) -> CharsetDetection:
        """Determine the charset of already decoded text.

        Args:
            text: Text decoded under some placeholder charset

        Returns:
            CharsetDetection whose charset is None if nothing could be determined
        """
        diagnostics: List[DiagnosticEntry] = []

        # Stage 1: declaration
        declared = self._find_declaration(text)
        if declared is not None:
            try:
                return CharsetDetection(
                    charset=lookup_charset(declared),
                    method=DetectionMethod.META_DECLARATION,
                    diagnostics=diagnostics,
                    declared_charset=declared,
                )
            except UnsupportedCharsetError as e:
                diagnostics.append(_unsupported_declaration(declared, e))

        # Stage 2: UTF-8 round trip
        if (self.config.enable_utf8_detection
                and self.utf8_validator.is_valid_utf8_text(text)):
            return CharsetDetection(
                charset=UTF8,
                method=DetectionMethod.UTF8_VALIDATION,
                diagnostics=diagnostics,
                declared_charset=declared,
            )

        return CharsetDetection(
            charset=None,
            method=DetectionMethod.FALLBACK,
            diagnostics=diagnostics,
            declared_charset=declared,
        )

    def resolve_and_decode(
        self, data: bytes, default_charset: str = REFERENCE_ENCODING
    ) -> ResolutionOutcome:
        """Resolve the charset of raw bytes and decode them.

        Args:
            data: Raw body bytes
            default_charset: Reference encoding used for scanning and fallback

        Returns:
            ResolutionOutcome with the decoded text and resolved charset

        Raises:
            ValueError: If ``default_charset`` cannot decode every byte value
        """
        if not is_reference_encoding(default_charset):
            raise ValueError(
                f"default_charset must be a single-byte reference encoding, "
                f"got {default_charset!r}"
            )

        data = bytes(data)
        diagnostics: List[DiagnosticEntry] = []

        # Stage 1: reference decode, cannot fail
        reference_text = data.decode(default_charset)

        # Stage 2: declaration. The declaration syntax is ASCII, so it reads the
        # same under the reference encoding whatever the real charset is.
        declared = self._find_declaration(reference_text)
        if declared is not None:
            outcome = self._decode_declared(data, declared, default_charset,
                                            diagnostics)
            if outcome is not None:
                return outcome

        # Stage 3: UTF-8 round trip
        if self.config.enable_utf8_detection:
            utf8_text = data.decode(UTF8, errors="replace")
            if len(utf8_text.encode(UTF8)) == len(data):
                return ResolutionOutcome(
                    text=utf8_text,
                    charset=UTF8,
                    method=DetectionMethod.UTF8_VALIDATION,
                    diagnostics=diagnostics,
                    declared_charset=declared,
                )

        # Stage 4: lossless fallback
        return ResolutionOutcome(
            text=reference_text,
            charset=None,
            method=DetectionMethod.FALLBACK,
            diagnostics=diagnostics,
            declared_charset=declared,
        )

    def _decode_declared(
        self,
        data: bytes,
        declared: str,
        default_charset: str,
        diagnostics: List[DiagnosticEntry],
    ) -> Optional[ResolutionOutcome]:
        """Decode with the declared charset, or record why that was not possible."""
        try:
            charset = lookup_charset(declared)
        except UnsupportedCharsetError as e:
            diagnostics.append(_unsupported_declaration(declared, e))
            return None

        try:
            text = data.decode(charset, errors=self.config.declared_decode_errors)
        except ValueError as e:
            diagnostics.append(DiagnosticEntry(
                severity=DiagnosticSeverity.ERROR,
                message=f"Unable to decode with the (X)HTML meta charset: {e}",
                component=COMPONENT,
                details={"charset_name": declared, "reason": str(e)},
            ))
            diagnostics.append(DiagnosticEntry(
                severity=DiagnosticSeverity.INFO,
                message=f"Using default charset: {default_charset}",
                component=COMPONENT,
                details={"default_charset": default_charset},
            ))
            return None

        return ResolutionOutcome(
            text=text,
            charset=charset,
            method=DetectionMethod.META_DECLARATION,
            diagnostics=diagnostics,
            declared_charset=declared,
        )


def resolve_and_decode(
    data: bytes,
    default_charset: str = REFERENCE_ENCODING,
    config: Optional[CharsetConfig] = None,
) -> ResolutionOutcome:
    """Resolve and decode ``data`` with the meta charset pipeline.

    Convenience wrapper around ``MetaCharsetStrategy``; never raises for any
    byte input.
    """
    return MetaCharsetStrategy(config).resolve_and_decode(data, default_charset)


def resolve_from_decoded_text(
    text: str, config: Optional[CharsetConfig] = None
) -> Optional[str]:
    """Return the charset ``text`` declares or plausibly uses, or None."""
    return MetaCharsetStrategy(config).resolve_from_decoded_text(text).charset
