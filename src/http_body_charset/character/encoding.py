"""Charset detection primitives with never-fail guarantee.

This module implements the stateless building blocks of charset resolution:
UTF-8 plausibility checking by round trip, extraction of an (X)HTML meta charset
declaration, and lookups against the Python codec registry.
"""

import codecs
import re
from enum import Enum
from typing import Optional

# Single-byte encoding where every byte maps to exactly one character
REFERENCE_ENCODING = "iso-8859-1"
UTF8 = "utf-8"

# Every byte value, used to verify reference encodings
ALL_BYTE_VALUES = bytes(range(256))


class DetectionMethod(Enum):
    """Enumeration of the ways a body charset can be determined."""
    EXPLICIT = "explicit"
    CACHED = "cached"
    META_DECLARATION = "meta_declaration"
    UTF8_VALIDATION = "utf8_validation"
    FALLBACK = "fallback"


class CharsetError(Exception):
    """Base exception for charset errors."""


class UnsupportedCharsetError(CharsetError, LookupError):
    """Raised when a charset name is not a registered text encoding."""

    def __init__(self, charset_name: str, reason: Optional[str] = None) -> None:
        message = f"Unsupported charset: {charset_name!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.charset_name = charset_name


def lookup_charset(name: Optional[str]) -> str:
    """Look up a charset in the codec registry.

    Args:
        name: Charset name as found in a header or declaration

    Returns:
        Canonical codec name, e.g. ``"iso8859-1"`` for ``"ISO-8859-1"``

    Raises:
        UnsupportedCharsetError: If the name is empty, unknown, or names a codec
            that does not convert between bytes and text (e.g. ``base64``)
    """
    if not name or not name.strip():
        raise UnsupportedCharsetError(name or "", "empty name")

    try:
        info = codecs.lookup(name.strip())
    except (LookupError, ValueError) as e:
        raise UnsupportedCharsetError(name, str(e)) from e

    # Binary transforms are registered too but are not text encodings
    if not getattr(info, "_is_text_encoding", True):
        raise UnsupportedCharsetError(name, "not a text encoding")

    return info.name


def is_supported_charset(name: Optional[str]) -> bool:
    """Check if ``name`` is a registered text encoding."""
    try:
        lookup_charset(name)
    except UnsupportedCharsetError:
        return False
    else:
        return True


def is_reference_encoding(name: str) -> bool:
    """Check if ``name`` decodes every byte value losslessly, one char per byte."""
    try:
        text = ALL_BYTE_VALUES.decode(lookup_charset(name))
        return len(text) == len(ALL_BYTE_VALUES) and (
            text.encode(name) == ALL_BYTE_VALUES
        )
    except (LookupError, ValueError):
        return False


class Utf8Validator:
    """UTF-8 plausibility check by decode/re-encode round trip.

    This is a heuristic rather than a conformance check. Malformed input is
    replaced with U+FFFD while decoding, which re-encodes to three bytes, so
    any replacement changes the length unless the malformed run happened to be
    exactly three bytes long.
    """

    def is_valid_utf8(self, data: bytes) -> bool:
        """Check if the byte data is plausibly valid UTF-8.

        Args:
            data: Byte data to validate

        Returns:
            True if the re-encoded length equals the original length
        """
        round_trip = data.decode(UTF8, errors="replace").encode(UTF8)
        return len(round_trip) == len(data)

    def is_valid_utf8_text(self, text: str) -> bool:
        """Check if already decoded text round-trips through UTF-8.

        Lone surrogates are encoded as their raw three bytes, which do not
        decode back to a single character, so such text is not valid.
        """
        round_trip = text.encode(UTF8, errors="surrogatepass").decode(
            UTF8, errors="replace"
        )
        return len(round_trip) == len(text)


class MetaCharsetScanner:
    """Finds the charset declared by an (X)HTML meta element."""

    # <meta ... charset = "name" in any of its quoted, unquoted, http-equiv or
    # self-closing forms. The attribute run stops at the next '<' or '>', and
    # the name token cannot contain the characters that may follow it, so each
    # unclosed tag is scanned once and a failed name is backtracked at most once.
    META_CHARSET_PATTERN = re.compile(
        r"<meta\b[^<>]*?\bcharset\s*=\s*['\"]?([^<>'\";/=\s]+)(?=[\s'\";/>])",
        re.IGNORECASE
    )

    # Rest of the tag after the name, up to its closing '>'
    TAG_CLOSE_PATTERN = re.compile(r"[^<>]*>")

    def __init__(self, scan_limit: Optional[int] = None) -> None:
        """Initialize scanner.

        Args:
            scan_limit: Maximum number of characters searched, ``None`` for all
        """
        if scan_limit is not None and scan_limit <= 0:
            raise ValueError("scan_limit must be > 0 or None")
        self.scan_limit = scan_limit

    def find_declared_charset(self, text: str) -> Optional[str]:
        """Return the first declared charset name in document order.

        Args:
            text: Markup to search

        Returns:
            The declared name exactly as written, or None if there is none
        """
        if not text:
            return None

        if self.scan_limit is not None:
            text = text[:self.scan_limit]

        for match in self.META_CHARSET_PATTERN.finditer(text):
            # Unclosed tags do not declare anything
            if self.TAG_CLOSE_PATTERN.match(text, match.end()):
                return match.group(1)
        return None
