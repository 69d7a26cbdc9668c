"""Character layer for charset resolution.

This module provides charset detection primitives and the resolution
strategies that turn body bytes into text following the never-fail philosophy.
"""

from .encoding import (
    REFERENCE_ENCODING,
    UTF8,
    CharsetError,
    DetectionMethod,
    MetaCharsetScanner,
    UnsupportedCharsetError,
    Utf8Validator,
    is_reference_encoding,
    is_supported_charset,
    lookup_charset,
)
from .resolution import (
    CharsetDetection,
    CharsetResolutionStrategy,
    DefaultCharsetStrategy,
    MetaCharsetStrategy,
    ResolutionOutcome,
    resolve_and_decode,
    resolve_from_decoded_text,
)

__all__ = [
    # Modules
    "encoding",
    "resolution",
    # Detection primitives
    "REFERENCE_ENCODING",
    "UTF8",
    "CharsetError",
    "DetectionMethod",
    "MetaCharsetScanner",
    "UnsupportedCharsetError",
    "Utf8Validator",
    "is_reference_encoding",
    "is_supported_charset",
    "lookup_charset",
    # Resolution
    "CharsetDetection",
    "CharsetResolutionStrategy",
    "DefaultCharsetStrategy",
    "MetaCharsetStrategy",
    "ResolutionOutcome",
    "resolve_and_decode",
    "resolve_from_decoded_text",
]
