"""HTTP body charset resolution.

Resolves the charset of HTTP message bodies that did not declare one
out-of-band and turns them into text without ever failing and without
losing bytes when detection comes up empty.

Progressive API Disclosure:
- Level 1: Simple functions - resolve_and_decode(), resolve_from_decoded_text()
- Level 2: Bodies - HttpBody, HttpBody.response()
- Level 3: Custom strategies - CharsetResolutionStrategy subclasses
"""

__version__ = "0.1.0"
__author__ = "HTTP Body Charset Team"

# Level 1: Simple functions
from .character.resolution import resolve_and_decode, resolve_from_decoded_text

# Level 2: Bodies
from .body.http_body import HttpBody, charset_from_content_type

# Level 3: Strategies and result objects
from .character.resolution import (
    CharsetResolutionStrategy,
    DefaultCharsetStrategy,
    MetaCharsetStrategy,
    ResolutionOutcome,
)

# Configuration classes for advanced usage
from .shared.config import CharsetConfig

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "resolve_and_decode",
    "resolve_from_decoded_text",

    # Level 2: Bodies
    "HttpBody",
    "charset_from_content_type",

    # Level 3: Strategies and result objects
    "CharsetResolutionStrategy",
    "DefaultCharsetStrategy",
    "MetaCharsetStrategy",
    "ResolutionOutcome",

    # Configuration
    "CharsetConfig",
]
