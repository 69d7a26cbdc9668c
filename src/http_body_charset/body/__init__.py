"""Body layer: HTTP message bodies with lazy charset resolution."""

from .http_body import (
    ByteBody,
    HttpBody,
    charset_from_content_type,
)

__all__ = [
    "ByteBody",
    "HttpBody",
    "charset_from_content_type",
]
