"""Configuration for charset resolution.

This module provides the immutable configuration object that controls which
detection stages run, how declared and explicit charsets are decoded, and which
single-byte reference encoding anchors the lossless fallback.
"""

import codecs
import json
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional

from ..character.encoding import is_reference_encoding

VALID_ERROR_HANDLERS = ("replace", "strict")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class CharsetConfig:
    """Configuration for charset resolution and body materialization.

    Thread-safe due to frozen dataclass implementation.

    Attributes:
        default_charset: Single-byte reference encoding used for scanning and as
            the terminal fallback. Must map every byte to a distinct character.
        enable_meta_detection: Look for an (X)HTML meta charset declaration
        enable_utf8_detection: Assume UTF-8 when the content round-trips
        meta_scan_limit: Maximum number of characters searched for a
            declaration, ``None`` searches the whole document
        declared_decode_errors: Error handler used when decoding with a declared
            charset. ``"strict"`` turns malformed content into a decode failure
            that falls through to the next stage.
        explicit_decode_errors: Error handler used when decoding with an
            explicit or previously resolved charset
        log_diagnostics: Whether bodies report resolution diagnostics to the log
    """

    default_charset: str = "iso-8859-1"
    enable_meta_detection: bool = True
    enable_utf8_detection: bool = True
    meta_scan_limit: Optional[int] = None
    declared_decode_errors: str = "replace"
    explicit_decode_errors: str = "replace"
    log_diagnostics: bool = True

    def __post_init__(self) -> None:
        """Validate charset configuration."""
        if not is_reference_encoding(self.default_charset):
            raise ConfigValidationError(
                f"default_charset must be a lossless single-byte encoding, "
                f"got {self.default_charset!r}",
                field_name="default_charset",
                suggestions=["Use 'iso-8859-1'"],
            )
        if self.meta_scan_limit is not None and self.meta_scan_limit <= 0:
            raise ConfigValidationError(
                "meta_scan_limit must be > 0 or None", field_name="meta_scan_limit"
            )
        for field_name in ("declared_decode_errors", "explicit_decode_errors"):
            if getattr(self, field_name) not in VALID_ERROR_HANDLERS:
                raise ConfigValidationError(
                    f"{field_name} must be one of {list(VALID_ERROR_HANDLERS)}",
                    field_name=field_name,
                )

    @property
    def canonical_default_charset(self) -> str:
        """Registry name of the default charset."""
        return codecs.lookup(self.default_charset).name

    def override(self, **kwargs: Any) -> "CharsetConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = CharsetConfig()
            >>> config.override(enable_utf8_detection=False).enable_utf8_detection
            False
        """
        try:
            return replace(self, **kwargs)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CharsetConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {key: value for key, value in data.items()
                 if key in cls.__dataclass_fields__}
        return cls(**known)

    @classmethod
    def from_json(cls, json_str: str) -> "CharsetConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def balanced(cls) -> "CharsetConfig":
        """Default configuration: meta declaration, then UTF-8, then fallback."""
        return cls()

    @classmethod
    def html_detection(cls) -> "CharsetConfig":
        """Only look for declarations near the start of the document."""
        return cls(meta_scan_limit=4096)

    @classmethod
    def strict_declarations(cls) -> "CharsetConfig":
        """Reject declared charsets the content cannot be decoded with."""
        return cls(declared_decode_errors="strict")

    @classmethod
    def passthrough(cls) -> "CharsetConfig":
        """Disable detection entirely, always using the reference decode."""
        return cls(
            enable_meta_detection=False,
            enable_utf8_detection=False,
            log_diagnostics=False,
        )
