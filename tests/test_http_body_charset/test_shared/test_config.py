"""Tests for charset configuration."""

import dataclasses
import json

import pytest

from http_body_charset.character.encoding import is_reference_encoding
from http_body_charset.shared.config import (
    CharsetConfig,
    ConfigError,
    ConfigValidationError,
)


class TestCharsetConfig:
    """Test suite for CharsetConfig."""

    def test_default_configuration(self):
        """Test default configuration values."""
        config = CharsetConfig()

        assert config.default_charset == "iso-8859-1"
        assert config.enable_meta_detection is True
        assert config.enable_utf8_detection is True
        assert config.meta_scan_limit is None
        assert config.declared_decode_errors == "replace"
        assert config.explicit_decode_errors == "replace"
        assert config.log_diagnostics is True
        assert config.canonical_default_charset == "iso8859-1"

    def test_configuration_is_frozen(self):
        """Test that configurations cannot be mutated."""
        config = CharsetConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.enable_meta_detection = False

    @pytest.mark.parametrize("charset", ["utf-8", "cp1252", "ascii", "not-a-charset"])
    def test_default_charset_must_be_lossless(self, charset):
        """Test that only lossless single-byte default charsets are accepted."""
        with pytest.raises(ConfigValidationError) as exc_info:
            CharsetConfig(default_charset=charset)

        assert exc_info.value.field_name == "default_charset"
        assert exc_info.value.suggestions

    @pytest.mark.parametrize("charset", ["iso-8859-1", "latin-1", "utf-8", "cp1252"])
    def test_validation_agrees_with_reference_check(self, charset):
        """Test the default charset is validated by the reference encoding check."""
        if is_reference_encoding(charset):
            assert CharsetConfig(default_charset=charset).default_charset == charset
        else:
            with pytest.raises(ConfigValidationError):
                CharsetConfig(default_charset=charset)

    def test_latin1_alias_accepted(self):
        """Test that aliases of the reference encoding are accepted."""
        config = CharsetConfig(default_charset="latin-1")

        assert config.canonical_default_charset == "iso8859-1"

    def test_validation_failures(self):
        """Test validation of the remaining fields."""
        with pytest.raises(ConfigValidationError, match="meta_scan_limit must be > 0"):
            CharsetConfig(meta_scan_limit=0)

        with pytest.raises(ConfigValidationError, match="declared_decode_errors"):
            CharsetConfig(declared_decode_errors="ignore")

        with pytest.raises(ConfigValidationError, match="explicit_decode_errors"):
            CharsetConfig(explicit_decode_errors="surrogateescape")

    def test_override(self):
        """Test creating modified copies."""
        config = CharsetConfig()

        new_config = config.override(enable_utf8_detection=False, meta_scan_limit=512)

        assert new_config.enable_utf8_detection is False
        assert new_config.meta_scan_limit == 512
        assert config.enable_utf8_detection is True

    def test_override_unknown_field(self):
        """Test that unknown override fields raise ConfigError."""
        with pytest.raises(ConfigError):
            CharsetConfig().override(no_such_field=True)

    def test_override_is_validated(self):
        """Test that overrides go through validation."""
        with pytest.raises(ConfigValidationError):
            CharsetConfig().override(default_charset="utf-8")

    def test_json_serialization(self):
        """Test JSON export and import."""
        config = CharsetConfig(meta_scan_limit=1024, declared_decode_errors="strict")

        data = json.loads(config.to_json())
        restored = CharsetConfig.from_json(config.to_json())

        assert data["meta_scan_limit"] == 1024
        assert restored == config

    def test_from_dict_ignores_unknown_keys(self):
        """Test that unknown keys are ignored."""
        config = CharsetConfig.from_dict({"enable_meta_detection": False, "extra": 1})

        assert config.enable_meta_detection is False

    def test_from_json_invalid(self):
        """Test invalid JSON input."""
        with pytest.raises(ConfigError, match="Invalid configuration JSON"):
            CharsetConfig.from_json("{not json")

        with pytest.raises(ConfigError, match="must be an object"):
            CharsetConfig.from_json("[1, 2]")


class TestPresets:
    """Test configuration presets."""

    def test_balanced_is_default(self):
        assert CharsetConfig.balanced() == CharsetConfig()

    def test_html_detection(self):
        assert CharsetConfig.html_detection().meta_scan_limit == 4096

    def test_strict_declarations(self):
        assert CharsetConfig.strict_declarations().declared_decode_errors == "strict"

    def test_passthrough(self):
        config = CharsetConfig.passthrough()

        assert config.enable_meta_detection is False
        assert config.enable_utf8_detection is False
        assert config.log_diagnostics is False
