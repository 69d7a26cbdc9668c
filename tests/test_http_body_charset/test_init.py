"""Test module for http_body_charset package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import http_body_charset

    # Assert
    assert http_body_charset is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import http_body_charset

    # Assert
    assert isinstance(http_body_charset.__version__, str)
    assert http_body_charset.__version__ == "0.1.0"


def test_package_exports_public_api() -> None:
    """Test that __all__ exposes every API level."""
    # Arrange & Act
    import http_body_charset

    # Assert
    for name in [
        "resolve_and_decode",
        "resolve_from_decoded_text",
        "HttpBody",
        "charset_from_content_type",
        "MetaCharsetStrategy",
        "CharsetConfig",
    ]:
        assert name in http_body_charset.__all__
        assert hasattr(http_body_charset, name)


def test_simple_function_resolves_utf8() -> None:
    """Test the level 1 entry point end to end."""
    # Arrange
    from http_body_charset import resolve_and_decode

    # Act
    outcome = resolve_and_decode("héllo".encode("utf-8"))

    # Assert
    assert outcome.charset == "utf-8"
    assert outcome.text == "héllo"
