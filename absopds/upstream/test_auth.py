import pytest

from absopds.upstream.auth import build_auth_header


def test_auth_header_adds_bearer_prefix() -> None:
    assert build_auth_header("abc123") == "Bearer abc123"


def test_auth_header_preserves_existing_prefix() -> None:
    assert build_auth_header("bearer abc123") == "bearer abc123"


def test_auth_header_strips_whitespace() -> None:
    assert build_auth_header("  abc123  ") == "Bearer abc123"


def test_auth_header_requires_key() -> None:
    with pytest.raises(ValueError, match="API key is required"):
        build_auth_header("   ")
