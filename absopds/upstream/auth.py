"""Authorization header formatting for the Audiobookshelf API."""

from __future__ import annotations


def build_auth_header(api_key: str) -> str:
    """
    Return the Authorization header value for an API token.

    Keys pasted with an existing ``Bearer`` prefix are kept as given.
    """
    key = (api_key or "").strip()
    if not key:
        raise ValueError("Audiobookshelf API key is required.")
    return key if key.lower().startswith("bearer ") else f"Bearer {key}"
