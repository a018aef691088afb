"""Upstream failure type, retry classification and payload guards."""

from __future__ import annotations

import asyncio

from aiohttp import ClientConnectionError, ClientResponseError, ServerTimeoutError

RETRYABLE_HTTP_STATUSES = {429, 500, 502, 503, 504}


class UpstreamFailure(RuntimeError):
    """Raised when the Audiobookshelf API call fails or returns malformed data."""


def expect_dict(value: object, context: str) -> dict:
    if isinstance(value, dict):
        return value
    value_type = type(value).__name__
    raise UpstreamFailure(f"{context} has unexpected type '{value_type}'")


def expect_list(container: dict, key: str, context: str) -> list:
    if key not in container:
        raise UpstreamFailure(f"{context} is missing '{key}'")
    value = container[key]
    if isinstance(value, list):
        return value
    value_type = type(value).__name__
    raise UpstreamFailure(f"{context}.{key} has unexpected type '{value_type}'")


def optional_dict(container: dict, key: str, context: str) -> dict:
    value = container.get(key, {})
    if value is None:
        return {}
    return expect_dict(value, f"{context}.{key}")


def optional_text(container: dict, key: str) -> str | None:
    value = container.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def optional_text_list(container: dict, key: str, context: str) -> tuple[str, ...]:
    value = container.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        value_type = type(value).__name__
        raise UpstreamFailure(f"{context}.{key} has unexpected type '{value_type}'")
    return tuple(str(entry) for entry in value if entry is not None)


def required_text(container: dict, key: str, context: str) -> str:
    value = optional_text(container, key)
    if value is None:
        raise UpstreamFailure(f"{context} is missing '{key}'")
    return value


def is_retryable_exception(exc: BaseException) -> bool:
    return isinstance(exc, (asyncio.TimeoutError, ClientConnectionError, ServerTimeoutError)) or (
        isinstance(exc, ClientResponseError) and exc.status in RETRYABLE_HTTP_STATUSES
    )
