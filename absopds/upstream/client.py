"""Audiobookshelf API client for library and item listings."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List, Optional

import aiohttp

from absopds import logger
from absopds.__version__ import __version__
from absopds.catalog.types import Library, RawCatalogItem
from absopds.config import UpstreamConfig
from absopds.upstream.auth import build_auth_header
from absopds.upstream.parsers import parse_items, parse_libraries, parse_library
from absopds.upstream.protocols import CatalogSource
from absopds.upstream.resilience import (
    RETRYABLE_HTTP_STATUSES,
    UpstreamFailure,
    is_retryable_exception,
)

DEFAULT_USER_AGENT = f"absopds/{__version__}"
SERVICE_NAME = "ABS"
MAX_ATTEMPTS = 3


class AbsClient(CatalogSource):
    """Read-only Audiobookshelf API adapter."""

    def __init__(
        self,
        upstream: UpstreamConfig,
        max_concurrency: int = 4,
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self.base_url = upstream.url.rstrip("/")
        self.timeout = upstream.timeout
        self.max_attempts = max(1, max_attempts)
        self._auth_header = build_auth_header(upstream.api_key)
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def fetch_libraries(self) -> List[Library]:
        """GET /api/libraries"""
        return parse_libraries(await self._get("/api/libraries"))

    async def fetch_library(self, library_id: str) -> Library:
        """GET /api/libraries/{id}"""
        return parse_library(await self._get(f"/api/libraries/{library_id}"))

    async def fetch_items(self, library_id: str) -> List[RawCatalogItem]:
        """GET /api/libraries/{id}/items (whole library, unpaginated)"""
        return parse_items(await self._get(f"/api/libraries/{library_id}/items"))

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        log = logger.get_logger()
        log.api_request("GET", url, params)
        request_start = time.monotonic()

        async with self._semaphore:
            session = await self._ensure_session()
            for attempt in range(1, self.max_attempts + 1):
                try:
                    async with session.get(url, params=params) as response:
                        if response.status >= 400:
                            text = await response.text()
                            raise aiohttp.ClientResponseError(
                                request_info=response.request_info,
                                history=response.history,
                                status=response.status,
                                message=text[:200] or str(response.reason),
                                headers=response.headers,
                            )
                        data = await response.json(content_type=None)
                        elapsed_ms = (time.monotonic() - request_start) * 1000
                        log.api_response(response.status, data, elapsed_ms)
                        return data
                except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
                    if attempt < self.max_attempts and is_retryable_exception(exc):
                        delay = self._retry_delay_seconds(attempt=attempt, exc=exc)
                        log.api_retry(SERVICE_NAME, attempt, self.max_attempts, delay)
                        await asyncio.sleep(delay)
                        continue
                    if is_retryable_exception(exc):
                        log.api_failed(SERVICE_NAME, self.max_attempts)
                    raise UpstreamFailure(f"GET {path} failed: {self._describe(exc)}") from exc
                except ValueError as exc:
                    raise UpstreamFailure(f"GET {path} returned invalid JSON: {exc}") from exc
        raise UpstreamFailure(f"GET {path} failed")

    @staticmethod
    def _describe(exc: BaseException) -> str:
        if isinstance(exc, aiohttp.ClientResponseError):
            return f"HTTP {exc.status} {exc.message}".strip()
        if isinstance(exc, asyncio.TimeoutError):
            return "timed out"
        return f"{type(exc).__name__}: {exc}"

    @staticmethod
    def _retry_delay_seconds(*, attempt: int, exc: BaseException) -> int:
        if isinstance(exc, aiohttp.ClientResponseError) and exc.status in RETRYABLE_HTTP_STATUSES:
            retry_after = exc.headers.get("Retry-After") if exc.headers else None
            if retry_after:
                try:
                    value = int(float(retry_after))
                except (TypeError, ValueError):
                    value = 0
                if value > 0:
                    return value
        return 2 ** attempt

    async def _ensure_session(self) -> aiohttp.ClientSession:
        session = self._session
        if session is not None and not session.closed:
            return session

        async with self._session_lock:
            session = self._session
            if session is None or session.closed:
                self._session = aiohttp.ClientSession(
                    headers=self._get_headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                )
            return self._session

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": self._auth_header,
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept": "application/json",
        }

    async def close(self) -> None:
        """Close any open connections."""
        async with self._session_lock:
            session = self._session
            self._session = None
        if session is not None and not session.closed:
            await session.close()

    async def __aenter__(self) -> "AbsClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
