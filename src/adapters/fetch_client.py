"""Rate-limit aware fetch layer.

Responsibility:
- Serve idempotent read-only calls from the response cache when possible.
- On a miss, perform the call and store the decoded JSON payload.
- On HTTP 429, wait a fixed backoff and retry, up to a bounded number of
  attempts. Every other failure fails fast.

No domain knowledge lives here: callers pass a `RequestKey` and get the raw
payload back.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from adapters.http_client import is_rate_limited
from core.config import AppSettings
from core.domain.errors import RetriesExhaustedError, UpstreamError
from core.domain.models import RequestKey
from core.interfaces.cache import ResponseCache

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


class FetchClient:
    """Cached GET with fixed-backoff retry on rate limiting."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: ResponseCache,
        *,
        max_attempts: int = 3,
        backoff_seconds: float = 3.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._client = client
        self._cache = cache
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        client: httpx.AsyncClient,
        cache: ResponseCache,
        sleep: SleepFn = asyncio.sleep,
    ) -> "FetchClient":
        return cls(
            client,
            cache,
            max_attempts=settings.fetch_max_attempts,
            backoff_seconds=settings.rate_limit_backoff_seconds,
            sleep=sleep,
        )

    async def fetch(self, key: RequestKey) -> Any:
        cache_key = key.canonical

        for attempt in range(1, self.max_attempts + 1):
            # Checked on every attempt: a concurrent fetch may have stored the
            # key while this one was backing off.
            if self._cache.contains(cache_key):
                logger.debug("Cache hit for %s", cache_key)
                return self._cache.get(cache_key)

            response = await self._send(key)

            if is_rate_limited(response):
                if attempt < self.max_attempts:
                    logger.warning(
                        "Rate limited on %s (attempt %d/%d). Waiting %.1fs before retry...",
                        cache_key,
                        attempt,
                        self.max_attempts,
                        self.backoff_seconds,
                    )
                    await self._sleep(self.backoff_seconds)
                continue

            payload = self._decode(key, response)
            self._cache.set(cache_key, payload)
            return payload

        logger.error("Rate limited on %s after %d attempts", cache_key, self.max_attempts)
        raise RetriesExhaustedError(key, self.max_attempts)

    async def _send(self, key: RequestKey) -> httpx.Response:
        try:
            return await self._client.get(key.url, params=list(key.params) or None)
        except httpx.HTTPError as exc:
            raise UpstreamError(key, detail=f"{type(exc).__name__}: {exc}") from exc

    @staticmethod
    def _decode(key: RequestKey, response: httpx.Response) -> Any:
        if not response.is_success:
            raise UpstreamError(key, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                key,
                status_code=response.status_code,
                detail="response body is not valid JSON",
            ) from exc
