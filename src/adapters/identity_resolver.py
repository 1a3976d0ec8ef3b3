"""Username -> account id resolution.

Why not the generic fetch layer:
- Names can be renamed, reused or removed over time; caching the mapping
  would be unsafe, so every lookup hits the upstream.
- The retry contract is narrower: a rate-limited lookup is retried exactly
  once (two attempts in total).
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from adapters.fetch_client import SleepFn
from adapters.http_client import is_rate_limited
from adapters.roblox_api import username_lookup_url
from core.config import AppSettings
from core.domain.errors import (
    NotFoundError,
    ResolutionError,
    RetriesExhaustedError,
    UpstreamError,
)
from core.domain.models import RequestKey

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Exact-match username lookup with a single rate-limit retry."""

    # First attempt + exactly one retry.
    max_attempts = 2

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        lookup_url: str,
        backoff_seconds: float = 3.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._client = client
        self._lookup_key = RequestKey(url=lookup_url)
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        client: httpx.AsyncClient,
        sleep: SleepFn = asyncio.sleep,
    ) -> "IdentityResolver":
        return cls(
            client,
            lookup_url=username_lookup_url(settings),
            backoff_seconds=settings.rate_limit_backoff_seconds,
            sleep=sleep,
        )

    async def resolve_id(self, name: str) -> int:
        username = name.strip()
        if not username:
            raise NotFoundError(name)

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self._client.post(
                    self._lookup_key.url,
                    json={"usernames": [username]},
                )
            except httpx.HTTPError as exc:
                raise ResolutionError(username, exc) from exc

            if is_rate_limited(response):
                if attempt < self.max_attempts:
                    logger.warning(
                        "Rate limited on username lookup. Waiting %.1fs before retry...",
                        self.backoff_seconds,
                    )
                    await self._sleep(self.backoff_seconds)
                continue

            return self._parse(username, response)

        raise RetriesExhaustedError(self._lookup_key, self.max_attempts)

    def _parse(self, username: str, response: httpx.Response) -> int:
        if not response.is_success:
            cause = UpstreamError(self._lookup_key, status_code=response.status_code)
            raise ResolutionError(username, cause)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ResolutionError(username, exc) from exc

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            cause = UpstreamError(self._lookup_key, detail="payload lacks a 'data' list")
            raise ResolutionError(username, cause)
        if not data:
            raise NotFoundError(username)

        entry = data[0]
        user_id = entry.get("id") if isinstance(entry, dict) else None
        if not isinstance(user_id, int):
            cause = UpstreamError(self._lookup_key, detail="lookup entry lacks an id")
            raise ResolutionError(username, cause)

        logger.info('Found user ID %d for "%s"', user_id, username)
        return user_id
