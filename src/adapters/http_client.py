"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts and headers for every call to the profile service.
- Eases testing: an `httpx.MockTransport` can be injected in place of the
  network.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

RATE_LIMITED = 429


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so the fetch layer and the resolver behave
      the same way.
    - One client is shared by every call of a run (connection pooling).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def is_rate_limited(response: httpx.Response) -> bool:
    return response.status_code == RATE_LIMITED
