"""Contract of the generic fetch layer, as seen by the services."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import RequestKey


@runtime_checkable
class Fetcher(Protocol):
    """Fetches the decoded payload of an idempotent read-only call.

    Rules:
    - `fetch` is async because it performs I/O (HTTP) and may back off.
    - Failures surface as `core.domain.errors` types, never as transport errors.
    """

    async def fetch(self, key: RequestKey) -> Any:
        ...
