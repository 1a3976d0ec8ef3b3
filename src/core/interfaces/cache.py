"""Contract of the response cache.

Why a Protocol:
- The cache is the only mutable state shared across concurrent checks; making
  it an explicit, injectable component lets tests substitute a fake and
  observe exactly what was stored.

Concurrency contract:
- Single event loop, so individual operations never interleave.
- `contains` followed by `set` is NOT atomic across an await: two fetches of
  the same uncached key may both miss and both populate it.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResponseCache(Protocol):
    """Process-lifetime key/value store for decoded response payloads.

    Design rules:
    - No expiry and no eviction: a stored key stays until `clear`.
    - Keys are canonical request identities (`RequestKey.canonical`).
    """

    def contains(self, key: str) -> bool:
        ...

    def get(self, key: str) -> Any | None:
        """Return the stored payload, or `None` if the key was never stored."""

        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def clear(self) -> None:
        ...

    def size(self) -> int:
        ...
