"""In-memory response cache (process lifetime).

Known growth characteristic: there is no size bound and no expiry, so a
long-lived process keeps one entry per distinct request identity it ever
fetched. Eviction would change which calls hit the upstream and is not done.
"""

from __future__ import annotations

from typing import Any


class InMemoryResponseCache:
    """Dict-backed implementation of `core.interfaces.cache.ResponseCache`."""

    def __init__(self) -> None:
        self._store: dict[str, Any] = {}

    def contains(self, key: str) -> bool:
        return key in self._store

    def get(self, key: str) -> Any | None:
        return self._store.get(key)

    def set(self, key: str, value: Any) -> None:
        self._store[key] = value

    def clear(self) -> None:
        self._store.clear()

    def size(self) -> int:
        return len(self._store)


# Process-wide instance shared by every check that does not inject its own.
_default_cache: InMemoryResponseCache | None = None


def default_cache() -> InMemoryResponseCache:
    """Get or create the process-wide cache."""

    global _default_cache

    if _default_cache is None:
        _default_cache = InMemoryResponseCache()
    return _default_cache


def reset_default_cache() -> None:
    """Drop the process-wide cache (useful for testing)."""

    global _default_cache
    _default_cache = None
