"""Cache port and the process-local TTL implementation used by default."""

from __future__ import annotations

import time
from typing import Any, Callable, Protocol

MISSING: Any = object()


class CacheBackend(Protocol):
    def get(self, key: str) -> Any:
        """Return the cached value or ``MISSING``."""

    def set(self, key: str, value: Any, ttl: float | None = None) -> None: ...

    def evict(self, key: str) -> None: ...


class InMemoryTTLCache:
    """Dictionary cache whose entries expire after ``default_ttl`` seconds.

    Entries are only visible to the current process; there is no
    cross-instance invalidation.
    """

    def __init__(
        self,
        default_ttl: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return MISSING
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return MISSING
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = (self._clock() + lifetime, value)

    def evict(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not MISSING

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CacheBackend", "InMemoryTTLCache", "MISSING"]
