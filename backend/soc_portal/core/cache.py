"""
TTL Cache - short-lived in-memory results keyed by identity

Handlers receive an instance through a dependency instead of sharing a
module-level dict, so each app (and each test) owns its own cache.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    created_at: float


class TTLCache(Generic[V]):
    """
    LRU cache with per-entry TTL.

    Features:
    - Entries older than `ttl` seconds are treated as absent
    - Oldest entries are evicted once `max_size` is reached
    - Clock is injectable for tests
    """

    DEFAULT_TTL = 5.0
    MAX_SIZE = 1000

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_size: int = MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.max_size = max_size
        self._clock = clock
        self._cache: "OrderedDict[str, CacheEntry[V]]" = OrderedDict()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0
        }

    def get(self, key: str) -> Optional[V]:
        entry = self._cache.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        if self._clock() - entry.created_at >= self.ttl:
            del self._cache[key]
            self._stats["misses"] += 1
            return None

        self._cache.move_to_end(key)
        self._stats["hits"] += 1
        return entry.value

    def set(self, key: str, value: V) -> None:
        self._purge_expired()
        if key in self._cache:
            del self._cache[key]
        elif len(self._cache) >= self.max_size:
            self._cache.popitem(last=False)
            self._stats["evictions"] += 1
        self._cache[key] = CacheEntry(value=value, created_at=self._clock())

    def invalidate(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [k for k, e in self._cache.items() if now - e.created_at >= self.ttl]
        for key in expired:
            del self._cache[key]

    def __len__(self) -> int:
        return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        total = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "size": len(self._cache),
            "hit_rate": self._stats["hits"] / total if total else 0.0,
        }
