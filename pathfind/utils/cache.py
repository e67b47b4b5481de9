from __future__ import annotations

import time
from typing import Callable, Dict, List, NamedTuple, Optional

from pathfind.models import Prediction

CACHE_TTL_SEC = 60.0
CACHE_MAX_ENTRIES = 50


class CacheEntry(NamedTuple):
    predictions: List[Prediction]
    timestamp: float


def cache_key(query: str, types: str) -> str:
    return f"{query.lower()}_{types}"


class ResultCache:
    """Time-bounded prediction cache keyed by (query, type filter).

    Expired entries are ignored rather than purged. Once more than
    ``max_entries`` keys are held, the oldest-inserted key goes first;
    reads do not refresh an entry's position.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SEC,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, query: str, types: str) -> Optional[List[Prediction]]:
        entry = self._entries.get(cache_key(query, types))
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            return None
        return list(entry.predictions)

    def put(self, query: str, types: str, predictions: List[Prediction]) -> None:
        self._entries[cache_key(query, types)] = CacheEntry(list(predictions), self._clock())
        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def keys(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
