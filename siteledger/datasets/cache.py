"""Process-wide cache of parsed record sets.

Entries are keyed by source identifier. Eviction is FIFO on insertion order:
replacing an existing key keeps its position, and once the cache holds more
than ``max_entries`` keys the oldest ones are dropped. Staleness is never
checked here; callers combine :meth:`DatasetCache.is_fresh` with a freshly
read modification signature.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 5
DEFAULT_TTL_MS = 30000


@dataclass(slots=True, frozen=True)
class CacheEntry:
    records: Tuple[Dict[str, Any], ...]
    signature: int
    cached_at: float


@dataclass(slots=True, frozen=True)
class CacheStats:
    size: int
    keys: List[str]


class DatasetCache:
    """Bounded mapping from source identifier to :class:`CacheEntry`."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> List[str]:
        """Store *entry* under *key* and return the keys evicted to make room."""

        self._entries[key] = entry
        evicted: List[str] = []
        while len(self._entries) > self.max_entries:
            oldest, _ = self._entries.popitem(last=False)
            evicted.append(oldest)
            logger.debug("Evicted cached dataset %s", oldest)
        return evicted

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._entries), keys=list(self._entries))

    @staticmethod
    def is_fresh(entry: CacheEntry, signature: int, now: float, ttl_ms: float) -> bool:
        """An entry is fresh when its signature matches and it is younger than the TTL."""

        return entry.signature == signature and (now - entry.cached_at) * 1000 < ttl_ms


__all__ = ["CacheEntry", "CacheStats", "DatasetCache", "DEFAULT_MAX_ENTRIES", "DEFAULT_TTL_MS"]
