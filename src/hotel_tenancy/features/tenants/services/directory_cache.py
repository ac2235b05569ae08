"""In-memory TTL cache of resolved tenant contexts.

Entries older than the TTL are treated as absent and evicted on read.
The clock is injectable so expiry can be driven in tests.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ....config.constants import CacheTTL

logger = logging.getLogger(__name__)


@dataclass
class DirectoryCacheEntry:
    """Cached value and its monotonic insertion time."""

    value: Any
    inserted_at: float

    def age(self, now: float) -> float:
        return now - self.inserted_at


class DirectoryCache:
    """Tenant id -> context cache with a fixed TTL."""

    def __init__(
        self,
        ttl_seconds: float = CacheTTL.TENANT_DIRECTORY,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, DirectoryCacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._expirations = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[Any]:
        """Live value for ``key``, or None."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        if entry.age(self._clock()) >= self._ttl:
            # Only drop the entry we inspected
            if self._entries.get(key) is entry:
                del self._entries[key]
            self._expirations += 1
            self._misses += 1
            logger.debug(f"Directory entry for {key} expired")
            return None
        self._hits += 1
        return entry.value

    def put(self, key: str, value: Any) -> None:
        """Insert or overwrite the entry for ``key``."""
        self._entries[key] = DirectoryCacheEntry(value=value, inserted_at=self._clock())

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.age(self._clock()) < self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """Cache statistics."""
        now = self._clock()
        return {
            "size": len(self._entries),
            "ttl_seconds": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "expirations": self._expirations,
            "entries": {
                key: {"age_seconds": round(entry.age(now), 3)}
                for key, entry in self._entries.items()
            },
        }
