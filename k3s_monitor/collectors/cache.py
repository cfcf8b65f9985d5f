"""
Component health cache

A single-slot cache for the aggregated component results.

Features:
- TTL expiry (30 seconds by default)
- all-or-nothing: one entry for the whole component map
- thread safe
- injectable clock for tests
- hit/miss statistics
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .models import ComponentHealth

DEFAULT_TTL_SECONDS = 30.0


@dataclass(frozen=True)
class CacheEntry:
    data: Dict[str, ComponentHealth]
    timestamp: float


class HealthCache:
    """Single-slot TTL cache

    Example:
        cache = HealthCache(ttl_seconds=30)

        data = cache.get()
        if data is None:
            data = await compute()
            cache.put(data)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_seconds: lifetime of an entry in seconds (default 30)
            clock: monotonic time source in seconds
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: Optional[CacheEntry] = None
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0

    def is_expired(self) -> bool:
        """True when there is no entry or the entry is older than the TTL"""
        with self._lock:
            if self._entry is None:
                return True
            return self._clock() - self._entry.timestamp >= self.ttl_seconds

    def get(self) -> Optional[Dict[str, ComponentHealth]]:
        """Cached component map, or None when missing or expired"""
        with self._lock:
            if self.is_expired():
                self._misses += 1
                return None
            self._hits += 1
            return self._entry.data

    def now(self) -> float:
        """Current reading of the cache clock"""
        return self._clock()

    def put(self, data: Dict[str, ComponentHealth], timestamp: Optional[float] = None) -> None:
        """Replace the entry unconditionally

        Args:
            data: component map
            timestamp: clock reading taken when the data was captured
                (default: now)
        """
        with self._lock:
            if timestamp is None:
                timestamp = self._clock()
            self._entry = CacheEntry(data=data, timestamp=timestamp)

    @property
    def age_seconds(self) -> Optional[float]:
        with self._lock:
            if self._entry is None:
                return None
            return self._clock() - self._entry.timestamp

    def get_stats(self) -> Dict[str, Any]:
        """Cache statistics

        Returns:
            {
                "populated": bool,
                "age_seconds": float or None,
                "expired": bool,
                "hits": int,
                "misses": int,
                "hit_rate": float (0.0-1.0),
                "ttl_seconds": float
            }
        """
        with self._lock:
            total = self._hits + self._misses
            return {
                "populated": self._entry is not None,
                "age_seconds": self.age_seconds,
                "expired": self.is_expired(),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total > 0 else 0.0,
                "ttl_seconds": self.ttl_seconds,
            }

    def __repr__(self) -> str:
        stats = self.get_stats()
        return (
            f"HealthCache(populated={stats['populated']}, "
            f"hit_rate={stats['hit_rate']:.1%}, "
            f"ttl={stats['ttl_seconds']}s)"
        )
