"""
In-memory read-through cache with explicit TTL eviction.

A single instance is created by the application and handed to the services
that need it, so tests can build their own without touching shared state.
"""
import logging
import threading
import time
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger("incentives.cache")


class TTLCache:
    """Time-boxed key/value cache"""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, stored_at: float) -> bool:
        return self._clock() - stored_at < self.ttl_seconds

    def get(self, key: Hashable) -> Optional[Any]:
        """Return cached value, or None when missing or expired"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if not self._is_fresh(stored_at):
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, calling loader on a miss.

        The loader runs outside the lock; concurrent misses may load twice,
        the last writer wins.
        """
        value = self.get(key)
        if value is not None:
            return value
        value = loader()
        self.set(key, value)
        return value

    def invalidate(self, *prefix: Hashable) -> int:
        """
        Drop entries whose tuple key starts with prefix.

        Returns:
            Number of entries removed
        """
        with self._lock:
            doomed = [
                key for key in self._entries
                if isinstance(key, tuple) and key[:len(prefix)] == prefix
            ]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def evict_expired(self) -> int:
        """Remove all expired entries. Returns number removed."""
        with self._lock:
            doomed = [
                key for key, (stored_at, _) in self._entries.items()
                if not self._is_fresh(stored_at)
            ]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.debug(f"Evicted {len(doomed)} expired cache entries")
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
