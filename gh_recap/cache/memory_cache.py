"""In-memory TTL cache for unauthenticated REST recap results."""

import threading
import time

from cachetools import TTLCache


def make_key(username, year):
    """Cache key for a REST recap lookup."""
    return f"rest:{username}:{year}"


class RecapCache:
    """Thread-safe TTL cache with an injectable clock.

    Entries carry their own expiry (set from the clock at insert time) and are
    checked on read; there is no background eviction. Concurrent writers for
    the same key overwrite each other, last writer wins.
    """

    def __init__(self, ttl_seconds=60, maxsize=256, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._cache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=clock)
        self._lock = threading.Lock()

    def get(self, key, default=None):
        with self._lock:
            return self._cache.get(key, default)

    def set(self, key, value):
        with self._lock:
            self._cache[key] = value

    def get_or_set(self, key, factory):
        """Return the cached value for key, computing and storing it on a miss.

        The factory runs outside the lock so a slow upstream call does not
        block readers of other keys.
        """
        value = self.get(key)
        if value is not None:
            return value
        value = factory()
        self.set(key, value)
        return value

    def clear(self):
        with self._lock:
            self._cache.clear()

    def __len__(self):
        with self._lock:
            # Touching expire() drops stale entries before counting.
            self._cache.expire()
            return len(self._cache)

    def __contains__(self, key):
        with self._lock:
            return key in self._cache
