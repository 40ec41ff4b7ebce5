"""
In-memory HTTP response cache for remote_image.
A bounded LRU store. It backs the Hishel storage used by the caching
transport and answers the synchronous cache lookup used by controllers.
"""

import threading
from collections import OrderedDict
from typing import Optional

from ..config import CONFIG, format_size
from ..logger import get_logger
from .cache_keys import URLLike, make_response_cache_key
from .models import CachedResponse

_logger = get_logger("cache")


class ResponseCache:
    """A simple LRU cache for stored HTTP responses."""

    def __init__(self, capacity: int = CONFIG["CACHE_CAPACITY"],
                 max_bytes: int = CONFIG["CACHE_MAX_BYTES"]):
        """
        Initialize the cache.

        Args:
            capacity: Maximum number of responses to store
            max_bytes: Maximum total body size of stored responses
        """
        if capacity <= 0:
            raise ValueError("Cache capacity must be positive")
        if max_bytes <= 0:
            raise ValueError("Cache byte budget must be positive")

        self._cache: OrderedDict = OrderedDict()
        self._capacity = capacity
        self._max_bytes = max_bytes
        self._total_bytes = 0
        self._lock = threading.RLock()

        # Statistics
        self._access_count = 0
        self._hit_count = 0
        self._eviction_count = 0

    def get(self, key: tuple) -> Optional[CachedResponse]:
        """
        Retrieve a stored response.

        Args:
            key: Cache key built with ``make_response_cache_key``

        Returns:
            The stored response or None if not found
        """
        with self._lock:
            self._access_count += 1

            if key not in self._cache:
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)
            self._hit_count += 1
            return self._cache[key]

    def put(self, key: tuple, value: CachedResponse):
        """
        Store a response.

        Args:
            key: Cache key
            value: Response to store
        """
        if not isinstance(value, CachedResponse):
            raise TypeError(f"Expected CachedResponse for key {key!r}, got {type(value).__name__}")

        if value.size > self._max_bytes:
            _logger.debug("cache put skipped (too large): key=%s size=%s", key, format_size(value.size))
            return

        with self._lock:
            if key in self._cache:
                self._total_bytes -= self._cache[key].size
                self._cache[key] = value
                self._cache.move_to_end(key)
            else:
                self._cache[key] = value
            self._total_bytes += value.size
            self._evict_overflow()

    def remove(self, key: tuple) -> bool:
        """Drop one entry. Returns True if it was present."""
        with self._lock:
            entry = self._cache.pop(key, None)
            if entry is None:
                return False
            self._total_bytes -= entry.size
            return True

    def _evict_overflow(self):
        # Remove least recently used entries (first items)
        while self._cache and (len(self._cache) > self._capacity or self._total_bytes > self._max_bytes):
            removed_key, removed = self._cache.popitem(last=False)
            self._total_bytes -= removed.size
            self._eviction_count += 1
            _logger.debug("cache evict: key=%s size=%s", removed_key, format_size(removed.size))

    def clear(self):
        """Clear all entries and reset statistics."""
        with self._lock:
            self._cache.clear()
            self._total_bytes = 0

            self._access_count = 0
            self._hit_count = 0
            self._eviction_count = 0

    def resize(self, new_capacity: int):
        """
        Resize the cache capacity.

        Args:
            new_capacity: New cache capacity
        """
        if new_capacity <= 0:
            raise ValueError("Cache capacity must be positive")

        with self._lock:
            self._capacity = new_capacity
            self._evict_overflow()

    def cached_response_for(self, url: URLLike) -> Optional[CachedResponse]:
        """Stored GET response for ``url`` regardless of freshness."""
        return self.get(make_response_cache_key(url))

    def cached_data_for(self, url: URLLike) -> Optional[bytes]:
        """Stored body for ``url`` regardless of freshness."""
        entry = self.cached_response_for(url)
        return entry.content if entry is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: tuple) -> bool:
        with self._lock:
            return key in self._cache

    @property
    def hit_rate(self) -> float:
        """Calculate and return the cache hit rate."""
        with self._lock:
            if self._access_count == 0:
                return 0.0
            return self._hit_count / self._access_count

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    @property
    def total_bytes(self) -> int:
        with self._lock:
            return self._total_bytes

    @property
    def stats(self) -> dict:
        """Return cache statistics."""
        with self._lock:
            return {
                'size': len(self._cache),
                'capacity': self._capacity,
                'total_bytes': self._total_bytes,
                'max_bytes': self._max_bytes,
                'access_count': self._access_count,
                'hit_count': self._hit_count,
                'eviction_count': self._eviction_count,
                'hit_rate': self.hit_rate
            }


_shared_cache: Optional[ResponseCache] = None
_shared_lock = threading.Lock()


def shared_cache() -> ResponseCache:
    """Process-wide default response cache, created on first use."""
    global _shared_cache
    with _shared_lock:
        if _shared_cache is None:
            _shared_cache = ResponseCache()
            _logger.debug("shared response cache created: capacity=%s max_bytes=%s",
                          _shared_cache.capacity, format_size(_shared_cache.max_bytes))
        return _shared_cache
