"""
In-memory TTL Cache for ShopSnap Backend
Holds recent price comparison results keyed by list fingerprint
"""

import time
import threading
from typing import Any, Optional, Dict


class TTLCache:
    """Thread-safe in-memory cache with TTL expiration."""

    def __init__(self, max_size: int = 100, ttl_seconds: int = 300):
        """
        Initialize TTL cache.

        Args:
            max_size: Maximum number of items to store
            ttl_seconds: Time-to-live in seconds for cache entries
        """
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._max_size = max_size
        self._ttl_seconds = ttl_seconds
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache if exists and not expired.

        Returns:
            Cached value or None if not found/expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if time.time() > entry["expires_at"]:
                del self._cache[key]
                return None

            return entry["value"]

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set value in cache, evicting the oldest entry when full."""
        with self._lock:
            if len(self._cache) >= self._max_size and key not in self._cache:
                self._evict_oldest()

            now = time.time()
            self._cache[key] = {
                "value": value,
                "expires_at": now + (ttl if ttl is not None else self._ttl_seconds),
                "created_at": now,
            }

    def delete_prefix(self, prefix: str) -> int:
        """Drop every entry whose key starts with prefix."""
        with self._lock:
            doomed = [key for key in self._cache if key.startswith(prefix)]
            for key in doomed:
                del self._cache[key]
            return len(doomed)

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def _evict_oldest(self) -> None:
        if not self._cache:
            return
        oldest_key = min(self._cache.keys(), key=lambda k: self._cache[k]["created_at"])
        del self._cache[oldest_key]

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "size": len(self._cache),
                "max_size": self._max_size,
                "ttl_seconds": self._ttl_seconds,
            }


def get_cache() -> TTLCache:
    """Get or create the cache for the current app."""
    from flask import current_app

    cache = current_app.extensions.get("shopsnap.cache")
    if cache is None:
        cache = TTLCache(
            max_size=current_app.config.get("CACHE_MAX_SIZE", 100),
            ttl_seconds=current_app.config.get("CACHE_TTL_SECONDS", 300),
        )
        current_app.extensions["shopsnap.cache"] = cache
    return cache
