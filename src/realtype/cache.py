#!/usr/bin/env python3
"""
Caching module for realtype.

Resolving the composite label of a value walks the ranked rule list with
issubclass checks. The answer only depends on the value's class, so it is
memoized here in a bounded LRU cache keyed by class.
"""

import logging
import threading
from typing import Optional, Dict, Any

from cachetools import LRUCache

from .config import get_config


class KindCache:
    """Bounded class -> label cache with hit/miss statistics."""

    def __init__(self, max_size: int = 256):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of classes to remember
        """
        self.max_size = max_size
        self.memory_cache = LRUCache(maxsize=max_size)
        self._lock = threading.RLock()

        self.cache_hits = 0
        self.cache_misses = 0

    def get(self, cls: type) -> Optional[str]:
        """Return the cached label for a class, or None on a miss."""
        with self._lock:
            label = self.memory_cache.get(cls)
            if label is None:
                self.cache_misses += 1
            else:
                self.cache_hits += 1
            return label

    def put(self, cls: type, label: str) -> None:
        """Remember the label resolved for a class."""
        with self._lock:
            self.memory_cache[cls] = label
        logging.debug(f"Cached label '{label}' for {cls.__qualname__}")

    def clear(self) -> int:
        """Clear all cache entries and return the number of entries cleared."""
        with self._lock:
            cleared = len(self.memory_cache)
            self.memory_cache.clear()
            self.cache_hits = 0
            self.cache_misses = 0

        logging.debug(f"Cleared {cleared} kind cache entries")
        return cleared

    def __len__(self) -> int:
        with self._lock:
            return len(self.memory_cache)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total_requests = self.cache_hits + self.cache_misses
            hit_rate = (self.cache_hits / total_requests * 100) if total_requests > 0 else 0

            return {
                'cache_hits': self.cache_hits,
                'cache_misses': self.cache_misses,
                'hit_rate_percent': hit_rate,
                'cache_size': len(self.memory_cache),
                'max_size': self.max_size,
            }


# Global cache instance
_cache_instance: Optional[KindCache] = None
_cache_lock = threading.Lock()


def get_cache() -> KindCache:
    """Get the global cache instance."""
    global _cache_instance
    if _cache_instance is None:
        with _cache_lock:
            if _cache_instance is None:
                _cache_instance = KindCache(max_size=get_config().cache_max_size)
    return _cache_instance


def set_cache(cache: Optional[KindCache]) -> None:
    """Set the global cache instance. None drops it so the next get_cache() rebuilds it."""
    global _cache_instance
    _cache_instance = cache
