"""
In-Memory Cache Backend

This module implements the in-process key-value cache used by the catalog
when no external cache is configured.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional

from ..config.settings import settings


class KVCache:
    """
    In-memory key-value cache with LRU eviction.

    This class provides O(1) average-case time complexity for:
    - set: Insert or update a key-value pair
    - get: Retrieve a value by key
    - delete: Remove a key-value pair
    - exists: Check if a key exists

    keys_with_prefix() is O(n) in the number of cached keys and returns
    keys in least-recently-used first order.

    Internal Storage:
        Uses OrderedDict for O(1) operations with LRU ordering.
        When the cache is full, the least recently used key is evicted.

    Attributes:
        max_size: Maximum number of keys allowed in the cache
    """

    def __init__(self, max_size: int = None):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of keys (default from settings.CACHE_MAX_KEYS)
        """
        self.max_size = max_size if max_size is not None else settings.CACHE_MAX_KEYS

        # OrderedDict gives O(1) operations and keeps insertion/access order
        self._data: "OrderedDict[str, str]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def set(self, key: str, value: str) -> None:
        """
        Insert or update a key-value pair.

        Updating an existing key marks it as most recently used. Adding a
        new key to a full cache evicts the least recently used one.
        """
        if key in self._data:
            self._data[key] = value
            self._data.move_to_end(key)
            return

        if self.max_size <= 0:
            return
        if len(self._data) >= self.max_size:
            self._data.popitem(last=False)

        self._data[key] = value

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve the value for a given key.

        Returns:
            The value if found, None otherwise
        """
        if key not in self._data:
            self._misses += 1
            return None

        self._hits += 1
        self._data.move_to_end(key)
        return self._data[key]

    def delete(self, key: str) -> bool:
        """
        Delete a key-value pair.

        Returns:
            True if key was deleted, False if key didn't exist
        """
        return self._data.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        """Check if a key exists without touching its LRU position."""
        return key in self._data

    def keys_with_prefix(self, prefix: str) -> List[str]:
        """Return every key starting with ``prefix``."""
        return [key for key in self._data if key.startswith(prefix)]

    def size(self) -> int:
        """Get the current number of keys in the cache."""
        return len(self._data)

    def clear(self) -> None:
        """Remove all keys from the cache."""
        self._data.clear()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cache.

        Returns:
            Dictionary containing:
            - total_keys: Total keys in cache
            - max_size: Maximum capacity
            - utilization: Current usage as fraction of max_size
            - hits / misses: Lookup counters since creation
        """
        total = len(self._data)
        return {
            "total_keys": total,
            "max_size": self.max_size,
            "utilization": total / self.max_size if self.max_size > 0 else 0,
            "hits": self._hits,
            "misses": self._misses,
        }
