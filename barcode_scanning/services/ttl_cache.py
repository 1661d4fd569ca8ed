"""
TTL cache for resolved barcode lookups.

This module provides a cache that maps normalized codes to resolved items
so that repeated scans of the same code within the TTL window do not hit
the inventory service again. The cache is shared by every input surface
of a scanner instance.
"""

import logging
from collections import OrderedDict
from typing import Any, Optional

from barcode_scanning.models.cache import CacheEntry
from barcode_scanning.utils.clock import Clock, MonotonicClock
from barcode_scanning.utils.code_normalization import normalize_code

logger = logging.getLogger(__name__)


class TTLCache:
    """
    In-memory cache of resolved items with a fixed time-to-live.

    Expired entries are never returned but are not removed on a miss;
    they stay in place until overwritten, invalidated, purged with
    cleanup_expired() or evicted by the optional size bound. A lookup
    never extends an entry's lifetime.

    Attributes:
        ttl_seconds: Time-to-live for cache entries (default: 300)
        max_entries: Optional bound; oldest-inserted entries are evicted first
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Optional[Clock] = None,
        max_entries: Optional[int] = None
    ):
        """
        Initialize TTL cache.

        Args:
            ttl_seconds: Time-to-live for cache entries in seconds
            clock: Clock used for insertion and expiry checks
            max_entries: Optional maximum number of entries (FIFO eviction)
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock or MonotonicClock()
        self._entries: 'OrderedDict[str, CacheEntry]' = OrderedDict()

        logger.info(f"TTLCache initialized with TTL={ttl_seconds}s")

    def get(self, key: str) -> Optional[Any]:
        """
        Get the item cached for a code.

        Args:
            key: Code to look up (normalized before lookup)

        Returns:
            Cached item, or None if missing or expired
        """
        normalized = normalize_code(key)
        if not normalized:
            return None

        entry = self._entries.get(normalized)
        if entry is None:
            return None

        if entry.is_expired(self.clock.now(), self.ttl_seconds):
            logger.debug(f"Cache entry expired for code: {normalized}")
            return None

        return entry.item

    def put(self, key: str, item: Any) -> None:
        """
        Cache an item for a code, replacing any existing entry.

        Args:
            key: Code the item was resolved from
            item: Resolved item payload
        """
        normalized = normalize_code(key)
        if not normalized:
            raise ValueError("Cannot cache an item under an empty code")

        # Re-inserting moves the key to the end so FIFO order follows insertion time
        self._entries.pop(normalized, None)
        self._entries[normalized] = CacheEntry(
            key=normalized,
            item=item,
            inserted_at=self.clock.now()
        )

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted oldest cache entry: {evicted_key}")

        logger.debug(f"Cached item for code {normalized} (cache size: {len(self._entries)})")

    def invalidate(self, key: str) -> bool:
        """
        Remove the entry for a code.

        Args:
            key: Code to invalidate

        Returns:
            True if an entry was removed
        """
        normalized = normalize_code(key)
        removed = self._entries.pop(normalized, None) is not None
        if removed:
            logger.debug(f"Invalidated cache entry for code: {normalized}")
        return removed

    def clear(self) -> None:
        """Remove all entries."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cache cleared ({count} entries)")

    def cleanup_expired(self) -> int:
        """
        Remove expired entries from the cache.

        Returns:
            Number of entries removed
        """
        now = self.clock.now()
        expired_keys = [
            key for key, entry in self._entries.items()
            if entry.is_expired(now, self.ttl_seconds)
        ]

        for key in expired_keys:
            del self._entries[key]

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired entries")

        return len(expired_keys)

    def size(self) -> int:
        """Number of stored entries, expired ones included."""
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
