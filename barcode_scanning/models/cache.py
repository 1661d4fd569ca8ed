"""
Cache entry data model for resolved barcode lookups.

This module defines the dataclass for entries in the TTL cache, which
avoids redundant network lookups for codes resolved recently.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """
    Entry in the resolved-item cache.

    Attributes:
        key: Normalized code (case-folded, trimmed)
        item: Resolved item payload, passed through untouched
        inserted_at: Monotonic clock reading when the entry was written
    """

    key: str
    item: Any
    inserted_at: float

    def __post_init__(self):
        """Validate field constraints."""
        if not self.key:
            raise ValueError("key cannot be empty")

    def age(self, now: float) -> float:
        """Seconds elapsed since insertion."""
        return now - self.inserted_at

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        """
        Check if entry has expired.

        Args:
            now: Current clock reading in seconds
            ttl_seconds: Time-to-live in seconds

        Returns:
            True if now - inserted_at exceeds the TTL
        """
        return self.age(now) > ttl_seconds
