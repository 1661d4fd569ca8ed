"""
Unit tests for TTL cache.

Tests normalization, TTL expiry, invalidation and the optional size bound.
"""

import pytest

from barcode_scanning.services import TTLCache


class TestTTLCache:
    """Test suite for TTLCache class."""

    @pytest.fixture
    def cache(self, fake_clock):
        return TTLCache(ttl_seconds=300, clock=fake_clock)

    def test_cache_initialization(self):
        """Test cache initialization with default TTL."""
        cache = TTLCache()
        assert cache.ttl_seconds == 300
        assert cache.max_entries is None
        assert cache.size() == 0

    def test_invalid_ttl_rejected(self):
        with pytest.raises(ValueError, match="ttl_seconds"):
            TTLCache(ttl_seconds=0)

    def test_put_and_get(self, cache, widget_item):
        cache.put('SKU0099', widget_item)

        assert cache.get('SKU0099') == widget_item
        assert cache.size() == 1

    def test_get_normalizes_key(self, cache, widget_item):
        """Keys are compared case-insensitively and trimmed."""
        cache.put('SKU0099', widget_item)

        assert cache.get('sku0099') == widget_item
        assert cache.get('  Sku0099 ') == widget_item
        assert 'SKU0099' in cache

    def test_get_missing_returns_none(self, cache):
        assert cache.get('MISSING') is None
        assert cache.get('') is None
        assert cache.get(None) is None

    def test_entry_reachable_just_before_ttl(self, cache, fake_clock, widget_item):
        cache.put('SKU0099', widget_item)

        fake_clock.advance(300 - 1)

        assert cache.get('SKU0099') == widget_item

    def test_entry_unreachable_just_after_ttl(self, cache, fake_clock, widget_item):
        cache.put('SKU0099', widget_item)

        fake_clock.advance(300 + 1)

        assert cache.get('SKU0099') is None

    def test_expired_entry_not_evicted_on_miss(self, cache, fake_clock, widget_item):
        """Expiry is lazy: a miss skips the entry but leaves it in place."""
        cache.put('SKU0099', widget_item)
        fake_clock.advance(301)

        assert cache.get('SKU0099') is None
        assert cache.size() == 1

    def test_get_does_not_extend_lifetime(self, cache, fake_clock, widget_item):
        cache.put('SKU0099', widget_item)

        fake_clock.advance(200)
        assert cache.get('SKU0099') == widget_item

        fake_clock.advance(101)
        assert cache.get('SKU0099') is None

    def test_put_overwrites_with_fresh_insertion_time(self, cache, fake_clock, widget_item):
        cache.put('SKU0099', {'id': 1, 'sku': 'SKU0099'})
        fake_clock.advance(200)

        cache.put('sku0099', widget_item)
        fake_clock.advance(200)

        assert cache.get('SKU0099') == widget_item
        assert cache.size() == 1

    def test_put_empty_key_rejected(self, cache, widget_item):
        with pytest.raises(ValueError):
            cache.put('   ', widget_item)

    def test_invalidate(self, cache, widget_item):
        cache.put('SKU0099', widget_item)

        assert cache.invalidate('sku0099') is True
        assert cache.get('SKU0099') is None
        assert cache.invalidate('SKU0099') is False

    def test_clear(self, cache, widget_item):
        cache.put('A001', widget_item)
        cache.put('A002', widget_item)

        cache.clear()

        assert cache.size() == 0
        assert cache.get('A001') is None

    def test_cleanup_expired_removes_only_expired(self, cache, fake_clock, widget_item):
        cache.put('OLD001', widget_item)
        fake_clock.advance(200)
        cache.put('NEW001', widget_item)
        fake_clock.advance(150)

        removed = cache.cleanup_expired()

        assert removed == 1
        assert cache.size() == 1
        assert cache.get('NEW001') == widget_item

    def test_max_entries_evicts_oldest_inserted(self, fake_clock):
        cache = TTLCache(ttl_seconds=300, clock=fake_clock, max_entries=2)

        cache.put('A001', {'id': 1})
        cache.put('A002', {'id': 2})
        cache.put('A001', {'id': 11})  # re-insert moves A001 to the back
        cache.put('A003', {'id': 3})

        assert cache.size() == 2
        assert cache.get('A002') is None
        assert cache.get('A001') == {'id': 11}
        assert cache.get('A003') == {'id': 3}
