"""
Unit tests for scan resolver.

Tests the cache-first strategy, error delivery, retry integration and the
per-surface single-flight guard.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from barcode_scanning.exceptions import (
    ItemNotFoundError,
    NetworkError,
    ShortCodeError,
    UnexpectedScanError
)
from barcode_scanning.models import RetryOptions
from barcode_scanning.services import RetryPolicy, ScanResolver, TTLCache


@pytest.fixture
def lookup(widget_item):
    return AsyncMock(return_value=widget_item)


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def resolver(lookup, default_config, fake_clock, feedback, sleep):
    options = RetryOptions.for_scanning()
    return ScanResolver(
        lookup=lookup,
        config=default_config,
        cache=TTLCache(ttl_seconds=300, clock=fake_clock),
        retry_policy=RetryPolicy(options, sleep=sleep),
        retry_options=options,
        feedback=feedback,
        clock=fake_clock
    )


class TestCacheFirstResolution:
    """Test suite for cache hits and misses."""

    @pytest.mark.asyncio
    async def test_miss_calls_lookup_and_caches(self, resolver, lookup, widget_item, feedback):
        on_success = Mock()
        on_error = Mock()

        result = await resolver.resolve('SKU0099', on_success, on_error)

        assert result.ok
        assert result.item == widget_item
        assert result.from_cache is False
        lookup.assert_awaited_once_with('SKU0099')
        on_success.assert_called_once_with(widget_item, 'SKU0099')
        on_error.assert_not_called()
        feedback.success.assert_called_once()
        assert resolver.cache.get('sku0099') == widget_item

    @pytest.mark.asyncio
    async def test_repeated_code_looked_up_once(self, resolver, lookup, widget_item):
        first = await resolver.resolve('SKU0099')
        second = await resolver.resolve('sku0099')

        assert lookup.await_count == 1
        assert second.from_cache is True
        assert second.item == first.item == widget_item

    @pytest.mark.asyncio
    async def test_cache_hit_signals_feedback(self, resolver, feedback, widget_item):
        resolver.cache.put('SKU0099', widget_item)
        on_success = Mock()

        await resolver.resolve('SKU0099', on_success)

        on_success.assert_called_once_with(widget_item, 'SKU0099')
        feedback.success.assert_called_once()

    @pytest.mark.asyncio
    async def test_expired_entry_triggers_new_lookup(self, resolver, lookup, fake_clock):
        await resolver.resolve('SKU0099')
        fake_clock.advance(301)

        result = await resolver.resolve('SKU0099')

        assert result.from_cache is False
        assert lookup.await_count == 2

    @pytest.mark.asyncio
    async def test_code_is_trimmed_before_lookup(self, resolver, lookup):
        await resolver.resolve('  SKU0099  ')

        lookup.assert_awaited_once_with('SKU0099')

    @pytest.mark.asyncio
    async def test_item_with_only_id_is_accepted(self, resolver, lookup):
        lookup.return_value = {'id': 42}

        result = await resolver.resolve('SKU0099')

        assert result.ok
        assert result.item == {'id': 42}


class TestResolutionErrors:
    """Test suite for failure delivery."""

    @pytest.mark.asyncio
    async def test_short_code_fails_without_lookup(self, resolver, lookup, feedback):
        on_success = Mock()
        on_error = Mock()

        result = await resolver.resolve('AB', on_success, on_error)

        assert isinstance(result.error, ShortCodeError)
        on_error.assert_called_once_with(result.error, 'AB')
        on_success.assert_not_called()
        lookup.assert_not_awaited()
        feedback.success.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize('payload', [None, {}, {'name': 'Widget'}, {'sku': '', 'id': None}, []])
    async def test_invalid_payload_is_not_found(self, resolver, lookup, payload):
        lookup.return_value = payload
        on_error = Mock()

        result = await resolver.resolve('SKU0099', on_error=on_error)

        assert isinstance(result.error, ItemNotFoundError)
        on_error.assert_called_once()
        assert resolver.cache.size() == 0

    @pytest.mark.asyncio
    async def test_not_found_is_not_cached(self, resolver, lookup):
        lookup.side_effect = ItemNotFoundError('NOPE1')

        await resolver.resolve('NOPE1')
        await resolver.resolve('NOPE1')

        assert lookup.await_count == 2

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self, resolver, lookup, sleep):
        lookup.side_effect = ItemNotFoundError('NOPE1')

        result = await resolver.resolve('NOPE1')

        assert isinstance(result.error, ItemNotFoundError)
        assert lookup.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transient_error_retried_then_succeeds(self, resolver, lookup, sleep, widget_item):
        lookup.side_effect = [NetworkError("reset"), widget_item]

        result = await resolver.resolve('SKU0099')

        assert result.item == widget_item
        assert lookup.await_count == 2
        sleep.assert_awaited_once_with(0.5)

    @pytest.mark.asyncio
    async def test_exhausted_transient_error_delivered_verbatim(self, resolver, lookup):
        error = NetworkError("offline")
        lookup.side_effect = error
        on_error = Mock()

        result = await resolver.resolve('SKU0099', on_error=on_error)

        assert result.error is error
        assert lookup.await_count == 3
        on_error.assert_called_once_with(error, 'SKU0099')

    @pytest.mark.asyncio
    async def test_builtin_timeout_delivered_verbatim(self, resolver, lookup):
        lookup.side_effect = TimeoutError()

        result = await resolver.resolve('SKU0099')

        assert isinstance(result.error, TimeoutError)
        assert lookup.await_count == 3

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, resolver, lookup):
        original = KeyError('unit_price')
        lookup.side_effect = original

        result = await resolver.resolve('SKU0099')

        assert isinstance(result.error, UnexpectedScanError)
        assert result.error.original is original
        assert result.error.__cause__ is original
        assert lookup.await_count == 1

    @pytest.mark.asyncio
    async def test_resolve_item_raises_terminal_error(self, resolver, lookup):
        lookup.side_effect = ItemNotFoundError('NOPE1')

        with pytest.raises(ItemNotFoundError):
            await resolver.resolve_item('NOPE1')

    @pytest.mark.asyncio
    async def test_resolve_item_returns_item(self, resolver, widget_item):
        assert await resolver.resolve_item('SKU0099') == widget_item

    @pytest.mark.asyncio
    async def test_failure_reported_to_metrics(self, lookup, default_config, sleep):
        metrics = Mock()
        lookup.side_effect = NetworkError("offline")
        options = RetryOptions.for_scanning()
        resolver = ScanResolver(
            lookup=lookup,
            config=default_config,
            retry_policy=RetryPolicy(options, sleep=sleep),
            retry_options=options,
            metrics_emitter=metrics
        )

        await resolver.resolve('SKU0099', surface_id='sku-input')

        metrics.emit_cache_miss.assert_called_once_with('sku-input')
        metrics.emit_scan_failed.assert_called_once_with('NetworkError', 'sku-input')
        metrics.emit_lookup_latency.assert_called_once()

    @pytest.mark.asyncio
    async def test_default_policy_reports_retries(self, lookup, default_config, widget_item):
        metrics = Mock()
        lookup.side_effect = [NetworkError("reset"), widget_item]
        resolver = ScanResolver(
            lookup=lookup,
            config=default_config,
            retry_options=RetryOptions(max_retries=1, initial_delay_ms=0),
            metrics_emitter=metrics
        )

        await resolver.resolve('SKU0099')

        metrics.emit_retry.assert_called_once_with(1, 'NetworkError')

    @pytest.mark.asyncio
    async def test_injected_policy_options_are_used(self, lookup, default_config, sleep):
        lookup.side_effect = NetworkError("offline")
        policy = RetryPolicy(RetryOptions(max_retries=5, initial_delay_ms=0), sleep=sleep)
        resolver = ScanResolver(lookup=lookup, config=default_config, retry_policy=policy)

        result = await resolver.resolve('SKU0099')

        assert isinstance(result.error, NetworkError)
        assert lookup.await_count == 6
        assert resolver.retry_options is policy.options

    @pytest.mark.asyncio
    async def test_explicit_options_override_injected_policy(self, lookup, default_config, sleep):
        lookup.side_effect = NetworkError("offline")
        policy = RetryPolicy(RetryOptions(max_retries=5, initial_delay_ms=0), sleep=sleep)
        resolver = ScanResolver(
            lookup=lookup,
            config=default_config,
            retry_policy=policy,
            retry_options=RetryOptions(max_retries=1, initial_delay_ms=0)
        )

        await resolver.resolve('SKU0099')

        assert lookup.await_count == 2


class TestSingleFlight:
    """Test suite for per-surface single-flight."""

    @pytest.mark.asyncio
    async def test_overlapping_resolve_for_same_surface_is_dropped(self, resolver, lookup, widget_item):
        release = asyncio.Event()

        async def slow_lookup(code):
            await release.wait()
            return widget_item

        lookup.side_effect = slow_lookup
        first_success = Mock()
        second_success = Mock()
        second_error = Mock()

        first = asyncio.create_task(
            resolver.resolve('SKU0099', first_success, surface_id='sku-input')
        )
        await asyncio.sleep(0)
        assert resolver.is_resolving('sku-input')

        second = await resolver.resolve(
            'SKU0100', second_success, second_error, surface_id='sku-input'
        )

        release.set()
        first_result = await first

        assert second.dropped is True
        second_success.assert_not_called()
        second_error.assert_not_called()
        assert first_result.item == widget_item
        first_success.assert_called_once()
        assert lookup.await_count == 1
        assert not resolver.is_resolving('sku-input')

    @pytest.mark.asyncio
    async def test_different_surfaces_resolve_concurrently(self, resolver, lookup, widget_item):
        release = asyncio.Event()

        async def slow_lookup(code):
            await release.wait()
            return widget_item

        lookup.side_effect = slow_lookup

        tasks = [
            asyncio.create_task(resolver.resolve('SKU0099', surface_id='sku-input')),
            asyncio.create_task(resolver.resolve('SKU0100', surface_id='quick-sale'))
        ]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks)

        assert all(r.ok for r in results)
        assert lookup.await_count == 2

    @pytest.mark.asyncio
    async def test_on_complete_called_after_success_and_failure(self, resolver, lookup):
        on_complete = Mock()

        await resolver.resolve('SKU0099', surface_id='sku-input', on_complete=on_complete)
        lookup.side_effect = ItemNotFoundError('NOPE1')
        await resolver.resolve('NOPE1', surface_id='sku-input', on_complete=on_complete)

        assert on_complete.call_count == 2
        on_complete.assert_called_with('sku-input')

    @pytest.mark.asyncio
    async def test_on_complete_called_when_callback_raises(self, resolver):
        on_complete = Mock()
        on_success = Mock(side_effect=RuntimeError("view gone"))

        with pytest.raises(RuntimeError):
            await resolver.resolve(
                'SKU0099', on_success, surface_id='sku-input', on_complete=on_complete
            )

        on_complete.assert_called_once_with('sku-input')
        assert not resolver.is_resolving('sku-input')

    @pytest.mark.asyncio
    async def test_dropped_call_does_not_complete(self, resolver, lookup, widget_item):
        release = asyncio.Event()

        async def slow_lookup(code):
            await release.wait()
            return widget_item

        lookup.side_effect = slow_lookup
        on_complete = Mock()

        task = asyncio.create_task(resolver.resolve('SKU0099', surface_id='sku-input'))
        await asyncio.sleep(0)
        await resolver.resolve('SKU0099', surface_id='sku-input', on_complete=on_complete)

        on_complete.assert_not_called()

        release.set()
        await task

    @pytest.mark.asyncio
    async def test_unguarded_calls_for_same_surface_both_run(self, resolver, lookup, widget_item):
        """Callers that already hold the surface skip the in-flight check."""
        release = asyncio.Event()

        async def slow_lookup(code):
            await release.wait()
            return widget_item

        lookup.side_effect = slow_lookup
        on_complete = Mock()

        tasks = [
            asyncio.create_task(resolver.resolve(
                code, surface_id='sku-input', on_complete=on_complete, single_flight=False
            ))
            for code in ('SKU0099', 'SKU0100')
        ]
        await asyncio.sleep(0)
        assert not resolver.is_resolving('sku-input')

        release.set()
        results = await asyncio.gather(*tasks)

        assert [r.dropped for r in results] == [False, False]
        assert lookup.await_count == 2
        assert on_complete.call_count == 2
