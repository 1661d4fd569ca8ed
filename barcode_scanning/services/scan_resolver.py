"""
Scan resolver for turning codes into inventory items.

This module provides the ScanResolver class, the orchestrator of the scan
pipeline. It implements a cache-first strategy:
1. Validate the code length
2. Serve the item from the TTL cache when possible
3. Otherwise call the lookup service through the retry policy
4. Validate and cache the returned item

Resolutions started for an input surface are single-flight: while one is
running, further calls for the same surface are dropped.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Set

from barcode_scanning.exceptions import (
    ItemNotFoundError,
    ScanError,
    ShortCodeError,
    UnexpectedScanError
)
from barcode_scanning.models.configuration import ScannerConfig
from barcode_scanning.models.retry_options import RetryAttempt, RetryOptions
from barcode_scanning.models.scan_result import ScanResult
from barcode_scanning.services.feedback_emitter import FeedbackEmitter
from barcode_scanning.services.retry_policy import RetryPolicy
from barcode_scanning.services.ttl_cache import TTLCache
from barcode_scanning.utils.clock import Clock, MonotonicClock, elapsed_ms
from barcode_scanning.utils.code_normalization import item_identity
from barcode_scanning.utils.structured_logger import log_scan_error, log_scan_resolved

logger = logging.getLogger(__name__)

LookupFn = Callable[[str], Awaitable[Any]]
SuccessCallback = Callable[[Any, str], None]
ErrorCallback = Callable[[BaseException, str], None]


class ScanResolver:
    """
    Resolves scanned codes to items with caching, retry and single-flight.

    Two entry points share one implementation: ``resolve`` delivers the
    outcome through callbacks and returns a ScanResult without raising for
    expected failures, ``resolve_item`` returns the item or raises the
    terminal error.
    """

    def __init__(
        self,
        lookup: LookupFn,
        config: Optional[ScannerConfig] = None,
        cache: Optional[TTLCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        retry_options: Optional[RetryOptions] = None,
        feedback: Optional[FeedbackEmitter] = None,
        clock: Optional[Clock] = None,
        metrics_emitter=None
    ):
        """
        Initialize scan resolver.

        Args:
            lookup: Coroutine function returning the item for a code
            config: Scanner configuration
            cache: Shared TTL cache (created from config if None)
            retry_policy: Retry policy (created from retry_options if None)
            retry_options: Retry options for lookups (the injected policy's
                options, or scanning defaults, if None)
            feedback: Success feedback emitter (silent if None)
            clock: Clock used for latency measurement and the default cache
            metrics_emitter: Optional ScanMetrics
        """
        self.lookup = lookup
        self.config = config or ScannerConfig()
        self.clock = clock or MonotonicClock()
        self.cache = cache or TTLCache(
            ttl_seconds=self.config.cache_ttl_seconds,
            clock=self.clock,
            max_entries=self.config.cache_max_entries
        )
        if retry_policy is not None:
            self.retry_policy = retry_policy
            self.retry_options = retry_options or retry_policy.options
        else:
            self.retry_options = retry_options or RetryOptions.for_scanning()
            self.retry_policy = RetryPolicy(self.retry_options, on_retry=self._on_retry)
        self.feedback = feedback
        self.metrics_emitter = metrics_emitter
        self._in_flight: Set[str] = set()

    def is_resolving(self, surface_id: str) -> bool:
        return surface_id in self._in_flight

    async def resolve(
        self,
        code: str,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        surface_id: Optional[str] = None,
        on_complete: Optional[Callable[[str], None]] = None,
        single_flight: bool = True
    ) -> ScanResult:
        """
        Resolve a code and deliver the outcome through callbacks.

        ``on_error`` is called exactly once per failed resolution and
        ``on_success`` once per successful one. When ``surface_id`` is given
        and another resolution for that surface is running, the call is
        dropped: no callback fires and the result has ``dropped=True``.
        Otherwise ``on_complete(surface_id)`` is always called when the
        resolution finishes, whatever its outcome.

        Args:
            code: Code to resolve
            on_success: Called with (item, code) on success
            on_error: Called with (error, code) on failure
            surface_id: Input surface the code came from
            on_complete: Called with surface_id once the resolution finishes
            single_flight: Drop the call while another one for surface_id
                runs. Callers that already hold the surface (the scanner
                facade claims it through the debouncer) pass False.

        Returns:
            ScanResult describing the outcome
        """
        guarded = surface_id is not None and single_flight

        if guarded:
            if surface_id in self._in_flight:
                logger.debug(
                    f"Dropping resolve for surface {surface_id}: resolution in progress",
                    extra={'surface_id': surface_id, 'barcode': code}
                )
                if self.metrics_emitter:
                    self.metrics_emitter.emit_scan_dropped(surface_id)
                return ScanResult(code=code, dropped=True)
            self._in_flight.add(surface_id)

        try:
            result = await self._resolve(code, surface_id)

            if result.error is not None:
                if on_error:
                    on_error(result.error, code)
            elif on_success:
                on_success(result.item, code)

            return result
        finally:
            if guarded:
                self._in_flight.discard(surface_id)
            if surface_id is not None and on_complete:
                on_complete(surface_id)

    async def resolve_item(self, code: str, surface_id: Optional[str] = None) -> Any:
        """
        Resolve a code and return the item.

        Args:
            code: Code to resolve
            surface_id: Input surface the code came from, for single-flight

        Returns:
            Resolved item, or None if the call was dropped

        Raises:
            ScanError: Terminal failure (short code, not found, unexpected)
            Exception: Transient lookup error once retries are exhausted
        """
        result = await self.resolve(code, surface_id=surface_id)
        if result.error is not None:
            raise result.error
        return result.item

    async def _resolve(self, code: str, surface_id: Optional[str]) -> ScanResult:
        start = self.clock.now()
        lookup_code = (code or "").strip()

        if len(lookup_code) < self.config.min_length:
            return self._failed(code, surface_id, ShortCodeError(code, self.config.min_length))

        cached = self.cache.get(lookup_code)
        if cached is not None:
            if self.metrics_emitter:
                self.metrics_emitter.emit_cache_hit(surface_id)
            log_scan_resolved(logger, code, surface_id, True, elapsed_ms(start, self.clock.now()))
            self._signal_success()
            return ScanResult(code=code, item=cached, from_cache=True)

        if self.metrics_emitter:
            self.metrics_emitter.emit_cache_miss(surface_id)

        try:
            item = await self.retry_policy.execute(
                lambda: self.lookup(lookup_code),
                self.retry_options
            )
        except ScanError as e:
            return self._failed(code, surface_id, e)
        except Exception as e:
            if self.retry_policy.is_retryable(e, self.retry_options):
                # Transient errors surface verbatim once retries are exhausted
                return self._failed(code, surface_id, e)
            wrapped = UnexpectedScanError(e, code=code)
            wrapped.__cause__ = e
            return self._failed(code, surface_id, wrapped, exc_info=True)
        finally:
            if self.metrics_emitter:
                self.metrics_emitter.emit_lookup_latency(
                    elapsed_ms(start, self.clock.now()),
                    surface_id
                )

        if item_identity(item, self.config.identity_fields) is None:
            return self._failed(code, surface_id, ItemNotFoundError(code))

        self.cache.put(lookup_code, item)
        log_scan_resolved(logger, code, surface_id, False, elapsed_ms(start, self.clock.now()))
        self._signal_success()
        return ScanResult(code=code, item=item)

    def _failed(
        self,
        code: str,
        surface_id: Optional[str],
        error: BaseException,
        exc_info: bool = False
    ) -> ScanResult:
        log_scan_error(logger, code, surface_id, error, exc_info=exc_info)
        if self.metrics_emitter:
            self.metrics_emitter.emit_scan_failed(type(error).__name__, surface_id)
        return ScanResult(code=code, error=error)

    def _signal_success(self) -> None:
        if self.feedback is not None:
            self.feedback.success()

    def _on_retry(self, attempt: RetryAttempt, error: BaseException) -> None:
        if self.metrics_emitter:
            self.metrics_emitter.emit_retry(attempt.attempt_number, type(error).__name__)
