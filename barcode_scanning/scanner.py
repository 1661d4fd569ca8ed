"""
Barcode scanner facade.

This module provides the BarcodeScanner class, the entry point the rest of
the application uses. It wires the input classifier, scan debouncer, TTL
cache, retry policy, scan resolver and feedback emitter together and
exposes surface attachment, programmatic resolution and cache management.

Each BarcodeScanner owns its own cache and surface state, so several
independent instances can coexist.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set

from barcode_scanning.clients.inventory_lookup_client import InventoryLookupClient
from barcode_scanning.config.settings import Settings, get_settings
from barcode_scanning.models.classification import Classification
from barcode_scanning.models.classifier_state import ClassifierState
from barcode_scanning.models.configuration import ScannerConfig
from barcode_scanning.models.retry_options import RetryOptions
from barcode_scanning.models.scan_result import ScanResult
from barcode_scanning.services.feedback_emitter import FeedbackEmitter
from barcode_scanning.services.input_classifier import InputClassifier
from barcode_scanning.services.scan_debouncer import ScanDebouncer
from barcode_scanning.services.scan_resolver import (
    ErrorCallback,
    LookupFn,
    ScanResolver,
    SuccessCallback
)
from barcode_scanning.services.scheduler import Scheduler
from barcode_scanning.services.ttl_cache import TTLCache
from barcode_scanning.utils.clock import Clock, MonotonicClock
from barcode_scanning.utils.metrics import ScanMetrics
from barcode_scanning.utils.structured_logger import configure_structured_logging

logger = logging.getLogger(__name__)

InvalidationListener = Callable[[Dict[str, Any]], None]


class ScanSurface:
    """
    Handle for one input surface attached to a scanner.

    The host forwards the surface's notifications to this handle.
    """

    def __init__(
        self,
        scanner: 'BarcodeScanner',
        surface_id: str,
        on_success: Optional[SuccessCallback],
        on_error: Optional[ErrorCallback]
    ):
        self.scanner = scanner
        self.surface_id = surface_id
        self.on_success = on_success
        self.on_error = on_error

    def on_input(self, value: str) -> Classification:
        """Forward a value change."""
        return self.scanner.debouncer.on_input(self.surface_id, value)

    def on_terminal_key(self, value: str) -> bool:
        """Forward an Enter key press. Returns True if a scan was started."""
        return self.scanner.debouncer.on_terminal_key(self.surface_id, value)

    def blur(self) -> None:
        """Forward loss of focus."""
        self.scanner.debouncer.reset(self.surface_id)

    def dispose(self) -> bool:
        return self.scanner.dispose(self.surface_id)

    @property
    def in_progress(self) -> bool:
        return self.scanner.debouncer.is_in_progress(self.surface_id)


class BarcodeScanner:
    """
    Barcode scan resolution pipeline.

    Data flow: surface input -> InputClassifier -> ScanDebouncer timer ->
    ScanResolver (TTLCache, then RetryPolicy around the lookup) ->
    success/error callback -> FeedbackEmitter on success.
    """

    def __init__(
        self,
        lookup: LookupFn,
        config: Optional[ScannerConfig] = None,
        retry_options: Optional[RetryOptions] = None,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
        feedback: Optional[FeedbackEmitter] = None,
        metrics_emitter: Optional[ScanMetrics] = None
    ):
        """
        Initialize barcode scanner.

        Args:
            lookup: Coroutine function returning the item for a code
            config: Scanner configuration (defaults if None)
            retry_options: Retry options for lookups (scanning defaults if None)
            clock: Clock for timestamps, TTL and latency (monotonic if None)
            scheduler: Timer scheduler for debouncing (asyncio-backed if None)
            feedback: Success feedback emitter (built from config if None)
            metrics_emitter: Optional ScanMetrics
        """
        self.config = config or ScannerConfig()
        self.clock = clock or MonotonicClock()
        self.metrics_emitter = metrics_emitter

        if feedback is None:
            feedback = FeedbackEmitter(
                enable_sound=self.config.enable_sound,
                enable_vibration=self.config.enable_vibration
            )
        self.feedback = feedback

        self.cache = TTLCache(
            ttl_seconds=self.config.cache_ttl_seconds,
            clock=self.clock,
            max_entries=self.config.cache_max_entries
        )

        self.resolver = ScanResolver(
            lookup=lookup,
            config=self.config,
            cache=self.cache,
            retry_options=retry_options,
            feedback=self.feedback,
            clock=self.clock,
            metrics_emitter=self.metrics_emitter
        )

        self.debouncer = ScanDebouncer(
            emit=self._emit,
            classifier=InputClassifier(self.config),
            scheduler=scheduler,
            clock=self.clock,
            metrics_emitter=self.metrics_emitter
        )

        self._surfaces: Dict[str, ScanSurface] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._invalidation_listeners: List[InvalidationListener] = []

        logger.info(
            f"BarcodeScanner initialized: min_length={self.config.min_length}, "
            f"max_length={self.config.max_length}, "
            f"cache_ttl={self.config.cache_ttl_seconds}s"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        configure_logging: bool = False
    ) -> 'BarcodeScanner':
        """
        Build a scanner wired to the inventory REST API.

        Args:
            settings: Settings to use (environment-backed singleton if None)
            configure_logging: Install JSON logging at settings.log_level
        """
        settings = settings or get_settings()

        if configure_logging:
            configure_structured_logging(level=getattr(logging, settings.log_level.upper()))

        config = settings.scanner_config()

        client = InventoryLookupClient(
            base_url=settings.api_base_url,
            auth_token=settings.api_token,
            timeout_seconds=settings.api_timeout_seconds
        )

        return cls(
            lookup=client.lookup,
            config=config,
            retry_options=settings.retry_options(),
            metrics_emitter=ScanMetrics(
                namespace=settings.metrics_namespace,
                use_cloudwatch=settings.enable_cloudwatch_metrics
            )
        )

    def init(
        self,
        surface_id: str,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None
    ) -> ScanSurface:
        """
        Attach the pipeline to an input surface.

        Attaching a surface twice returns the existing handle unchanged.

        Args:
            surface_id: Identifier of the input surface
            on_success: Called with (item, code) for each resolved scan
            on_error: Called with (error, code) for each failed scan

        Returns:
            ScanSurface handle to forward input notifications to
        """
        if not surface_id:
            raise ValueError("surface_id cannot be empty")

        surface = self._surfaces.get(surface_id)
        if surface is not None:
            logger.debug(f"Surface {surface_id} already initialized")
            return surface

        surface = ScanSurface(self, surface_id, on_success, on_error)
        self._surfaces[surface_id] = surface
        logger.debug(f"Initialized surface {surface_id}")
        return surface

    def dispose(self, surface_id: str) -> bool:
        """
        Detach a surface and drop all of its state.

        A resolution already running for the surface still completes and
        still delivers its callbacks.

        Returns:
            True if the surface was attached or had state
        """
        had_surface = self._surfaces.pop(surface_id, None) is not None
        had_state = self.debouncer.dispose(surface_id)
        return had_surface or had_state

    async def resolve(
        self,
        code: str,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        surface_id: Optional[str] = None
    ) -> ScanResult:
        """
        Resolve a code programmatically, delivering the outcome to callbacks.

        Passing ``surface_id`` claims that surface for the duration of the
        call: it is dropped if the surface is already resolving, and scans
        from the surface are dropped until it finishes. Timers armed on the
        surface meanwhile are left alone.
        """
        if surface_id is None:
            return await self.resolver.resolve(code, on_success=on_success, on_error=on_error)

        state = self.debouncer.claim(surface_id, code)
        if state is None:
            return ScanResult(code=code, dropped=True)

        return await self._resolve_claimed(code, on_success, on_error, surface_id, state)

    async def resolve_item(self, code: str, surface_id: Optional[str] = None) -> Any:
        """Resolve a code and return the item, raising the terminal error on failure."""
        result = await self.resolve(code, surface_id=surface_id)
        if result.error is not None:
            raise result.error
        return result.item

    def get_cached_item(self, code: str) -> Optional[Any]:
        """Item cached for a code, without any network call."""
        return self.cache.get(code)

    def invalidate(self, code: str) -> bool:
        """Forget the cached item for a code."""
        return self.cache.invalidate(code)

    def clear_cache(self) -> None:
        self.cache.clear()

    def prime_cache(self, items: Iterable[Mapping[str, Any]]) -> int:
        """
        Seed the cache from an item listing.

        Items are keyed by their ``sku``; items without one are skipped.

        Args:
            items: Items as returned by the inventory listing endpoint

        Returns:
            Number of items cached
        """
        count = 0
        for item in items:
            sku = item.get('sku') if isinstance(item, Mapping) else None
            if sku:
                self.cache.put(str(sku), item)
                count += 1

        logger.debug(f"Primed cache with {count} items")
        return count

    def add_invalidation_listener(self, listener: InvalidationListener) -> None:
        self._invalidation_listeners.append(listener)

    def remove_invalidation_listener(self, listener: InvalidationListener) -> None:
        if listener in self._invalidation_listeners:
            self._invalidation_listeners.remove(listener)

    def invalidate_product(
        self,
        item_id: Optional[Any] = None,
        barcode: Optional[str] = None
    ) -> None:
        """
        Invalidate cached products after a server-side change.

        A barcode invalidates its own entry. Without one the whole cache is
        cleared, since the codes of an item cannot be derived from its id.
        Listeners are then notified; a failing listener is logged and the
        remaining listeners still run.

        Args:
            item_id: Identifier of the changed item, if known
            barcode: Barcode/SKU of the changed item, if known
        """
        if barcode:
            self.cache.invalidate(barcode)
        else:
            self.cache.clear()

        event = {
            'type': 'product_invalidated',
            'item_id': item_id,
            'barcode': barcode
        }

        for listener in list(self._invalidation_listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"Product invalidation listener failed: {e}",
                    extra={'type': 'product_flow_listener_error', 'item_id': item_id},
                    exc_info=True
                )

    async def wait_idle(self) -> None:
        """Wait for every resolution started from surface input to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _emit(self, surface_id: str, code: str) -> None:
        # The debouncer has just claimed the surface's current state
        state = self.debouncer.get_state(surface_id)
        surface = self._surfaces.get(surface_id)
        on_success = surface.on_success if surface else None
        on_error = surface.on_error if surface else None

        task = asyncio.get_running_loop().create_task(
            self._resolve_claimed(code, on_success, on_error, surface_id, state)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    async def _resolve_claimed(
        self,
        code: str,
        on_success: Optional[SuccessCallback],
        on_error: Optional[ErrorCallback],
        surface_id: str,
        state: ClassifierState
    ) -> ScanResult:
        return await self.resolver.resolve(
            code,
            on_success=on_success,
            on_error=on_error,
            surface_id=surface_id,
            on_complete=lambda _surface_id: self.debouncer.complete(state),
            single_flight=False
        )

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            logger.error(
                f"Scan resolution task failed: {error}",
                exc_info=(type(error), error, error.__traceback__)
            )
