"""
Scan debouncer for coalescing input into scan emissions.

This module owns the per-surface timers of the scan pipeline. Each value
change is classified; bursts and manual entry arm a timer that is re-armed
on every further change, so a logical code produces at most one emission.
A per-surface epoch counter marks timers armed for older values as stale,
and an in-progress flag keeps a second resolution off a surface until the
current one has completed.
"""

import logging
from typing import Callable, Dict, Optional, Tuple

from barcode_scanning.models.classification import Classification, Decision
from barcode_scanning.models.classifier_state import ClassifierState
from barcode_scanning.models.scan_event import ScanEvent
from barcode_scanning.services.input_classifier import InputClassifier
from barcode_scanning.services.scheduler import AsyncioScheduler, Scheduler
from barcode_scanning.utils.clock import Clock, MonotonicClock

logger = logging.getLogger(__name__)

# (input_id, epoch, value) captured when a timer is armed
_TimerToken = Tuple[str, int, str]


class ScanDebouncer:
    """
    Debounces input surfaces into scan emissions.

    State machine per surface:
    idle -> pending (timer armed) -> resolving (in_progress) -> idle.
    Input while pending re-arms the timer; an emission attempted while
    resolving is dropped. ``complete`` must be called with the claimed
    state once its resolution finishes; ``reset`` returns a surface to idle
    on blur.
    """

    def __init__(
        self,
        emit: Callable[[str, str], None],
        classifier: Optional[InputClassifier] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None,
        metrics_emitter=None
    ):
        """
        Initialize scan debouncer.

        Args:
            emit: Called with (input_id, code) when a scan should be resolved
            classifier: Input classifier (default configuration if None)
            scheduler: Timer scheduler (asyncio-backed if None)
            clock: Clock used to timestamp events
            metrics_emitter: Optional ScanMetrics for dropped emissions
        """
        self._emit = emit
        self.classifier = classifier or InputClassifier()
        self.scheduler = scheduler or AsyncioScheduler()
        self.clock = clock or MonotonicClock()
        self.metrics_emitter = metrics_emitter
        self._states: Dict[str, ClassifierState] = {}

    def on_input(self, input_id: str, raw_value: str) -> Classification:
        """
        Handle a value change on an input surface.

        Args:
            input_id: Input surface identifier
            raw_value: Current value of the surface

        Returns:
            The classification applied to the value
        """
        state = self._state(input_id)
        value = (raw_value or "").strip()
        event = ScanEvent(input_id=input_id, raw_value=value, timestamp=self.clock.now())

        classification = self.classifier.classify(event, state.last_event)
        state.last_event = event
        state.epoch += 1
        state.cancel_pending()

        if classification.decision is Decision.IGNORE:
            return classification

        token: _TimerToken = (input_id, state.epoch, value)
        state.pending_cancel = self.scheduler.schedule(
            classification.delay_ms,
            self._on_timer,
            token
        )

        logger.debug(
            f"Armed {classification.decision.value} timer for surface {input_id}",
            extra={
                'surface_id': input_id,
                'decision': classification.decision.value,
                'delay_ms': classification.delay_ms,
                'epoch': state.epoch
            }
        )

        return classification

    def on_terminal_key(self, input_id: str, raw_value: str) -> bool:
        """
        Handle a terminal key (Enter): resolve the current value immediately.

        Args:
            input_id: Input surface identifier
            raw_value: Current value of the surface

        Returns:
            True if a scan was emitted
        """
        value = (raw_value or "").strip()
        if not self.classifier.accepts_terminal(value):
            return False

        state = self._state(input_id)
        state.cancel_pending()
        state.epoch += 1

        return self._try_emit(input_id, state, value)

    def claim(self, input_id: str, code: str) -> Optional[ClassifierState]:
        """
        Mark a surface as resolving for a scan started outside its timers.

        Uses the same in-progress guard as timer and terminal-key emissions.

        Args:
            input_id: Input surface identifier
            code: Code about to be resolved

        Returns:
            The claimed state, to hand back to complete(), or None if a
            resolution already owns the surface
        """
        state = self._state(input_id)
        return state if self._claim(input_id, state, code) else None

    def complete(self, state: ClassifierState) -> None:
        """
        Release a surface after the resolution that claimed it finished.

        Only the in-progress flag is cleared: a timer armed while the
        resolution ran stays armed. ``state`` is the object the resolution
        claimed, so a surface disposed and attached again in the meantime
        keeps its own flag.
        """
        state.in_progress = False

    def reset(self, input_id: str) -> None:
        """
        Clear timers and the in-progress flag of a surface.

        Called when the surface loses focus.
        """
        state = self._states.get(input_id)
        if state is not None:
            state.reset()

    def dispose(self, input_id: str) -> bool:
        """
        Remove all state kept for a surface.

        Returns:
            True if the surface was known
        """
        state = self._states.pop(input_id, None)
        if state is None:
            return False

        state.cancel_pending()
        logger.debug(f"Disposed surface {input_id}")
        return True

    def is_in_progress(self, input_id: str) -> bool:
        state = self._states.get(input_id)
        return state.in_progress if state else False

    def get_state(self, input_id: str) -> Optional[ClassifierState]:
        return self._states.get(input_id)

    def surface_count(self) -> int:
        return len(self._states)

    def _state(self, input_id: str) -> ClassifierState:
        state = self._states.get(input_id)
        if state is None:
            state = ClassifierState()
            self._states[input_id] = state
        return state

    def _on_timer(self, token: _TimerToken) -> None:
        input_id, epoch, value = token
        state = self._states.get(input_id)

        if state is None or state.epoch != epoch:
            # Surface disposed, or the user kept typing after the timer was armed
            logger.debug(f"Ignoring stale timer for surface {input_id}")
            return

        state.pending_cancel = None
        self._try_emit(input_id, state, value)

    def _claim(self, input_id: str, state: ClassifierState, value: str) -> bool:
        if state.in_progress:
            logger.debug(
                f"Dropping scan on surface {input_id}: resolution in progress",
                extra={'surface_id': input_id, 'barcode': value}
            )
            if self.metrics_emitter:
                self.metrics_emitter.emit_scan_dropped(input_id)
            return False

        state.in_progress = True
        return True

    def _try_emit(self, input_id: str, state: ClassifierState, value: str) -> bool:
        if not self._claim(input_id, state, value):
            return False

        try:
            self._emit(input_id, value)
        except Exception:
            state.in_progress = False
            raise

        return True
