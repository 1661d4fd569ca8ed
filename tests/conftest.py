"""
Shared pytest fixtures for barcode scanning tests.
"""

from unittest.mock import Mock

import pytest

from barcode_scanning.models import RetryOptions, ScannerConfig
from barcode_scanning.services import FeedbackEmitter


class FakeClock:
    """Manually advanced clock. Time is kept in milliseconds so sums stay exact."""

    def __init__(self, start: float = 1000.0):
        self._now_ms = start * 1000.0

    def now(self) -> float:
        return self._now_ms / 1000.0

    def now_ms(self) -> float:
        return self._now_ms

    def advance(self, seconds: float) -> None:
        self._now_ms += seconds * 1000.0

    def advance_ms(self, ms: float) -> None:
        self._now_ms += ms

    def set_ms(self, value_ms: float) -> None:
        self._now_ms = value_ms


class VirtualScheduler:
    """Scheduler whose timers only fire when advance() is called."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self._timers = []
        self._seq = 0

    def schedule(self, delay_ms, callback, token):
        self._seq += 1
        timer = {
            'due_ms': self.clock.now_ms() + delay_ms,
            'seq': self._seq,
            'delay_ms': delay_ms,
            'callback': callback,
            'token': token,
            'cancelled': False
        }
        self._timers.append(timer)

        def cancel():
            timer['cancelled'] = True

        return cancel

    def advance(self, ms: float) -> None:
        """Advance the clock by ``ms`` and fire every timer that falls due."""
        target_ms = self.clock.now_ms() + ms

        while True:
            due = sorted(
                (t for t in self._timers if not t['cancelled'] and t['due_ms'] <= target_ms),
                key=lambda t: (t['due_ms'], t['seq'])
            )
            if not due:
                break

            timer = due[0]
            self._timers.remove(timer)
            self.clock.set_ms(max(self.clock.now_ms(), timer['due_ms']))
            timer['callback'](timer['token'])

        self.clock.set_ms(target_ms)

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._timers if not t['cancelled'])

    @property
    def last_delay_ms(self):
        return self._timers[-1]['delay_ms'] if self._timers else None


@pytest.fixture
def fake_clock():
    """Fixture providing a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def virtual_scheduler(fake_clock):
    """Fixture providing a virtual scheduler bound to the fake clock."""
    return VirtualScheduler(fake_clock)


@pytest.fixture
def default_config():
    """Fixture providing default scanner configuration."""
    return ScannerConfig()


@pytest.fixture
def scanning_retry_options():
    """Fixture providing the retry options used for barcode lookups."""
    return RetryOptions.for_scanning()


@pytest.fixture
def feedback():
    """Fixture providing a mock feedback emitter."""
    return Mock(spec=FeedbackEmitter)


@pytest.fixture
def widget_item():
    """Fixture providing a resolved inventory item."""
    return {
        'id': 42,
        'sku': 'SKU0099',
        'name': 'Widget',
        'unit_price': 12.5,
        'stock_quantity': 30
    }
