"""
Injectable clocks.

All timing decisions in the scan pipeline read time through a Clock so that
tests can drive a virtual clock instead of waiting on wall-clock time.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Supplies monotonic timestamps in seconds."""

    def now(self) -> float:
        ...


class MonotonicClock:
    """Clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


def elapsed_ms(start: float, end: float) -> float:
    """Milliseconds between two clock readings."""
    return (end - start) * 1000.0
