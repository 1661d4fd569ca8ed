"""
Timer scheduling for the scan debouncer.

The debouncer never touches the event loop's timers directly; it asks a
Scheduler to run a callback after a delay and keeps the returned cancel
function. Tests substitute a virtual scheduler that is advanced by hand.
"""

import asyncio
from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar('T')

CancelFn = Callable[[], None]


class Scheduler(Protocol):
    """Runs ``callback(token)`` after ``delay_ms`` unless cancelled."""

    def schedule(self, delay_ms: float, callback: Callable[[T], None], token: T) -> CancelFn:
        ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Initialize scheduler.

        Args:
            loop: Event loop to use (the running loop at schedule time if None)
        """
        self._loop = loop

    def schedule(self, delay_ms: float, callback: Callable[[T], None], token: T) -> CancelFn:
        loop = self._loop or asyncio.get_running_loop()
        handle = loop.call_later(delay_ms / 1000.0, callback, token)
        return handle.cancel
