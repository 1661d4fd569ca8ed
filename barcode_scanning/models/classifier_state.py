"""
Per-surface classifier state owned by the scan debouncer.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from barcode_scanning.models.scan_event import ScanEvent


@dataclass
class ClassifierState:
    """
    Mutable state of one input surface.

    Only the ScanDebouncer for the surface mutates this. ``epoch`` increases
    on every input so a timer armed for an older value can tell that it is
    stale when it fires.

    Attributes:
        last_event: Previous event seen on the surface (None when idle)
        pending_cancel: Cancel function of the armed timer, if any
        in_progress: True while a resolution owns the surface
        epoch: Monotonically increasing input counter
    """

    last_event: Optional[ScanEvent] = None
    pending_cancel: Optional[Callable[[], None]] = None
    in_progress: bool = False
    epoch: int = 0

    @property
    def last_char_timestamp(self) -> Optional[float]:
        return self.last_event.timestamp if self.last_event else None

    @property
    def has_pending_timer(self) -> bool:
        return self.pending_cancel is not None

    def cancel_pending(self) -> bool:
        """Cancel the armed timer. Returns True if one was armed."""
        if self.pending_cancel is None:
            return False
        cancel = self.pending_cancel
        self.pending_cancel = None
        cancel()
        return True

    def reset(self) -> None:
        """Return the surface to idle."""
        self.cancel_pending()
        self.last_event = None
        self.in_progress = False
        self.epoch += 1
