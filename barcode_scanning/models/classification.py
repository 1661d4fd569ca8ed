"""
Classification result returned by the input classifier.
"""

from dataclasses import dataclass
from enum import Enum


class Decision(str, Enum):
    """What the debouncer should do with the current input."""

    BURST = 'burst'        # Hardware scanner burst, resolve almost immediately
    DEBOUNCE = 'debounce'  # Possibly still growing, wait for the user to pause
    IGNORE = 'ignore'      # Too short or oversized


@dataclass(frozen=True)
class Classification:
    """
    Decision plus the delay to wait before resolving.

    Attributes:
        decision: Burst, debounce or ignore
        delay_ms: Milliseconds to wait before emitting (0 for ignore)
    """

    decision: Decision
    delay_ms: float = 0

    @property
    def should_schedule(self) -> bool:
        return self.decision is not Decision.IGNORE
