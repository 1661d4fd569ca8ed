"""
Input classifier for telling scanner bursts from manual typing.

Hardware barcode scanners behave like keyboards that type a whole code
within a few milliseconds. This module decides, for each change of an
input surface's value, whether the input looks like such a burst, like
manual entry that may still be growing, or like noise.
"""

from typing import Optional

from barcode_scanning.models.classification import Classification, Decision
from barcode_scanning.models.configuration import ScannerConfig
from barcode_scanning.models.scan_event import ScanEvent


class InputClassifier:
    """
    Pure classification of scan events.

    Rules, evaluated in order:
    1. Shorter than min_length: ignore
    2. Longer than max_length: ignore
    3. Previous event less than scanner_typing_speed_ms ago and more than
       burst_min_length characters: burst, resolve after burst_delay_ms
    4. Within [min_length, max_length]: debounce for manual_input_delay_ms
    """

    def __init__(self, config: Optional[ScannerConfig] = None):
        self.config = config or ScannerConfig()

    def classify(
        self,
        current: ScanEvent,
        previous: Optional[ScanEvent] = None
    ) -> Classification:
        """
        Classify the current value of an input surface.

        Args:
            current: Event for the current value
            previous: Previous event on the same surface, or None

        Returns:
            Classification with the decision and the delay to wait
        """
        config = self.config
        length = len(current.raw_value)

        if length < config.min_length:
            return Classification(Decision.IGNORE)

        if length > config.max_length:
            return Classification(Decision.IGNORE)

        if previous is not None and length > config.burst_min_length:
            gap_ms = (current.timestamp - previous.timestamp) * 1000.0
            if gap_ms < config.scanner_typing_speed_ms:
                return Classification(Decision.BURST, config.burst_delay_ms)

        return Classification(Decision.DEBOUNCE, config.manual_input_delay_ms)

    def accepts_terminal(self, raw_value: str) -> bool:
        """Whether a terminal key (Enter) may force resolution of this value."""
        return len(raw_value) >= self.config.min_length
