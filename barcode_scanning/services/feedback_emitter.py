"""
Success feedback for scans (tone and vibration).

Feedback is best-effort: a missing or failing sink never affects the
outcome of a scan.
"""

import logging
import sys
from typing import Callable, Optional

logger = logging.getLogger(__name__)

ToneSink = Callable[[float, float], None]
VibrationSink = Callable[[float], None]


def terminal_bell(frequency_hz: float, duration_ms: float) -> None:
    """Tone sink for console hosts: ring the terminal bell."""
    sys.stdout.write('\a')
    sys.stdout.flush()


class FeedbackEmitter:
    """
    Fires a success tone and vibration.

    Attributes:
        tone_frequency_hz: Frequency passed to the tone sink (default: 800)
        tone_duration_ms: Tone length (default: 100)
        vibration_ms: Vibration length (default: 50)
    """

    tone_frequency_hz = 800
    tone_duration_ms = 100
    vibration_ms = 50

    def __init__(
        self,
        tone: Optional[ToneSink] = None,
        vibrate: Optional[VibrationSink] = None,
        enable_sound: bool = True,
        enable_vibration: bool = True
    ):
        """
        Initialize feedback emitter.

        Args:
            tone: Sink called with (frequency_hz, duration_ms), or None
            vibrate: Sink called with (duration_ms), or None
            enable_sound: Play the tone on success
            enable_vibration: Vibrate on success
        """
        self.tone = tone
        self.vibrate = vibrate
        self.enable_sound = enable_sound
        self.enable_vibration = enable_vibration

    def success(self) -> None:
        """Signal a successful scan. Never raises."""
        if self.enable_sound and self.tone is not None:
            try:
                self.tone(self.tone_frequency_hz, self.tone_duration_ms)
            except Exception as e:
                logger.debug(f"Tone feedback unavailable: {e}")

        if self.enable_vibration and self.vibrate is not None:
            try:
                self.vibrate(self.vibration_ms)
            except Exception as e:
                logger.debug(f"Vibration feedback unavailable: {e}")
