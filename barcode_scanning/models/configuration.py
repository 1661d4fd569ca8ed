"""
Configuration data model for the scan pipeline.

This module defines the configuration dataclass that controls all tunable
parameters of input classification, debouncing, caching and feedback.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class ScannerConfig:
    """
    Configuration for barcode scan resolution.

    Attributes:
        min_length: Shortest code worth resolving (default: 3)
        max_length: Longest accepted input; longer is treated as noise (default: 50)
        scanner_typing_speed_ms: Max gap between keystrokes of a scanner burst (default: 50)
        manual_input_delay_ms: Idle time before resolving manual entry (default: 300)
        burst_delay_ms: Delay before resolving a detected burst (default: 20)
        burst_min_length: A burst needs more than this many characters (default: 5)
        cache_ttl_seconds: Lifetime of a resolved item in the cache (default: 300)
        cache_max_entries: Optional FIFO bound for the cache (default: unbounded)
        identity_fields: Fields of which at least one must be set on a valid item
        enable_sound: Play a tone on successful scans
        enable_vibration: Vibrate on successful scans
    """

    min_length: int = 3
    max_length: int = 50
    scanner_typing_speed_ms: float = 50
    manual_input_delay_ms: float = 300
    burst_delay_ms: float = 20
    burst_min_length: int = 5
    cache_ttl_seconds: float = 300
    cache_max_entries: Optional[int] = None
    identity_fields: Tuple[str, ...] = ('sku', 'id')
    enable_sound: bool = True
    enable_vibration: bool = True

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ValueError: If any parameter is outside its valid range
        """
        if self.min_length < 1:
            raise ValueError(f"min_length must be at least 1, got {self.min_length}")

        if self.max_length < self.min_length:
            raise ValueError(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )

        if self.scanner_typing_speed_ms <= 0:
            raise ValueError(
                f"scanner_typing_speed_ms must be positive, "
                f"got {self.scanner_typing_speed_ms}"
            )

        if self.manual_input_delay_ms < 0:
            raise ValueError(
                f"manual_input_delay_ms must be non-negative, "
                f"got {self.manual_input_delay_ms}"
            )

        if self.burst_delay_ms < 0:
            raise ValueError(
                f"burst_delay_ms must be non-negative, got {self.burst_delay_ms}"
            )

        if self.cache_ttl_seconds <= 0:
            raise ValueError(
                f"cache_ttl_seconds must be positive, got {self.cache_ttl_seconds}"
            )

        if self.cache_max_entries is not None and self.cache_max_entries < 1:
            raise ValueError(
                f"cache_max_entries must be at least 1, got {self.cache_max_entries}"
            )

        if not self.identity_fields:
            raise ValueError("identity_fields cannot be empty")

    def __post_init__(self):
        """Validate configuration on initialization."""
        self.identity_fields = tuple(self.identity_fields)
        self.validate()
