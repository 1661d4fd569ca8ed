"""
Retry configuration data models.

RetryOptions controls the bounded exponential backoff applied to remote
lookups; RetryAttempt describes one scheduled retry and only lives for the
duration of a single RetryPolicy invocation.
"""

from dataclasses import dataclass
from typing import Tuple


DEFAULT_RETRYABLE_MATCHERS: Tuple[str, ...] = (
    'NetworkError',
    'TimeoutError',
    'Failed to fetch',
    'network',
    'timeout',
)


@dataclass(frozen=True)
class RetryOptions:
    """
    Options for RetryPolicy.execute().

    Attributes:
        max_retries: Additional attempts after the first (default: 3)
        initial_delay_ms: Delay before the first retry (default: 1000)
        max_delay_ms: Upper bound for any single delay (default: 10000)
        backoff_multiplier: Growth factor between retries (default: 2)
        jitter: Add up to 10% random jitter to each delay (default: False)
        retryable_matchers: Exception class names or message substrings that
            mark an error as transient
    """

    max_retries: int = 3
    initial_delay_ms: float = 1000
    max_delay_ms: float = 10000
    backoff_multiplier: float = 2.0
    jitter: bool = False
    retryable_matchers: Tuple[str, ...] = DEFAULT_RETRYABLE_MATCHERS

    def __post_init__(self):
        """Validate retry options."""
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {self.max_retries}")

        if self.initial_delay_ms < 0:
            raise ValueError(
                f"initial_delay_ms must be non-negative, got {self.initial_delay_ms}"
            )

        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError(
                f"max_delay_ms ({self.max_delay_ms}) must be >= "
                f"initial_delay_ms ({self.initial_delay_ms})"
            )

        if self.backoff_multiplier < 1:
            raise ValueError(
                f"backoff_multiplier must be at least 1, got {self.backoff_multiplier}"
            )

    @classmethod
    def for_scanning(cls) -> 'RetryOptions':
        """Options used for barcode lookups: 2 retries starting at 500ms."""
        return cls(max_retries=2, initial_delay_ms=500)

    def delay_for(self, attempt_index: int) -> float:
        """
        Backoff delay in milliseconds before retry number ``attempt_index + 1``.

        Args:
            attempt_index: Zero-based index of the attempt that just failed
        """
        return min(
            self.initial_delay_ms * (self.backoff_multiplier ** attempt_index),
            self.max_delay_ms
        )


@dataclass(frozen=True)
class RetryAttempt:
    """
    A scheduled retry.

    Attributes:
        attempt_number: 1-based number of the retry about to run
        delay_ms: Delay awaited before running it
    """

    attempt_number: int
    delay_ms: float
