"""
Retry logic with exponential backoff for remote lookups.
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar

from barcode_scanning.models.retry_options import RetryAttempt, RetryOptions

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryPolicy:
    """
    Wraps an asynchronous operation with bounded exponential-backoff retry.

    Errors are classified before every retry. An exception that declares a
    boolean ``retryable`` attribute is trusted; otherwise it is retryable
    when any class in its hierarchy is named exactly like a matcher, or
    when its message contains a matcher (case-insensitive). The last error
    is re-raised verbatim once retries are exhausted.
    """

    def __init__(
        self,
        options: Optional[RetryOptions] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_retry: Optional[Callable[[RetryAttempt, BaseException], None]] = None
    ):
        """
        Initialize retry policy.

        Args:
            options: Default retry options (RetryOptions() if None)
            sleep: Coroutine function awaited with a delay in seconds
            on_retry: Optional hook called before each retry delay
        """
        self.options = options or RetryOptions()
        self._sleep = sleep
        self._on_retry = on_retry

    def is_retryable(self, error: BaseException, options: Optional[RetryOptions] = None) -> bool:
        """
        Classify an error as transient or fatal.

        Args:
            error: Exception raised by the operation
            options: Options whose matchers to use (policy defaults if None)

        Returns:
            True if the error may succeed on retry
        """
        declared = getattr(error, 'retryable', None)
        if isinstance(declared, bool):
            return declared

        matchers = (options or self.options).retryable_matchers
        class_names = {cls.__name__ for cls in type(error).__mro__}
        message = str(error).lower()

        return any(
            matcher in class_names or matcher.lower() in message
            for matcher in matchers
        )

    async def execute(
        self,
        fn: Callable[[], Awaitable[T]],
        options: Optional[RetryOptions] = None
    ) -> T:
        """
        Run ``fn`` until it succeeds, fails fatally or retries run out.

        Args:
            fn: Zero-argument coroutine function to attempt
            options: Per-call options overriding the policy defaults

        Returns:
            Result of the first successful attempt

        Raises:
            Exception: The fatal error, or the last transient error once
                retries are exhausted
        """
        opts = options or self.options

        for attempt in range(opts.max_retries + 1):
            try:
                result = await fn()
            except Exception as e:
                if not self.is_retryable(e, opts):
                    logger.debug(
                        f"Non-retryable error on attempt {attempt + 1}: {type(e).__name__}",
                        extra={'attempt': attempt + 1, 'error': str(e)}
                    )
                    raise

                if attempt == opts.max_retries:
                    logger.error(
                        f"Operation failed after {opts.max_retries} retries",
                        extra={
                            'max_retries': opts.max_retries,
                            'error': str(e)
                        }
                    )
                    raise

                delay_ms = opts.delay_for(attempt)
                if opts.jitter:
                    delay_ms += random.uniform(0, 0.1 * delay_ms)

                retry = RetryAttempt(attempt_number=attempt + 1, delay_ms=delay_ms)

                logger.warning(
                    f"Retry attempt {retry.attempt_number}/{opts.max_retries} "
                    f"after {delay_ms:.0f}ms",
                    extra={
                        'attempt': retry.attempt_number,
                        'max_retries': opts.max_retries,
                        'delay_ms': delay_ms,
                        'error': str(e)
                    }
                )

                if self._on_retry is not None:
                    self._on_retry(retry, e)

                await self._sleep(delay_ms / 1000.0)
                continue

            if attempt > 0:
                logger.info(
                    f"Operation succeeded after {attempt} retries",
                    extra={'attempt': attempt, 'max_retries': opts.max_retries}
                )

            return result

        # Unreachable: the loop either returns or raises
        raise RuntimeError("retry loop exited without a result")
