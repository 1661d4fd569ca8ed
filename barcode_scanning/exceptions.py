"""
Custom exceptions for barcode scan resolution.

This module defines the error taxonomy of the scan pipeline. Every
exception carries the code that was being resolved and a class-level
``retryable`` flag that RetryPolicy consults before falling back to
name/message matching.
"""

from typing import Optional


class ScanError(Exception):
    """Base exception for barcode scan resolution."""

    retryable = False

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class ShortCodeError(ScanError):
    """
    Raised when a code is shorter than the configured minimum length.

    Never retried and never reaches the cache or the network.
    """

    def __init__(self, code: Optional[str], min_length: int):
        super().__init__(
            f"Barcode too short: {len(code or '')} < {min_length} characters",
            code=code
        )
        self.min_length = min_length


class ItemNotFoundError(ScanError):
    """
    Raised when the lookup succeeded but returned no valid item.

    This covers an empty or malformed payload as well as an explicit
    "not found" answer from the inventory service.
    """

    def __init__(self, code: Optional[str], message: Optional[str] = None):
        super().__init__(message or f"Item not found with barcode: {code}", code=code)


class TransientLookupError(ScanError):
    """
    Raised for transient lookup failures that may succeed on retry.

    This can occur due to:
    - Network connectivity issues
    - Lookup timeouts
    - Temporarily unavailable upstream (502/503/504)
    """

    retryable = True


class NetworkError(TransientLookupError):
    """Raised when the inventory service cannot be reached."""
    pass


class LookupTimeoutError(TransientLookupError):
    """Raised when a lookup exceeds its timeout."""
    pass


class LookupServiceError(ScanError):
    """
    Raised when the inventory service answers with a non-transient error.

    Attributes:
        status_code: HTTP status returned by the service
    """

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, code=code)
        self.status_code = status_code


class UnexpectedScanError(ScanError):
    """
    Wraps any other exception raised while resolving a code.

    The original exception is available as ``original`` and ``__cause__``.
    """

    def __init__(self, original: BaseException, code: Optional[str] = None):
        super().__init__(
            f"Unexpected error resolving barcode: {type(original).__name__}: {original}",
            code=code
        )
        self.original = original
