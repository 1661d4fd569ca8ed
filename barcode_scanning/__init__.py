"""
Barcode Scan Resolution Module.

This module turns raw keystroke and camera input into resolved inventory
items: it tells hardware scanner bursts from manual typing, debounces input
surfaces, caches lookups, retries transient failures and keeps at most one
resolution in flight per input surface.
"""

from .scanner import BarcodeScanner, ScanSurface
from .services.scan_resolver import ScanResolver
from .services.ttl_cache import TTLCache
from .services.retry_policy import RetryPolicy
from .services.input_classifier import InputClassifier
from .services.scan_debouncer import ScanDebouncer
from .services.feedback_emitter import FeedbackEmitter
from .models import ScannerConfig, RetryOptions, ScanResult
from .exceptions import (
    ScanError,
    ShortCodeError,
    ItemNotFoundError,
    TransientLookupError,
    NetworkError,
    LookupTimeoutError,
    LookupServiceError,
    UnexpectedScanError
)

__version__ = "1.0.0"

__all__ = [
    'BarcodeScanner',
    'ScanSurface',
    'ScanResolver',
    'TTLCache',
    'RetryPolicy',
    'InputClassifier',
    'ScanDebouncer',
    'FeedbackEmitter',
    'ScannerConfig',
    'RetryOptions',
    'ScanResult',
    'ScanError',
    'ShortCodeError',
    'ItemNotFoundError',
    'TransientLookupError',
    'NetworkError',
    'LookupTimeoutError',
    'LookupServiceError',
    'UnexpectedScanError',
]
