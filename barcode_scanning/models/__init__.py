"""
Data models for barcode scan resolution.

This module provides dataclasses for scan events, classifier decisions,
per-surface state, cache entries, retry options and configuration.
"""

from .scan_event import ScanEvent
from .classification import Decision, Classification
from .classifier_state import ClassifierState
from .cache import CacheEntry
from .retry_options import RetryOptions, RetryAttempt, DEFAULT_RETRYABLE_MATCHERS
from .configuration import ScannerConfig
from .scan_result import ScanResult

__all__ = [
    'ScanEvent',
    'Decision',
    'Classification',
    'ClassifierState',
    'CacheEntry',
    'RetryOptions',
    'RetryAttempt',
    'DEFAULT_RETRYABLE_MATCHERS',
    'ScannerConfig',
    'ScanResult'
]
