"""
Business logic services for barcode scan resolution.

This module provides the service classes that classify input, debounce
surfaces, cache and retry lookups, and resolve codes to items.
"""

from .input_classifier import InputClassifier
from .scheduler import Scheduler, AsyncioScheduler
from .scan_debouncer import ScanDebouncer
from .ttl_cache import TTLCache
from .retry_policy import RetryPolicy
from .feedback_emitter import FeedbackEmitter, terminal_bell
from .scan_resolver import ScanResolver

__all__ = [
    'InputClassifier',
    'Scheduler',
    'AsyncioScheduler',
    'ScanDebouncer',
    'TTLCache',
    'RetryPolicy',
    'FeedbackEmitter',
    'terminal_bell',
    'ScanResolver'
]
