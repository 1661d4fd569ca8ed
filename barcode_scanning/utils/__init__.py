"""
Utility functions for barcode scan resolution.

This module provides clocks, code normalization, structured logging
and metrics helpers.
"""

from .clock import Clock, MonotonicClock, elapsed_ms
from .code_normalization import normalize_code, item_identity
from .metrics import ScanMetrics
from .structured_logger import (
    StructuredFormatter,
    configure_structured_logging,
    log_scan_resolved,
    log_scan_error
)

__all__ = [
    'Clock',
    'MonotonicClock',
    'elapsed_ms',
    'normalize_code',
    'item_identity',
    'ScanMetrics',
    'StructuredFormatter',
    'configure_structured_logging',
    'log_scan_resolved',
    'log_scan_error'
]
