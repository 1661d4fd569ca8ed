"""
Structured logging utilities for barcode scan resolution.

This module provides JSON-formatted logging so scan outcomes can be
queried by code, surface and error type in the log aggregator.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional


# Standard LogRecord attributes that are not structured fields
_RESERVED_FIELDS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info', 'taskName'
})


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Formats log records as JSON with consistent fields including:
    - timestamp: ISO 8601 timestamp (UTC)
    - level: Log level
    - component: Logger name
    - message: Log message
    - Additional fields passed through ``extra``
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'component': record.name,
            'message': record.getMessage()
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_FIELDS or key.startswith('_'):
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def configure_structured_logging(
    level: int = logging.INFO,
    use_json: bool = True
) -> None:
    """
    Configure structured logging for the entire application.

    Replaces the root logger's handlers with a single stdout handler.

    Args:
        level: Logging level (default: INFO)
        use_json: Whether to use JSON formatting (default: True)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)

    if use_json:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    root_logger.info(
        f"Configured structured logging: level={logging.getLevelName(level)}, json={use_json}"
    )


def log_scan_resolved(
    logger: logging.Logger,
    code: str,
    surface_id: Optional[str],
    from_cache: bool,
    latency_ms: float
) -> None:
    """
    Log a successful resolution with structured fields.

    Args:
        logger: Logger instance
        code: Code that was resolved
        surface_id: Input surface, if the scan came from one
        from_cache: Whether the item was served from cache
        latency_ms: Resolution latency in milliseconds
    """
    logger.info(
        f"Barcode resolved: code={code}, cache={'hit' if from_cache else 'miss'}",
        extra={
            'operation': 'barcode_scan',
            'barcode': code,
            'surface_id': surface_id,
            'from_cache': from_cache,
            'latency_ms': round(latency_ms, 2)
        }
    )


def log_scan_error(
    logger: logging.Logger,
    code: str,
    surface_id: Optional[str],
    error: BaseException,
    exc_info: bool = False
) -> None:
    """
    Log a failed resolution with structured fields.

    Args:
        logger: Logger instance
        code: Code that failed to resolve
        surface_id: Input surface, if the scan came from one
        error: Terminal error delivered to the caller
        exc_info: Whether to include the traceback
    """
    logger.error(
        f"Barcode scan failed: code={code}, error={type(error).__name__}: {error}",
        extra={
            'type': 'barcode_scan_error',
            'barcode': code,
            'surface_id': surface_id,
            'error_type': type(error).__name__,
            'error_message': str(error)
        },
        exc_info=(type(error), error, error.__traceback__) if exc_info else None
    )
