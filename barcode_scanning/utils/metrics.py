"""
Metrics utilities for barcode scan resolution.

This module emits custom metrics that track cache effectiveness, lookup
latency, retries and failures. Metrics are published to CloudWatch when a
client is configured and written to the log otherwise, in a format that
log queries can parse.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import boto3

logger = logging.getLogger(__name__)


class ScanMetrics:
    """
    Emits metrics for the barcode scan pipeline.

    Publishing never raises: a failing CloudWatch call is logged and the
    scan carries on.
    """

    def __init__(
        self,
        namespace: str = 'InventoryDashboard/BarcodeScanning',
        use_cloudwatch: bool = False,
        cloudwatch_client=None
    ):
        """
        Initialize metrics emitter.

        Args:
            namespace: CloudWatch namespace for metrics
            use_cloudwatch: Publish through boto3 instead of logging
            cloudwatch_client: Optional CloudWatch client (implies use_cloudwatch)
        """
        self.namespace = namespace
        self.use_cloudwatch = use_cloudwatch or cloudwatch_client is not None
        self.cloudwatch = cloudwatch_client

        if self.use_cloudwatch and self.cloudwatch is None:
            self.cloudwatch = boto3.client('cloudwatch')
            logger.info(f"Initialized CloudWatch metrics client for namespace: {namespace}")

    def emit_cache_hit(self, surface_id: Optional[str] = None) -> None:
        self._put_metric('CacheHit', 1, 'Count', self._surface_dimensions(surface_id))

    def emit_cache_miss(self, surface_id: Optional[str] = None) -> None:
        self._put_metric('CacheMiss', 1, 'Count', self._surface_dimensions(surface_id))

    def emit_lookup_latency(self, latency_ms: float, surface_id: Optional[str] = None) -> None:
        """
        Emit metric for remote lookup latency, retries included.

        Args:
            latency_ms: Lookup latency in milliseconds
            surface_id: Optional input surface dimension
        """
        self._put_metric(
            'LookupLatency',
            latency_ms,
            'Milliseconds',
            self._surface_dimensions(surface_id)
        )

    def emit_retry(self, attempt_number: int, error_type: str) -> None:
        """
        Emit metric for a retried lookup.

        Args:
            attempt_number: 1-based retry number
            error_type: Class name of the error that caused the retry
        """
        self._put_metric(
            'LookupRetry',
            1,
            'Count',
            {'ErrorType': error_type, 'Attempt': str(attempt_number)}
        )

    def emit_scan_failed(self, error_type: str, surface_id: Optional[str] = None) -> None:
        dimensions = self._surface_dimensions(surface_id)
        dimensions['ErrorType'] = error_type
        self._put_metric('ScanFailed', 1, 'Count', dimensions)

    def emit_scan_dropped(self, surface_id: str) -> None:
        self._put_metric('ScanDropped', 1, 'Count', self._surface_dimensions(surface_id))

    def _surface_dimensions(self, surface_id: Optional[str]) -> Dict[str, str]:
        return {'SurfaceId': surface_id} if surface_id else {}

    def _put_metric(
        self,
        metric_name: str,
        value: float,
        unit: str,
        dimensions: Dict[str, str]
    ) -> None:
        """
        Put metric to CloudWatch or to the log.

        Args:
            metric_name: Metric name
            value: Metric value
            unit: Metric unit
            dimensions: Metric dimensions
        """
        if not self.use_cloudwatch:
            logger.info(
                f"METRIC {metric_name}={value} "
                f"unit={unit} "
                f"dimensions={dimensions}"
            )
            return

        metric_data: Dict[str, Any] = {
            'MetricName': metric_name,
            'Value': value,
            'Unit': unit,
            'Timestamp': datetime.now(timezone.utc)
        }

        if dimensions:
            metric_data['Dimensions'] = [
                {'Name': name, 'Value': dim_value}
                for name, dim_value in dimensions.items()
            ]

        try:
            self.cloudwatch.put_metric_data(
                Namespace=self.namespace,
                MetricData=[metric_data]
            )
        except Exception as e:
            logger.warning(
                f"Failed to emit metric {metric_name}: {e}",
                extra={'metric_name': metric_name}
            )
