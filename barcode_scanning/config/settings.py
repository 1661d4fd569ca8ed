"""
Configuration settings for barcode scan resolution.

Loads configuration from environment variables with sensible defaults.
"""

import os
from typing import Optional

from barcode_scanning.models.configuration import ScannerConfig
from barcode_scanning.models.retry_options import RetryOptions


class Settings:
    """
    Configuration settings for the scan pipeline.

    All settings are loaded from environment variables with defaults.
    """

    def __init__(self):
        """Initialize settings from environment variables."""
        # Input classification
        self.min_length: int = int(os.getenv('SCANNER_MIN_LENGTH', '3'))
        self.max_length: int = int(os.getenv('SCANNER_MAX_LENGTH', '50'))
        self.scanner_typing_speed_ms: float = float(
            os.getenv('SCANNER_TYPING_SPEED_MS', '50')
        )
        self.manual_input_delay_ms: float = float(
            os.getenv('SCANNER_MANUAL_INPUT_DELAY_MS', '300')
        )

        # Cache
        self.cache_ttl_seconds: float = float(os.getenv('SCANNER_CACHE_TTL_SECONDS', '300'))

        # Feedback
        self.enable_sound: bool = self._parse_bool(os.getenv('SCANNER_ENABLE_SOUND', 'true'))
        self.enable_vibration: bool = self._parse_bool(
            os.getenv('SCANNER_ENABLE_VIBRATION', 'true')
        )

        # Retry Configuration
        self.max_retries: int = int(os.getenv('SCANNER_MAX_RETRIES', '2'))
        self.retry_initial_delay_ms: float = float(
            os.getenv('SCANNER_RETRY_INITIAL_DELAY_MS', '500')
        )
        self.retry_max_delay_ms: float = float(
            os.getenv('SCANNER_RETRY_MAX_DELAY_MS', '10000')
        )

        # Inventory API
        self.api_base_url: str = os.getenv('INVENTORY_API_BASE_URL', 'http://localhost:3000/api')
        self.api_token: Optional[str] = os.getenv('INVENTORY_API_TOKEN') or None
        self.api_timeout_seconds: float = float(
            os.getenv('INVENTORY_API_TIMEOUT_SECONDS', '2.0')
        )

        # Logging and metrics
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO')
        self.enable_cloudwatch_metrics: bool = self._parse_bool(
            os.getenv('ENABLE_CLOUDWATCH_METRICS', 'false')
        )
        self.metrics_namespace: str = os.getenv(
            'METRICS_NAMESPACE', 'InventoryDashboard/BarcodeScanning'
        )

        self._validate()

    def _parse_bool(self, value: str) -> bool:
        """
        Parse boolean value from string.

        Args:
            value: String value to parse

        Returns:
            Boolean value
        """
        return value.lower() in ('true', '1', 'yes', 'on')

    def _validate(self):
        """Validate values not covered by the model dataclasses."""
        if self.api_timeout_seconds <= 0:
            raise ValueError(
                f"INVENTORY_API_TIMEOUT_SECONDS must be positive, "
                f"got {self.api_timeout_seconds}"
            )

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.log_level}. "
                f"Must be one of {valid_log_levels}"
            )

        # Surface range errors at load time rather than at first use
        self.scanner_config()
        self.retry_options()

    def scanner_config(self) -> ScannerConfig:
        return ScannerConfig(
            min_length=self.min_length,
            max_length=self.max_length,
            scanner_typing_speed_ms=self.scanner_typing_speed_ms,
            manual_input_delay_ms=self.manual_input_delay_ms,
            cache_ttl_seconds=self.cache_ttl_seconds,
            enable_sound=self.enable_sound,
            enable_vibration=self.enable_vibration
        )

    def retry_options(self) -> RetryOptions:
        return RetryOptions(
            max_retries=self.max_retries,
            initial_delay_ms=self.retry_initial_delay_ms,
            max_delay_ms=self.retry_max_delay_ms
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
