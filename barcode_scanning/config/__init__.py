"""
Configuration module for barcode scan resolution.

Provides environment variable loading for the scanner, retry and API settings.
"""

from .settings import Settings, get_settings, reset_settings

__all__ = ['Settings', 'get_settings', 'reset_settings']
