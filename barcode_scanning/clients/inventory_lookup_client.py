"""
Inventory lookup client.

This module provides the HTTP adapter that resolves a barcode against the
inventory dashboard's REST API and maps transport failures onto the scan
error taxonomy, so the retry policy can tell transient failures from
fatal ones.
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from barcode_scanning.exceptions import (
    ItemNotFoundError,
    LookupServiceError,
    LookupTimeoutError,
    NetworkError
)

logger = logging.getLogger(__name__)

# Upstream statuses that usually clear up on their own
TRANSIENT_STATUS_CODES = frozenset({502, 503, 504})


class InventoryLookupClient:
    """
    Looks up items by barcode over HTTP.

    The blocking requests call runs in the event loop's default executor.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: Optional[str] = None,
        timeout_seconds: float = 2.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize lookup client.

        Args:
            base_url: API base URL, e.g. "https://shop.example.com/api"
            auth_token: Optional bearer token
            timeout_seconds: Per-request timeout (default: 2.0)
            session: Optional requests session for connection reuse or testing
        """
        if not base_url:
            raise ValueError("base_url cannot be empty")
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

        self.base_url = base_url.rstrip('/')
        self.auth_token = auth_token
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    async def lookup(self, code: str) -> Any:
        """
        Look up the item for a barcode.

        Args:
            code: Barcode or SKU

        Returns:
            Decoded JSON payload, or None if the body is not JSON

        Raises:
            LookupTimeoutError: Request timed out
            NetworkError: Service unreachable or temporarily unavailable
            ItemNotFoundError: Service reported no item for the code
            LookupServiceError: Any other non-success response
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._get_item, code)

    def _get_item(self, code: str) -> Any:
        url = f"{self.base_url}/items/barcode/{quote(code, safe='')}"
        headers = {'Accept': 'application/json'}
        if self.auth_token:
            headers['Authorization'] = f"Bearer {self.auth_token}"

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout_seconds)
        except requests.Timeout as e:
            raise LookupTimeoutError(
                f"Lookup timeout after {self.timeout_seconds}s", code=code
            ) from e
        except requests.ConnectionError as e:
            raise NetworkError(f"Network error reaching inventory service: {e}", code=code) from e

        if response.status_code == 404:
            raise ItemNotFoundError(code, self._error_message(response))

        if response.status_code in TRANSIENT_STATUS_CODES:
            raise NetworkError(
                f"Inventory service unavailable (HTTP {response.status_code})",
                code=code
            )

        if not response.ok:
            logger.warning(
                f"Lookup failed with HTTP {response.status_code}",
                extra={'barcode': code, 'status_code': response.status_code}
            )
            raise LookupServiceError(
                self._error_message(response),
                code=code,
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError:
            logger.warning(
                "Lookup returned a non-JSON body",
                extra={'barcode': code, 'content_type': response.headers.get('content-type')}
            )
            return None

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract the server's error text, falling back to the HTTP status."""
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            message = data.get('error') or data.get('message')
            if message:
                return str(message)

        return response.text or f"HTTP {response.status_code}: {response.reason}"
