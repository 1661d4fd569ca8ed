"""
Code normalization utilities for cache keys.

Barcodes and SKUs are compared case-insensitively and without surrounding
whitespace, so "SKU0099", " sku0099 " and "Sku0099" share one cache entry.
"""

from typing import Any, Iterable, Mapping, Optional


def normalize_code(code: Optional[str]) -> str:
    """
    Normalize a scanned code for cache lookups.

    Args:
        code: Raw code as typed or scanned

    Returns:
        Trimmed, case-folded code ('' for None)

    Examples:
        >>> normalize_code("  SKU0099 ")
        'sku0099'
    """
    if not code:
        return ""

    return code.strip().casefold()


def item_identity(item: Any, identity_fields: Iterable[str]) -> Optional[Any]:
    """
    Return the first non-empty identity field of an item.

    Items are opaque payloads from the lookup service; only mappings carry
    identity fields.

    Args:
        item: Payload returned by the lookup service
        identity_fields: Field names to try in order

    Returns:
        Identity value, or None if the payload has none
    """
    if not isinstance(item, Mapping):
        return None

    for field in identity_fields:
        value = item.get(field)
        if value is not None and value != "":
            return value

    return None
