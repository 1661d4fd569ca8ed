"""Clients for the inventory lookup service."""

from .inventory_lookup_client import InventoryLookupClient, TRANSIENT_STATUS_CODES

__all__ = ['InventoryLookupClient', 'TRANSIENT_STATUS_CODES']
