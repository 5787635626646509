"""
Data models for the device catalog.

This module contains plain data classes with no I/O.
"""

from .product import (
    INVENTORY_FIELDS,
    ImportResult,
    InventoryItem,
    Product,
    ProductSpecs,
)

__all__ = ['INVENTORY_FIELDS', 'InventoryItem', 'ProductSpecs', 'Product', 'ImportResult']
