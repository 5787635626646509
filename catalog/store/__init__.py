"""
Catalog storage.

Modules:
    base - CatalogStore interface and ProductNotFoundError
    memory - InMemoryCatalogStore and JsonFileCatalogStore
    public_feed - Storefront feed of in-stock products
"""

from .base import UPDATABLE_FIELDS, CatalogStore, ProductNotFoundError
from .memory import InMemoryCatalogStore, JsonFileCatalogStore
from .public_feed import build_public_feed, storefront_tags, to_public_record

__all__ = [
    'CatalogStore',
    'ProductNotFoundError',
    'UPDATABLE_FIELDS',
    'InMemoryCatalogStore',
    'JsonFileCatalogStore',
    'build_public_feed',
    'storefront_tags',
    'to_public_record',
]
