"""
In-memory and JSON-file catalog stores.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List

from ..models import Product
from .base import CatalogStore, ProductNotFoundError

logger = logging.getLogger(__name__)


class InMemoryCatalogStore(CatalogStore):
    """Catalog held in a dict keyed by product id (insertion ordered)."""

    def __init__(self, products: List[Product] | None = None):
        self._products: Dict[str, Product] = {}
        for product in products or []:
            self.create(product)

    def create(self, product: Product) -> Product:
        if product.id in self._products:
            raise ValueError(f"Duplicate product id: {product.id}")
        self._products[product.id] = product
        return product

    def get(self, product_id: str) -> Product:
        try:
            return self._products[product_id]
        except KeyError:
            raise ProductNotFoundError(product_id) from None

    def _replace(self, product: Product) -> None:
        if product.id not in self._products:
            raise ProductNotFoundError(product.id)
        self._products[product.id] = product

    def delete(self, product_id: str) -> None:
        if product_id not in self._products:
            raise ProductNotFoundError(product_id)
        del self._products[product_id]

    def list(self) -> List[Product]:
        return list(self._products.values())


class JsonFileCatalogStore(InMemoryCatalogStore):
    """
    In-memory store persisted to a JSON file after every change.

    Usage:
        store = JsonFileCatalogStore("data/catalog.json")
        store.create(product)  # written to disk immediately
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__()
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug("Catalog file %s does not exist yet", self.path)
            return

        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        for record in data.get('products', []):
            super().create(Product.from_dict(record))

        logger.info("Loaded %d products from %s", len(self._products), self.path)

    def save(self) -> None:
        """Write the catalog atomically (temp file then rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        payload = {'products': [p.to_dict() for p in self._products.values()]}

        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def create(self, product: Product) -> Product:
        created = super().create(product)
        self.save()
        return created

    def _replace(self, product: Product) -> None:
        super()._replace(product)
        self.save()

    def delete(self, product_id: str) -> None:
        super().delete(product_id)
        self.save()
