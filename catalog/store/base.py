"""
Catalog Store Interface

The store owns catalog products. Import and enrichment write through it;
the filter engine only ever receives a snapshot from ``list()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Tuple

from ..models import Product

# Fields callers may change through update(); in_stock follows stock_count
UPDATABLE_FIELDS = frozenset({
    'name', 'brand', 'model', 'price', 'description', 'image_url',
    'tags', 'specs', 'stock_count', 'category',
})


class ProductNotFoundError(KeyError):
    """Raised when a product id is not in the store."""

    def __init__(self, product_id: str):
        super().__init__(product_id)
        self.product_id = product_id

    def __str__(self) -> str:
        return f"Product not found: {self.product_id}"


class CatalogStore(ABC):
    """Abstract catalog store."""

    @abstractmethod
    def create(self, product: Product) -> Product:
        """Add a product. Raises ValueError if the id already exists."""

    @abstractmethod
    def get(self, product_id: str) -> Product:
        """Return a product or raise ProductNotFoundError."""

    @abstractmethod
    def _replace(self, product: Product) -> None:
        """Store a new version of an existing product."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product or raise ProductNotFoundError."""

    @abstractmethod
    def list(self) -> List[Product]:
        """Snapshot of all products in insertion order."""

    def update(self, product_id: str, **changes) -> Product:
        """
        Apply partial changes to a product.

        Args:
            product_id: Id of the product to change
            **changes: Field values (see UPDATABLE_FIELDS)

        Returns:
            The updated product

        Raises:
            ProductNotFoundError: If the id is unknown
            ValueError: If a field cannot be changed or a value is invalid
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        current = self.get(product_id)
        updated = replace(current, **changes, updated_at=datetime.now().isoformat())
        self._replace(updated)
        return updated

    def find_by_name_and_brand(self, name: str, brand: str) -> Optional[Product]:
        for product in self.list():
            if product.name == name and product.brand == brand:
                return product
        return None

    def upsert(self, product: Product) -> Tuple[Product, bool]:
        """
        Create a product or refresh the one with the same name and brand.

        An existing product keeps its id, tags, category and created_at; price,
        description, image, specs and stock are taken from ``product``.

        Returns:
            Tuple of (stored product, created flag)
        """
        existing = self.find_by_name_and_brand(product.name, product.brand)
        if existing is None:
            return self.create(product), True

        updated = self.update(
            existing.id,
            price=product.price,
            description=product.description,
            image_url=product.image_url,
            specs=product.specs,
            stock_count=product.stock_count,
        )
        return updated, False

    def __len__(self) -> int:
        return len(self.list())
