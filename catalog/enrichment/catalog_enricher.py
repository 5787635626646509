"""
Catalog Enricher

Backfills images and specifications for products already in the store.
Products are processed in batches with a pause between batches; a product
whose lookup fails is simply left unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..models import Product
from ..store import CatalogStore
from .description import generate_description_from_specs
from .image_fetcher import ImageFetcher
from .spec_fetcher import SpecFetcher

logger = logging.getLogger(__name__)

# Newly filled spec attributes above which the description is rewritten
DESCRIPTION_REFRESH_THRESHOLD = 2


def _product_id(product: Product) -> str:
    return product.id


@dataclass
class EnrichmentSummary:
    """Outcome of a catalog enrichment run."""
    kind: str
    updated: int
    total: int

    @property
    def message(self) -> str:
        if self.total == 0:
            return f"No products found that need {self.kind}"
        return f"Updated {self.updated} out of {self.total} products with {self.kind}"


class CatalogEnricher:
    """
    Enrich stored products in place through the store.

    Usage:
        enricher = CatalogEnricher(store)
        summary = enricher.fetch_missing_images()
        print(summary.message)
    """

    def __init__(
        self,
        store: CatalogStore,
        image_fetcher: Optional[ImageFetcher] = None,
        spec_fetcher: Optional[SpecFetcher] = None,
        image_batch_size: int = 5,
        image_delay: float = 2.0,
        spec_batch_size: int = 3,
        spec_delay: float = 3.0,
    ):
        self.store = store
        self._image_fetcher = image_fetcher
        self._spec_fetcher = spec_fetcher
        self.image_batch_size = image_batch_size
        self.image_delay = image_delay
        self.spec_batch_size = spec_batch_size
        self.spec_delay = spec_delay

    @property
    def image_fetcher(self) -> ImageFetcher:
        if self._image_fetcher is None:
            self._image_fetcher = ImageFetcher()
        return self._image_fetcher

    @property
    def spec_fetcher(self) -> SpecFetcher:
        if self._spec_fetcher is None:
            self._spec_fetcher = SpecFetcher()
        return self._spec_fetcher

    def _select(self, product_ids: Optional[Sequence[str]]) -> List[Product]:
        products = self.store.list()
        if product_ids is None:
            return products
        wanted = set(product_ids)
        return [p for p in products if p.id in wanted]

    def fetch_missing_images(self, product_ids: Optional[Sequence[str]] = None) -> EnrichmentSummary:
        """
        Look up images for products that have none.

        Args:
            product_ids: Restrict to these ids (all products if None)

        Returns:
            EnrichmentSummary for the run
        """
        candidates = [p for p in self._select(product_ids) if not p.image_url]
        if not candidates:
            return EnrichmentSummary(kind='images', updated=0, total=0)

        found = self.image_fetcher.fetch_images(
            candidates, batch_size=self.image_batch_size, delay=self.image_delay,
            key=_product_id,
        )

        updated = 0
        for product in candidates:
            image_url = found.get(product.id)
            if image_url:
                self.store.update(product.id, image_url=image_url)
                updated += 1

        logger.info("Images: updated %d of %d products", updated, len(candidates))
        return EnrichmentSummary(kind='images', updated=updated, total=len(candidates))

    def fetch_missing_specs(self, product_ids: Optional[Sequence[str]] = None) -> EnrichmentSummary:
        """
        Look up missing specifications and refresh descriptions.

        The description is regenerated when it is empty or when more than
        two attributes were newly filled.

        Args:
            product_ids: Restrict to these ids (all products if None)

        Returns:
            EnrichmentSummary for the run
        """
        candidates = self._select(product_ids)
        if not candidates:
            return EnrichmentSummary(kind='specifications', updated=0, total=0)

        found = self.spec_fetcher.fetch_specs_batch(
            candidates, batch_size=self.spec_batch_size, delay=self.spec_delay,
            key=_product_id,
        )

        updated = 0
        for product in candidates:
            looked_up = found.get(product.id)
            if looked_up is None:
                continue
            merged = product.specs.merge_missing(looked_up)

            newly_filled = set(merged.to_dict()) - set(product.specs.to_dict())
            if not newly_filled:
                continue

            description = product.description
            if not description or len(newly_filled) > DESCRIPTION_REFRESH_THRESHOLD:
                description = generate_description_from_specs(merged, product.brand, product.model)

            self.store.update(product.id, specs=merged, description=description)
            updated += 1

        logger.info("Specs: updated %d of %d products", updated, len(candidates))
        return EnrichmentSummary(kind='specifications', updated=updated, total=len(candidates))
