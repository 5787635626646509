"""
Product Derivation

Turns one InventoryItem into a catalog Product. Every derived field follows
a fixed, order-sensitive rule so the same row always yields the same
product (apart from id and timestamps).

Image and spec enrichment are optional and run after the pure build step;
they never change name, tags, description, price or stock.
"""

from __future__ import annotations

import logging
import math
import re
import uuid
from datetime import datetime
from typing import Callable, List, Mapping, Optional, Set

from ..common.constants import MIXED_COLOR, NOT_APPLICABLE, PRODUCT_ID_PREFIX
from ..enrichment.image_fetcher import ImageFetcher
from ..enrichment.result import EnrichmentFailure
from ..enrichment.spec_fetcher import SpecFetcher
from ..models import InventoryItem, Product, ProductSpecs

logger = logging.getLogger(__name__)

_PRICE_RE = re.compile(r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)')
_INT_RE = re.compile(r'[+-]?\d+')
_CURRENCY_NOISE_RE = re.compile(r'[$€£,\s]')

# Extra spreadsheet columns that map onto spec attributes
EXTRA_SPEC_FIELDS = ('display', 'processor', 'memory', 'camera', 'battery', 'os')

MAX_ID_ATTEMPTS = 10


def is_present(value: Optional[str], *sentinels: str) -> bool:
    """
    True when a raw field carries real data.

    Empty strings and "NA" never count; extra sentinels (e.g. "Mixed" for
    colors) can be passed.
    """
    if value is None:
        return False
    stripped = value.strip()
    return bool(stripped) and stripped != NOT_APPLICABLE and stripped not in sentinels


def _color(item: InventoryItem) -> Optional[str]:
    return item.color.strip() if is_present(item.color, MIXED_COLOR) else None


def build_name(item: InventoryItem) -> str:
    """Manufacturer and model, then capacity and color when present."""
    parts = [item.manufacturer.strip(), item.model.strip()]
    if is_present(item.capacity):
        parts.append(item.capacity.strip())
    color = _color(item)
    if color:
        parts.append(color)
    return " ".join(part for part in parts if part)


def build_tags(item: InventoryItem) -> List[str]:
    """
    Tags in fixed order: manufacturer, model, category, capacity, color,
    carrier, grade, lock status. Category and capacity are lower-cased.
    """
    tags = []
    if is_present(item.manufacturer):
        tags.append(item.manufacturer.strip())
    if is_present(item.model):
        tags.append(item.model.strip())
    if is_present(item.category):
        tags.append(item.category.strip().lower())
    if is_present(item.capacity):
        tags.append(item.capacity.strip().lower())
    color = _color(item)
    if color:
        tags.append(color)
    if is_present(item.carrier):
        tags.append(item.carrier.strip())
    if is_present(item.grade):
        tags.append(item.grade.strip())
    if is_present(item.lock_status):
        tags.append(item.lock_status.strip())
    return tags


def build_description(item: InventoryItem) -> str:
    """Space-joined clauses: identity, storage, color, carrier, condition."""
    parts = []
    if is_present(item.manufacturer) and is_present(item.model):
        parts.append(f"{item.manufacturer.strip()} {item.model.strip()}")
    if is_present(item.capacity):
        parts.append(f"{item.capacity.strip()} storage")
    color = _color(item)
    if color:
        parts.append(f"in {color}")
    if is_present(item.carrier):
        parts.append(f"for {item.carrier.strip()}")
    if is_present(item.grade):
        parts.append(f"({item.grade.strip()} condition)")
    return " ".join(parts)


def build_specs(item: InventoryItem) -> ProductSpecs:
    """Condition and configuration attributes carried by the inventory row."""
    return ProductSpecs(
        storage=item.capacity.strip() if is_present(item.capacity) else None,
        color=_color(item),
        carrier=item.carrier.strip() if is_present(item.carrier) else None,
        lock_status=item.lock_status.strip() if is_present(item.lock_status) else None,
        grade=item.grade.strip() if is_present(item.grade) else None,
    )


def parse_price(raw: Optional[str]) -> float:
    """
    Parse the leading decimal of a price string.

    Currency symbols and thousands separators are ignored. Unparseable,
    non-finite or negative input yields 0.0.

    Example:
        >>> parse_price("$1,299.50")
        1299.5
    """
    if raw is None:
        return 0.0
    match = _PRICE_RE.match(_CURRENCY_NOISE_RE.sub('', str(raw)))
    if not match:
        return 0.0
    value = float(match.group())
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def parse_stock(raw: Optional[str]) -> int:
    """Parse the leading integer of a quantity string, 0 on failure or if negative."""
    if raw is None:
        return 0
    match = _INT_RE.match(str(raw).strip().replace(',', ''))
    if not match:
        return 0
    return max(int(match.group()), 0)


def generate_product_id() -> str:
    """Random catalog id, e.g. "pm-product_3f9c2a7b41de"."""
    return f"{PRODUCT_ID_PREFIX}{uuid.uuid4().hex[:12]}"


class ProductDeriver:
    """
    Derives catalog products from inventory rows.

    Ids are unique across everything one deriver issues, so a single
    deriver should be used per import batch.

    Usage:
        deriver = ProductDeriver(fetch_images=True, image_fetcher=ImageFetcher())
        product = deriver.derive(item)
    """

    def __init__(
        self,
        fetch_images: bool = False,
        fetch_specs: bool = False,
        image_fetcher: Optional[ImageFetcher] = None,
        spec_fetcher: Optional[SpecFetcher] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], str]] = None,
    ):
        self.fetch_images = fetch_images
        self.fetch_specs = fetch_specs
        self._image_fetcher = image_fetcher
        self._spec_fetcher = spec_fetcher
        self.id_factory = id_factory or generate_product_id
        self.clock = clock or (lambda: datetime.now().isoformat())
        self.issued_ids: Set[str] = set()

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

    def next_id(self) -> str:
        """Issue an id not handed out before by this deriver."""
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self.id_factory()
            if candidate not in self.issued_ids:
                self.issued_ids.add(candidate)
                return candidate
        raise RuntimeError(f"Could not generate a unique product id after {MAX_ID_ATTEMPTS} attempts")

    def build(self, item: InventoryItem, extras: Optional[Mapping[str, str]] = None) -> Product:
        """
        Derive a product without touching the network.

        Args:
            item: Inventory row
            extras: Optional spreadsheet values (name, description, image_url
                and technical spec columns) that take precedence over
                derived values

        Returns:
            New Product
        """
        extras = {k: v.strip() for k, v in (extras or {}).items() if v and v.strip()}

        specs = build_specs(item)
        extra_specs = ProductSpecs(**{k: extras[k] for k in EXTRA_SPEC_FIELDS if k in extras})
        specs = specs.merge_missing(extra_specs)

        timestamp = self.clock()
        return Product(
            id=self.next_id(),
            name=extras.get('name') or build_name(item),
            brand=item.manufacturer.strip(),
            model=item.model.strip(),
            price=parse_price(item.list_price),
            description=extras.get('description') or build_description(item),
            image_url=extras.get('image_url', ''),
            tags=build_tags(item),
            specs=specs,
            stock_count=parse_stock(item.quantity_available),
            category=item.category.strip().lower() if is_present(item.category) else "",
            created_at=timestamp,
            updated_at=timestamp,
        )

    def enrich(self, product: Product) -> List[EnrichmentFailure]:
        """
        Apply enabled enrichment to ``product`` in place.

        Only image_url and missing spec attributes can change.

        Returns:
            Failures reported by the lookups (informational, never raised)
        """
        failures: List[EnrichmentFailure] = []

        if self.fetch_images and not product.image_url:
            result = self.image_fetcher.fetch_image(product.brand, product.model, product.specs.color or "")
            product.image_url = result.value or ""
            failures.extend(result.failures if not result.ok else [])

        if self.fetch_specs:
            result = self.spec_fetcher.fetch_specs(product.brand, product.model, product.specs)
            product.specs = result.value
            failures.extend(result.failures if not result.ok else [])

        return failures

    def derive(self, item: InventoryItem, extras: Optional[Mapping[str, str]] = None) -> Product:
        """Build a product and run enabled enrichment."""
        product = self.build(item, extras)
        for failure in self.enrich(product):
            logger.debug("Enrichment for %s: %s", product.name, failure)
        return product

    def derive_all(self, items: List[InventoryItem]) -> List[Product]:
        """Derive every item in order."""
        return [self.derive(item) for item in items]
