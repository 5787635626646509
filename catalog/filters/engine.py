"""
Faceted Filter Engine

Filters a product snapshot by facet selections, price range and stock
status. Every change to the state or the snapshot triggers a full,
synchronous re-filter and notifies the listener with the new result.

The engine never mutates products and never talks to a store; callers
hand it ``store.list()``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..models import Product
from .facets import FACETS, facet_value, get_facet
from .state import FilterState

logger = logging.getLogger(__name__)


class FacetCountMode(Enum):
    """How option counts are computed."""

    # Count over the whole snapshot, ignoring every filter
    FULL_COLLECTION = "full_collection"
    # Count over products passing every other active filter
    FACETED = "faceted"


def matches_price(product: Product, price_range: Optional[Tuple[float, float]]) -> bool:
    if price_range is None:
        return True
    low, high = price_range
    return low <= product.price <= high


def matches_stock(product: Product, in_stock: Optional[bool]) -> bool:
    if in_stock is None:
        return True
    return product.in_stock == in_stock


def product_matches(product: Product, state: FilterState, skip_facet: Optional[str] = None) -> bool:
    """
    True when the product passes every active constraint.

    Args:
        product: Product to test
        state: Filter selections
        skip_facet: Facet whose selection is ignored (used for faceted counts)
    """
    for facet in FACETS:
        if facet.key == skip_facet:
            continue
        selected = state.selection(facet.key)
        if selected and facet.value(product) not in selected:
            return False
    return matches_price(product, state.price_range) and matches_stock(product, state.in_stock)


def apply_filters(products: Iterable[Product], state: FilterState) -> List[Product]:
    """Products passing ``state``, in their original order."""
    return [product for product in products if product_matches(product, state)]


class FilterEngine:
    """
    Stateful filter over a product snapshot.

    Usage:
        engine = FilterEngine(store.list(), on_change=render)
        engine.toggle("brand", "Apple")      # render(filtered) is called
        engine.option_counts("color")        # {"Black": 3, "Blue": 1}
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        state: Optional[FilterState] = None,
        on_change: Optional[Callable[[List[Product]], None]] = None,
        count_mode: FacetCountMode = FacetCountMode.FACETED,
    ):
        self.products: Tuple[Product, ...] = tuple(products)
        self.state = state if state is not None else FilterState()
        self.on_change = on_change
        self.count_mode = count_mode
        self.filtered: List[Product] = []
        self.refresh()

    def refresh(self) -> List[Product]:
        """Re-run the filter pass and notify the listener."""
        self.filtered = apply_filters(self.products, self.state)
        logger.debug("Filter pass: %d of %d products", len(self.filtered), len(self.products))
        if self.on_change is not None:
            self.on_change(list(self.filtered))
        return self.filtered

    # ── Mutations ────────────────────────────────────────────────────────

    def set_products(self, products: Iterable[Product]) -> List[Product]:
        self.products = tuple(products)
        return self.refresh()

    def update_selection(self, facet: str, values: Iterable[str]) -> List[Product]:
        self.state.set_selection(facet, values)
        return self.refresh()

    def toggle(self, facet: str, value: str) -> List[Product]:
        self.state.toggle(facet, value)
        return self.refresh()

    def set_price_range(self, low: float, high: float) -> List[Product]:
        """Restrict prices to [low, high], both ends inclusive."""
        self.state.price_range = (float(low), float(high))
        return self.refresh()

    def clear_price_range(self) -> List[Product]:
        self.state.price_range = None
        return self.refresh()

    def set_stock_filter(self, in_stock: Optional[bool]) -> List[Product]:
        """True: in stock only, False: out of stock only, None: both."""
        self.state.in_stock = in_stock
        return self.refresh()

    def clear(self) -> List[Product]:
        self.state.clear()
        return self.refresh()

    # ── Derived views ────────────────────────────────────────────────────

    def facet_options(self, facet: str) -> List[str]:
        """Sorted distinct values of a facet over the whole snapshot."""
        get_facet(facet)
        values = {facet_value(product, facet) for product in self.products}
        values.discard(None)
        return sorted(values)

    def _count_base(self, facet: str) -> Sequence[Product]:
        if self.count_mode is FacetCountMode.FULL_COLLECTION:
            return self.products
        return [p for p in self.products if product_matches(p, self.state, skip_facet=facet)]

    def option_counts(self, facet: str) -> Dict[str, int]:
        """
        Number of products per facet option.

        In FACETED mode each count reflects every active filter except the
        facet's own selection; in FULL_COLLECTION mode the whole snapshot is
        counted.
        """
        counts = {option: 0 for option in self.facet_options(facet)}
        for product in self._count_base(facet):
            value = facet_value(product, facet)
            if value in counts:
                counts[value] += 1
        return counts

    def price_bounds(self) -> Tuple[float, float]:
        """
        (min, max) over the snapshot's positive prices.

        Unpriced products do not pull the lower bound to zero; (0.0, 0.0) when
        nothing has a price.
        """
        prices = [product.price for product in self.products if product.price > 0]
        if not prices:
            return (0.0, 0.0)
        return (min(prices), max(prices))

    def active_filter_count(self) -> int:
        return self.state.active_filter_count(self.price_bounds())

    def summary(self) -> Dict[str, List[str]]:
        """Display labels per facet title, e.g. {"Brand": ["Apple (3)"]}."""
        labels = {}
        for facet in FACETS:
            counts = self.option_counts(facet.key)
            if counts:
                labels[facet.title] = [f"{option} ({count})" for option, count in counts.items()]
        return labels
