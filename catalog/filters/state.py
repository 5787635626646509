"""
Filter state: one selection set per facet, a price range and a stock filter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from .facets import FACET_KEYS, get_facet


@dataclass
class FilterState:
    """
    Current filter selections.

    An empty selection set means the facet does not constrain results.
    ``price_range`` of None means no price restriction; ``in_stock`` of None
    means both in-stock and out-of-stock products are shown.
    """
    category: Set[str] = field(default_factory=set)
    brand: Set[str] = field(default_factory=set)
    os: Set[str] = field(default_factory=set)
    color: Set[str] = field(default_factory=set)
    storage: Set[str] = field(default_factory=set)
    carrier: Set[str] = field(default_factory=set)
    lock_status: Set[str] = field(default_factory=set)
    grade: Set[str] = field(default_factory=set)
    price_range: Optional[Tuple[float, float]] = None
    in_stock: Optional[bool] = None

    def selection(self, facet: str) -> Set[str]:
        return getattr(self, get_facet(facet).key)

    def set_selection(self, facet: str, values: Iterable[str]) -> None:
        setattr(self, get_facet(facet).key, set(values))

    def toggle(self, facet: str, value: str) -> None:
        """Select ``value`` if it is not selected, otherwise deselect it."""
        selected = self.selection(facet)
        if value in selected:
            selected.discard(value)
        else:
            selected.add(value)

    def clear(self) -> None:
        for key in FACET_KEYS:
            setattr(self, key, set())
        self.price_range = None
        self.in_stock = None

    def active_facets(self) -> List[str]:
        return [key for key in FACET_KEYS if getattr(self, key)]

    def price_filter_active(self, price_bounds: Optional[Tuple[float, float]] = None) -> bool:
        """A price range counts as a filter unless it equals the full bounds."""
        if self.price_range is None:
            return False
        if price_bounds is None:
            return True
        return tuple(self.price_range) != tuple(price_bounds)

    def active_filter_count(self, price_bounds: Optional[Tuple[float, float]] = None) -> int:
        """Number of active constraints (facets, stock, price)."""
        count = len(self.active_facets())
        if self.in_stock is not None:
            count += 1
        if self.price_filter_active(price_bounds):
            count += 1
        return count
