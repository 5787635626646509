"""
Faceted filtering over a catalog snapshot.

Modules:
    facets - Facet derivation rules (category, OS, spec facets)
    state - FilterState selections
    engine - apply_filters and the stateful FilterEngine
"""

from .engine import FacetCountMode, FilterEngine, apply_filters, product_matches
from .facets import (
    CATEGORY_VALUES,
    FACET_KEYS,
    FACETS,
    Facet,
    facet_value,
    product_category,
    product_os,
)
from .state import FilterState

__all__ = [
    'CATEGORY_VALUES',
    'FACETS',
    'FACET_KEYS',
    'Facet',
    'facet_value',
    'product_category',
    'product_os',
    'FilterState',
    'FacetCountMode',
    'FilterEngine',
    'apply_filters',
    'product_matches',
]
