"""
Facet derivation rules.

Category and OS are derived from tags, name and brand; every other facet
reads the product directly (brand) or its specs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..models import Product

CATEGORY_VALUES = ("phones", "tablets", "accessory", "wearables")
DEFAULT_CATEGORY = "accessory"

# Name substrings checked in order when no category tag is present
NAME_CATEGORY_HINTS = (
    ("iphone", "phones"),
    ("ipad", "tablets"),
    ("watch", "wearables"),
)

OS_BY_BRAND = {
    "apple": "iOS",
    "samsung": "Android",
    "google": "Android",
}
OTHER_OS = "Other"


def product_category(product: Product) -> str:
    """First tag naming a known category, else a guess from the product name."""
    for tag in product.tags:
        if tag.lower() in CATEGORY_VALUES:
            return tag.lower()

    name = product.name.lower()
    for hint, category in NAME_CATEGORY_HINTS:
        if hint in name:
            return category
    return DEFAULT_CATEGORY


def product_os(product: Product) -> str:
    return OS_BY_BRAND.get(product.brand.strip().lower(), OTHER_OS)


def _spec(attribute: str) -> Callable[[Product], Optional[str]]:
    def getter(product: Product) -> Optional[str]:
        return getattr(product.specs, attribute) or None
    return getter


@dataclass(frozen=True)
class Facet:
    """A filterable dimension."""
    key: str
    title: str
    value: Callable[[Product], Optional[str]]


FACETS: Tuple[Facet, ...] = (
    Facet("category", "Category", product_category),
    Facet("brand", "Brand", lambda product: product.brand or None),
    Facet("os", "OS", product_os),
    Facet("color", "Color", _spec("color")),
    Facet("storage", "Storage", _spec("storage")),
    Facet("carrier", "Carrier", _spec("carrier")),
    Facet("lock_status", "Lock Status", _spec("lock_status")),
    Facet("grade", "Grade", _spec("grade")),
)

FACET_KEYS = tuple(facet.key for facet in FACETS)
FACETS_BY_KEY: Dict[str, Facet] = {facet.key: facet for facet in FACETS}


def get_facet(key: str) -> Facet:
    try:
        return FACETS_BY_KEY[key]
    except KeyError:
        raise ValueError(f"Unknown facet: {key}") from None


def facet_value(product: Product, facet: str) -> Optional[str]:
    """
    The product's value for a facet.

    Returns:
        The value, or None when the product has none (e.g. no color spec)
    """
    return get_facet(facet).value(product)
