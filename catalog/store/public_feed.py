"""
Public Storefront Feed

Builds the product payload served to the storefront: only in-stock
products, newest first, with a tag list the storefront scripts expect.
"""

from typing import Any, Dict, Iterable, List

from ..models import Product


def storefront_tags(product: Product) -> List[str]:
    """Brand, model, category, then storage and memory when known."""
    tags = [product.brand, product.model, product.category]
    if product.specs.storage:
        tags.append(product.specs.storage)
    if product.specs.memory:
        tags.append(product.specs.memory)
    return [tag for tag in tags if tag]


def to_public_record(product: Product) -> Dict[str, Any]:
    return {
        'id': product.id,
        'name': product.name,
        'brand': product.brand,
        'model': product.model,
        'price': product.price,
        'description': product.description,
        'image': product.image_url,
        'imageUrl': product.image_url,
        'specs': product.specs.to_dict(),
        'stockCount': product.stock_count,
        'category': product.category,
        'tags': storefront_tags(product),
    }


def build_public_feed(products: Iterable[Product]) -> List[Dict[str, Any]]:
    """
    Build the storefront feed.

    Args:
        products: Catalog snapshot (e.g. ``store.list()``)

    Returns:
        Public records for in-stock products sorted by created_at, newest first
    """
    in_stock = [p for p in products if p.in_stock]
    in_stock.sort(key=lambda p: p.created_at, reverse=True)
    return [to_public_record(p) for p in in_stock]
