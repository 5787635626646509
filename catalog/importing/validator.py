"""
Product Validation

Required-field checks applied before a derived product reaches the store,
and construction of manually entered products.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models import Product, ProductSpecs
from .derivation import generate_product_id

REQUIRED_IMPORT_FIELDS = ('brand', 'model', 'price')


def missing_required_fields(product: Product) -> List[str]:
    """
    Names of required import fields the product lacks.

    Brand and model must be non-empty; price must be positive.
    """
    missing = []
    if not product.brand.strip():
        missing.append('brand')
    if not product.model.strip():
        missing.append('model')
    if product.price <= 0:
        missing.append('price')
    return missing


def validation_error(row_number: int, product: Product) -> Optional[str]:
    """Per-row error message, or None when the product may be imported."""
    if missing_required_fields(product):
        return f"Row {row_number}: Missing required fields ({', '.join(REQUIRED_IMPORT_FIELDS)})"
    return None


def new_product(
    name: str,
    brand: str,
    model: str,
    price: Any,
    description: str = "",
    image_url: str = "",
    specs: Optional[Dict[str, Any]] = None,
    stock_count: Any = 0,
    category: str = "",
    tags: Optional[List[str]] = None,
) -> Product:
    """
    Build a product entered by hand.

    Raises:
        ValueError: If name, brand or model is empty, or price is not positive
    """
    try:
        price_value = float(price)
    except (TypeError, ValueError):
        price_value = 0.0
    if not math.isfinite(price_value):
        price_value = 0.0

    if not (name or "").strip() or not (brand or "").strip() or not (model or "").strip() or price_value <= 0:
        raise ValueError("Missing required fields: name, brand, model, price")

    try:
        stock_value = int(stock_count or 0)
    except (TypeError, ValueError):
        stock_value = 0

    timestamp = datetime.now().isoformat()
    return Product(
        id=generate_product_id(),
        name=name.strip(),
        brand=brand.strip(),
        model=model.strip(),
        price=price_value,
        description=description,
        image_url=image_url,
        tags=list(tags or []),
        specs=ProductSpecs.from_dict(specs or {}),
        stock_count=max(stock_value, 0),
        category=(category or "").strip().lower(),
        created_at=timestamp,
        updated_at=timestamp,
    )
