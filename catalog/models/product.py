"""
Catalog data models.

Plain data classes for inventory rows, catalog products and import results.
No business logic beyond keeping each record internally consistent.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

# Positional column order of a supplier inventory export
INVENTORY_FIELDS = (
    'item_number', 'warehouse', 'category', 'manufacturer', 'model', 'grade',
    'capacity', 'carrier', 'color', 'lock_status', 'model_number',
    'parts_message', 'increment_size', 'quantity_available', 'list_price',
    'transaction_status', 'transaction_quantity', 'transaction_price',
    'expires', 'new_offer_quantity', 'new_offer_price',
)


@dataclass(frozen=True)
class InventoryItem:
    """One raw inventory row. Every field is the string as sourced."""
    item_number: str = ""
    warehouse: str = ""
    category: str = ""
    manufacturer: str = ""
    model: str = ""
    grade: str = ""
    capacity: str = ""
    carrier: str = ""
    color: str = ""
    lock_status: str = ""
    model_number: str = ""
    parts_message: str = ""
    increment_size: str = ""
    quantity_available: str = ""
    list_price: str = ""
    transaction_status: str = ""
    transaction_quantity: str = ""
    transaction_price: str = ""
    expires: str = ""
    new_offer_quantity: str = ""
    new_offer_price: str = ""

    @classmethod
    def from_columns(cls, columns: Sequence[Optional[str]]) -> InventoryItem:
        """
        Build an item from positional columns.

        Missing or None columns become empty strings; extra columns are ignored.
        """
        values = {}
        for index, name in enumerate(INVENTORY_FIELDS):
            value = columns[index] if index < len(columns) else None
            values[name] = str(value).strip() if value is not None else ""
        return cls(**values)


# Python attribute name -> wire key used in JSON payloads
_SPEC_WIRE_KEYS = {'lock_status': 'lockStatus'}


@dataclass
class ProductSpecs:
    """Technical and condition attributes of a product. All optional."""
    display: Optional[str] = None
    processor: Optional[str] = None
    memory: Optional[str] = None
    storage: Optional[str] = None
    camera: Optional[str] = None
    battery: Optional[str] = None
    os: Optional[str] = None
    color: Optional[str] = None
    carrier: Optional[str] = None
    lock_status: Optional[str] = None
    grade: Optional[str] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> ProductSpecs:
        """Build specs from wire or attribute keys, ignoring unknown keys and empty values."""
        if not data:
            return cls()

        wire_to_attr = {wire: attr for attr, wire in _SPEC_WIRE_KEYS.items()}
        known = set(cls.field_names())
        values = {}
        for key, value in data.items():
            attr = wire_to_attr.get(key, key)
            if attr in known and value not in (None, ""):
                values[attr] = str(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        """Return present values keyed by their wire names."""
        result = {}
        for name in self.field_names():
            value = getattr(self, name)
            if value:
                result[_SPEC_WIRE_KEYS.get(name, name)] = value
        return result

    def missing_fields(self, names: Optional[Sequence[str]] = None) -> List[str]:
        """List attribute names (optionally restricted to ``names``) that have no value."""
        candidates = names if names is not None else self.field_names()
        return [name for name in candidates if not getattr(self, name)]

    def merge_missing(self, other: ProductSpecs) -> ProductSpecs:
        """
        Fill absent attributes from ``other``.

        Present values are never overwritten. Returns a new instance.
        """
        merged = {}
        for name in self.field_names():
            current = getattr(self, name)
            merged[name] = current if current else (getattr(other, name) or None)
        return ProductSpecs(**merged)

    def is_empty(self) -> bool:
        return not self.to_dict()


def _now() -> str:
    return datetime.now().isoformat()


@dataclass
class Product:
    """
    Canonical catalog product.

    ``in_stock`` is always derived from ``stock_count`` so the two
    can never disagree.
    """
    id: str
    name: str
    brand: str
    model: str
    price: float = 0.0
    description: str = ""
    image_url: str = ""
    tags: List[str] = field(default_factory=list)
    specs: ProductSpecs = field(default_factory=ProductSpecs)
    stock_count: int = 0
    in_stock: bool = False
    category: str = ""
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def __post_init__(self):
        if self.price < 0:
            raise ValueError(f"Product price must be non-negative (got {self.price})")
        if self.stock_count < 0:
            raise ValueError(f"Product stock count must be non-negative (got {self.stock_count})")
        if isinstance(self.specs, Mapping):
            self.specs = ProductSpecs.from_dict(self.specs)
        self.in_stock = self.stock_count > 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the storefront's JSON field names."""
        return {
            'id': self.id,
            'name': self.name,
            'brand': self.brand,
            'model': self.model,
            'price': self.price,
            'description': self.description,
            'imageUrl': self.image_url,
            'tags': list(self.tags),
            'specs': self.specs.to_dict(),
            'inStock': self.in_stock,
            'stockCount': self.stock_count,
            'category': self.category,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Product:
        """Inverse of ``to_dict``."""
        kwargs = {
            'id': str(data['id']),
            'name': data.get('name', ''),
            'brand': data.get('brand', ''),
            'model': data.get('model', ''),
            'price': float(data.get('price') or 0),
            'description': data.get('description') or '',
            'image_url': data.get('imageUrl') or '',
            'tags': list(data.get('tags') or []),
            'specs': ProductSpecs.from_dict(data.get('specs')),
            'stock_count': int(data.get('stockCount') or 0),
            'category': data.get('category') or '',
        }
        if data.get('createdAt'):
            kwargs['created_at'] = data['createdAt']
        if data.get('updatedAt'):
            kwargs['updated_at'] = data['updatedAt']
        return cls(**kwargs)


@dataclass
class ImportResult:
    """Outcome of one bulk import call. Partial failure is a normal result."""
    imported: int = 0
    errors: List[str] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    total_rows: int = 0
    processed_rows: int = 0
    test_mode: bool = False

    @property
    def success(self) -> bool:
        return self.imported > 0 or not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'imported': self.imported,
            'errors': list(self.errors),
            'products': [p.to_dict() for p in self.products],
            'totalRows': self.total_rows,
            'processedRows': self.processed_rows,
            'testMode': self.test_mode,
        }
