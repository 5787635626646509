"""Shared test fixtures."""

import pytest

from catalog.models import INVENTORY_FIELDS, InventoryItem, Product, ProductSpecs

INVENTORY_HEADER = "\t".join([
    "Item #", "Warehouse", "Category", "Manufacturer", "Model", "Grade",
    "Capacity", "Carrier", "Color", "Lock Status", "Model Number",
    "Parts Message", "Increment Size", "Quantity Available", "List Price",
    "Transaction Status", "Transaction Quantity", "Transaction Price",
    "Expires", "New Offer Quantity", "New Offer Price",
])

IPHONE_ROW = {
    "item_number": "1001",
    "warehouse": "Miami",
    "category": "NA",
    "manufacturer": "Apple",
    "model": "iPhone 15",
    "grade": "A",
    "capacity": "128GB",
    "carrier": "NA",
    "color": "Blue",
    "lock_status": "Unlocked",
    "model_number": "A3090",
    "quantity_available": "12",
    "list_price": "499.00",
}


def _line(values, delimiter="\t"):
    return delimiter.join(values.get(name, "") for name in INVENTORY_FIELDS)


@pytest.fixture
def inventory_line():
    """Factory building one positional export line from field values."""
    def build(delimiter="\t", **values):
        return _line(values, delimiter)
    return build


@pytest.fixture
def inventory_text(inventory_line):
    """Factory building a tab-delimited export (header + rows)."""
    def build(*rows):
        return "\n".join([INVENTORY_HEADER] + [inventory_line(**row) for row in rows])
    return build


@pytest.fixture
def iphone_row():
    """Field values of the canonical Apple iPhone 15 row."""
    return dict(IPHONE_ROW)


@pytest.fixture
def iphone_item():
    return InventoryItem(**IPHONE_ROW)


@pytest.fixture
def make_product():
    """Factory for catalog products with sensible defaults."""
    counter = {"n": 0}

    def build(**overrides):
        counter["n"] += 1
        values = {
            "id": f"pm-product_test{counter['n']:04d}",
            "name": "Apple iPhone 15 128GB Blue",
            "brand": "Apple",
            "model": "iPhone 15",
            "price": 499.0,
            "tags": ["Apple", "iPhone 15", "phones"],
            "specs": ProductSpecs(storage="128GB", color="Blue", grade="A"),
            "stock_count": 5,
            "category": "phones",
            "created_at": f"2024-01-01T00:00:{counter['n']:02d}",
            "updated_at": f"2024-01-01T00:00:{counter['n']:02d}",
        }
        values.update(overrides)
        return Product(**values)

    return build


@pytest.fixture
def catalog_products(make_product):
    """Small mixed catalog used by filter and feed tests."""
    return [
        make_product(
            name="Apple iPhone 15 128GB Blue", brand="Apple", model="iPhone 15", price=499.0,
            tags=["Apple", "iPhone 15", "phones"], stock_count=5,
            specs=ProductSpecs(storage="128GB", color="Blue", carrier="Unlocked", grade="A"),
        ),
        make_product(
            name="Samsung Galaxy S24 256GB Black", brand="Samsung", model="Galaxy S24", price=650.0,
            tags=["Samsung", "Galaxy S24"], stock_count=0,
            specs=ProductSpecs(storage="256GB", color="Black", carrier="T-Mobile", grade="B"),
        ),
        make_product(
            name="Apple iPad Air 64GB", brand="Apple", model="iPad Air", price=320.0,
            tags=["Apple", "iPad Air"], stock_count=2,
            specs=ProductSpecs(storage="64GB", grade="A"),
        ),
        make_product(
            name="Google Pixel 8 128GB Black", brand="Google", model="Pixel 8", price=399.0,
            tags=["Google", "Pixel 8", "Phones"], stock_count=1,
            specs=ProductSpecs(storage="128GB", color="Black", grade="A"),
        ),
        make_product(
            name="Apple Watch Series 9", brand="Apple", model="Watch Series 9", price=250.0,
            tags=["Apple"], stock_count=3,
            specs=ProductSpecs(color="Midnight", grade="C"),
        ),
        make_product(
            name="Anker Charger", brand="Anker", model="PowerPort", price=25.0,
            tags=["Anker"], stock_count=0, specs=ProductSpecs(),
        ),
    ]
