"""Tests for catalog/models/product.py"""

import pytest

from catalog.models import INVENTORY_FIELDS, ImportResult, InventoryItem, Product, ProductSpecs


class TestInventoryItem:
    def test_has_21_fields_in_column_order(self):
        assert len(INVENTORY_FIELDS) == 21
        assert INVENTORY_FIELDS[3] == "manufacturer"
        assert INVENTORY_FIELDS[14] == "list_price"

    def test_from_columns_strips_values(self):
        columns = [" 1001 ", "Miami", "Phones", " Apple"] + [""] * 17
        item = InventoryItem.from_columns(columns)
        assert item.item_number == "1001"
        assert item.manufacturer == "Apple"

    def test_from_columns_missing_columns_are_empty_strings(self):
        item = InventoryItem.from_columns(["1001", None])
        assert item.item_number == "1001"
        assert item.warehouse == ""
        assert item.new_offer_price == ""

    def test_from_columns_ignores_extra_columns(self):
        columns = [str(i) for i in range(25)]
        item = InventoryItem.from_columns(columns)
        assert item.new_offer_price == "20"

    def test_is_frozen(self):
        item = InventoryItem(model="iPhone 15")
        with pytest.raises(AttributeError):
            item.model = "iPhone 16"


class TestProductSpecs:
    def test_to_dict_uses_wire_keys_and_skips_missing(self):
        specs = ProductSpecs(storage="128GB", lock_status="Unlocked")
        assert specs.to_dict() == {"storage": "128GB", "lockStatus": "Unlocked"}

    def test_from_dict_accepts_wire_and_attribute_keys(self):
        specs = ProductSpecs.from_dict({"lockStatus": "Locked", "os": "iOS 17", "bogus": "x", "color": ""})
        assert specs.lock_status == "Locked"
        assert specs.os == "iOS 17"
        assert specs.color is None

    def test_from_dict_none(self):
        assert ProductSpecs.from_dict(None) == ProductSpecs()

    def test_missing_fields(self):
        specs = ProductSpecs(display="6.1\"", storage="128GB")
        missing = specs.missing_fields(["display", "storage", "camera"])
        assert missing == ["camera"]

    def test_merge_missing_never_overwrites(self):
        existing = ProductSpecs(storage="128GB", color="Blue")
        other = ProductSpecs(storage="256GB", display="6.1\"")
        merged = existing.merge_missing(other)
        assert merged.storage == "128GB"
        assert merged.display == "6.1\""
        assert merged.color == "Blue"

    def test_merge_missing_returns_new_instance(self):
        existing = ProductSpecs(storage="128GB")
        merged = existing.merge_missing(ProductSpecs(os="iOS 17"))
        assert merged is not existing
        assert existing.os is None

    def test_is_empty(self):
        assert ProductSpecs().is_empty()
        assert not ProductSpecs(grade="A").is_empty()


class TestProduct:
    def test_in_stock_follows_stock_count(self):
        assert Product(id="p1", name="n", brand="b", model="m", stock_count=3).in_stock is True
        assert Product(id="p2", name="n", brand="b", model="m", stock_count=0, in_stock=True).in_stock is False

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError, match="price"):
            Product(id="p1", name="n", brand="b", model="m", price=-1.0)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValueError, match="stock"):
            Product(id="p1", name="n", brand="b", model="m", stock_count=-2)

    def test_specs_mapping_converted(self):
        product = Product(id="p1", name="n", brand="b", model="m", specs={"lockStatus": "Unlocked"})
        assert isinstance(product.specs, ProductSpecs)
        assert product.specs.lock_status == "Unlocked"

    def test_to_dict_wire_names(self, make_product):
        data = make_product(image_url="https://cdn.example/x.png").to_dict()
        assert data["imageUrl"] == "https://cdn.example/x.png"
        assert data["inStock"] is True
        assert data["stockCount"] == 5
        assert "createdAt" in data and "updatedAt" in data
        assert data["specs"]["storage"] == "128GB"

    def test_dict_round_trip(self, make_product):
        product = make_product()
        assert Product.from_dict(product.to_dict()) == product


class TestImportResult:
    def test_success_with_imports(self):
        assert ImportResult(imported=1, errors=["Row 2: bad"]).success

    def test_failure_when_only_errors(self):
        assert not ImportResult(imported=0, errors=["Row 1: bad"]).success

    def test_to_dict_keys(self, make_product):
        result = ImportResult(imported=1, products=[make_product()], total_rows=3, processed_rows=3)
        data = result.to_dict()
        assert data["imported"] == 1
        assert data["totalRows"] == 3
        assert data["processedRows"] == 3
        assert data["testMode"] is False
        assert data["products"][0]["name"] == "Apple iPhone 15 128GB Blue"
