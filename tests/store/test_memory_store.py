"""Tests for catalog/store/base.py and catalog/store/memory.py"""

import json

import pytest

from catalog.models import ProductSpecs
from catalog.store import InMemoryCatalogStore, JsonFileCatalogStore, ProductNotFoundError


class TestInMemoryCatalogStore:
    def test_create_get_list(self, make_product):
        store = InMemoryCatalogStore()
        first = store.create(make_product(model="A"))
        second = store.create(make_product(model="B"))
        assert store.get(first.id) is first
        assert store.list() == [first, second]
        assert len(store) == 2

    def test_duplicate_id_rejected(self, make_product):
        product = make_product()
        store = InMemoryCatalogStore([product])
        with pytest.raises(ValueError, match="Duplicate"):
            store.create(product)

    def test_missing_product(self):
        store = InMemoryCatalogStore()
        with pytest.raises(ProductNotFoundError) as excinfo:
            store.get("pm-product_missing")
        assert str(excinfo.value) == "Product not found: pm-product_missing"
        with pytest.raises(KeyError):
            store.delete("pm-product_missing")
        with pytest.raises(ProductNotFoundError):
            store.update("pm-product_missing", price=1.0)

    def test_delete(self, make_product):
        product = make_product()
        store = InMemoryCatalogStore([product])
        store.delete(product.id)
        assert store.list() == []

    def test_update_keeps_in_stock_consistent(self, make_product):
        product = make_product(stock_count=3)
        store = InMemoryCatalogStore([product])

        updated = store.update(product.id, stock_count=0, price=450.0)

        assert updated.in_stock is False
        assert updated.price == 450.0
        assert updated.created_at == product.created_at
        assert updated.updated_at != product.updated_at
        assert store.get(product.id) is updated

    def test_update_rejects_unknown_fields(self, make_product):
        product = make_product()
        store = InMemoryCatalogStore([product])
        with pytest.raises(ValueError, match="in_stock"):
            store.update(product.id, in_stock=False)

    def test_update_validates_values(self, make_product):
        product = make_product()
        store = InMemoryCatalogStore([product])
        with pytest.raises(ValueError, match="price"):
            store.update(product.id, price=-1.0)
        assert store.get(product.id).price == product.price


class TestUpsert:
    def test_creates_new(self, make_product):
        store = InMemoryCatalogStore()
        product, created = store.upsert(make_product())
        assert created is True
        assert store.list() == [product]

    def test_updates_same_name_and_brand(self, make_product):
        original = make_product(tags=["Apple", "phones"], category="phones")
        store = InMemoryCatalogStore([original])
        incoming = make_product(
            price=420.0, description="Refreshed", image_url="https://cdn.example/x.png",
            specs=ProductSpecs(storage="128GB", os="iOS 17"), stock_count=0,
            tags=["other"], category="",
        )

        stored, created = store.upsert(incoming)

        assert created is False
        assert len(store) == 1
        assert stored.id == original.id
        assert stored.price == 420.0
        assert stored.description == "Refreshed"
        assert stored.image_url == "https://cdn.example/x.png"
        assert stored.specs.os == "iOS 17"
        assert stored.in_stock is False
        assert stored.tags == ["Apple", "phones"]
        assert stored.category == "phones"

    def test_different_brand_is_new_product(self, make_product):
        store = InMemoryCatalogStore([make_product(brand="Apple")])
        _, created = store.upsert(make_product(brand="Refurb Apple"))
        assert created is True
        assert len(store) == 2


class TestJsonFileCatalogStore:
    def test_persists_after_each_change(self, tmp_path, make_product):
        path = tmp_path / "data" / "catalog.json"
        store = JsonFileCatalogStore(path)
        product = store.create(make_product())

        data = json.loads(path.read_text(encoding="utf-8"))
        assert [p["id"] for p in data["products"]] == [product.id]

        store.update(product.id, price=10.0)
        assert json.loads(path.read_text(encoding="utf-8"))["products"][0]["price"] == 10.0

        store.delete(product.id)
        assert json.loads(path.read_text(encoding="utf-8")) == {"products": []}

    def test_reloads_saved_catalog(self, tmp_path, make_product):
        path = tmp_path / "catalog.json"
        store = JsonFileCatalogStore(path)
        first = store.create(make_product(model="A", specs=ProductSpecs(lock_status="Unlocked")))
        second = store.create(make_product(model="B", stock_count=0))

        reloaded = JsonFileCatalogStore(path)

        assert reloaded.list() == [first, second]
        assert reloaded.get(first.id).specs.lock_status == "Unlocked"
        assert reloaded.get(second.id).in_stock is False

    def test_missing_file_starts_empty(self, tmp_path):
        store = JsonFileCatalogStore(tmp_path / "none.json")
        assert store.list() == []
        assert not (tmp_path / "none.json").exists()

    def test_no_temp_file_left(self, tmp_path, make_product):
        path = tmp_path / "catalog.json"
        JsonFileCatalogStore(path).create(make_product())
        assert [p.name for p in tmp_path.iterdir()] == ["catalog.json"]
