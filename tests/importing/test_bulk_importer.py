"""Tests for catalog/importing/bulk_importer.py"""

import io
from unittest.mock import MagicMock

import pandas as pd
import pytest

from catalog.common.config_loader import load_import_settings
from catalog.enrichment import EnrichmentResult
from catalog.filters import FilterEngine, FilterState, apply_filters
from catalog.importing import BulkImporter, ImportFileError, parse_inventory_data
from catalog.store import InMemoryCatalogStore


@pytest.fixture
def settings():
    values = load_import_settings()
    values.update({"batch_size": 2, "batch_delay": 0.5, "test_mode_limit": 3})
    return values


@pytest.fixture
def store():
    return InMemoryCatalogStore()


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def importer(store, settings, sleep):
    return BulkImporter(store, settings=settings, sleep=sleep)


def _rows(iphone_row, count):
    return [dict(iphone_row, item_number=str(i), model=f"Model {i}") for i in range(1, count + 1)]


class TestImportText:
    def test_imports_all_valid_rows(self, importer, store, inventory_text, iphone_row):
        result = importer.import_text(inventory_text(*_rows(iphone_row, 4)))
        assert result.imported == 4
        assert result.errors == []
        assert result.total_rows == result.processed_rows == 4
        assert len(store) == 4
        assert [p.model for p in result.products] == ["Model 1", "Model 2", "Model 3", "Model 4"]

    def test_validation_failures_reported_per_row(self, importer, store, inventory_text, iphone_row):
        rows = _rows(iphone_row, 5)
        rows[1]["manufacturer"] = ""
        rows[3]["list_price"] = "call"
        result = importer.import_text(inventory_text(*rows))

        assert result.imported == 3
        assert result.errors == [
            "Row 2: Missing required fields (brand, model, price)",
            "Row 4: Missing required fields (brand, model, price)",
        ]
        assert len(store) == 3
        assert result.success

    def test_test_mode_limits_rows(self, importer, inventory_text, iphone_row):
        result = importer.import_text(inventory_text(*_rows(iphone_row, 5)), test_mode=True)
        assert result.imported == 3
        assert result.total_rows == 5
        assert result.processed_rows == 3
        assert result.test_mode is True

    def test_reimport_updates_existing_product(self, importer, store, inventory_text, iphone_row):
        first = importer.import_text(inventory_text(iphone_row))
        second = importer.import_text(inventory_text(dict(iphone_row, list_price="450", quantity_available="0")))

        assert len(store) == 1
        stored = store.list()[0]
        assert stored.id == first.products[0].id == second.products[0].id
        assert stored.price == 450.0
        assert stored.in_stock is False

    def test_repeated_row_in_one_file_listed_once(self, importer, store, inventory_text, iphone_row):
        result = importer.import_text(inventory_text(iphone_row, dict(iphone_row, list_price="450")))

        assert result.imported == 2
        assert len(store) == 1
        assert len(result.products) == 1
        assert result.products[0].price == 450.0
        assert result.products[0] == store.list()[0]

    def test_no_sleep_without_enrichment(self, importer, sleep, inventory_text, iphone_row):
        importer.import_text(inventory_text(*_rows(iphone_row, 5)))
        sleep.assert_not_called()

    def test_sleeps_between_batches_when_enriching(self, store, settings, sleep, inventory_text, iphone_row):
        image_fetcher = MagicMock()
        image_fetcher.fetch_image.return_value = EnrichmentResult(
            value="https://cdn.example/x.png", source="known_product"
        )
        importer = BulkImporter(store, settings=settings, image_fetcher=image_fetcher, sleep=sleep)

        result = importer.import_text(inventory_text(*_rows(iphone_row, 5)), fetch_images=True)

        assert result.imported == 5
        assert image_fetcher.fetch_image.call_count == 5
        # 5 rows in batches of 2 -> 3 batches -> 2 pauses
        assert sleep.call_count == 2
        sleep.assert_called_with(0.5)
        assert all(p.image_url == "https://cdn.example/x.png" for p in store.list())

    def test_invalid_rows_are_not_enriched(self, store, settings, sleep, inventory_text, iphone_row):
        image_fetcher = MagicMock()
        image_fetcher.fetch_image.return_value = EnrichmentResult(value="u", source="image_search")
        importer = BulkImporter(store, settings=settings, image_fetcher=image_fetcher, sleep=sleep)

        importer.import_text(inventory_text(dict(iphone_row, list_price="0")), fetch_images=True)

        image_fetcher.fetch_image.assert_not_called()

    def test_unexpected_row_error_does_not_abort(self, settings, sleep, inventory_text, iphone_row):
        store = MagicMock()
        store.upsert.side_effect = [ValueError("Duplicate product id: x"), (MagicMock(), True)]
        importer = BulkImporter(store, settings=settings, sleep=sleep)

        result = importer.import_text(inventory_text(*_rows(iphone_row, 2)))

        assert result.imported == 1
        assert result.errors == ["Row 1: Duplicate product id: x"]

    def test_custom_deriver_factory(self, store, settings, sleep, inventory_text, iphone_row):
        from catalog.importing import ProductDeriver

        calls = []

        def factory(fetch_images, fetch_specs):
            calls.append((fetch_images, fetch_specs))
            return ProductDeriver(id_factory=lambda: f"pm-product_{len(store) + 1:012d}")

        importer = BulkImporter(store, settings=settings, deriver_factory=factory, sleep=sleep)
        result = importer.import_text(inventory_text(iphone_row), fetch_specs=True)

        assert calls == [(False, True)]
        assert result.products[0].id == "pm-product_000000000001"

    def test_no_rows_raises(self, importer, inventory_text):
        with pytest.raises(ImportFileError, match="No data"):
            importer.import_text(inventory_text())

    def test_round_trip_with_default_filters(self, importer, inventory_text, iphone_row):
        rows = _rows(iphone_row, 4)
        rows[2]["quantity_available"] = "0"
        text = inventory_text(*rows)

        result = importer.import_text(text)
        filtered = apply_filters(result.products, FilterState())

        assert len(parse_inventory_data(text)) == 4
        assert filtered == result.products
        assert FilterEngine(result.products).filtered == result.products


class TestImportBytes:
    def test_csv_with_named_headers(self, importer, store):
        data = (
            "Manufacturer,Model,Capacity,Color,List Price,Quantity Available,Display\n"
            "Apple,iPhone 15,128GB,Blue,$499.00,3,6.1\" OLED\n"
            "Samsung,Galaxy S24,256GB,Black,,2,\n"
        ).encode("utf-8")

        result = importer.import_bytes(data, "inventory.csv")

        assert result.imported == 1
        assert result.errors == ["Row 2: Missing required fields (brand, model, price)"]
        product = store.list()[0]
        assert product.name == "Apple iPhone 15 128GB Blue"
        assert product.price == 499.0
        assert product.specs.display == "6.1\" OLED"

    def test_csv_with_bom(self, importer):
        data = "\ufeffManufacturer,Model,List Price\nApple,iPhone 15,499\n".encode("utf-8")
        assert importer.import_bytes(data, "inventory.csv").imported == 1

    def test_tsv_export(self, importer, inventory_text, iphone_row):
        data = inventory_text(iphone_row).encode("utf-8")
        result = importer.import_bytes(data, "export.TSV")
        assert result.imported == 1

    def test_excel_workbook(self, importer, store):
        frame = pd.DataFrame({
            "Manufacturer": ["Google", "Apple"],
            "Model": ["Pixel 8", "iPad Air"],
            "Color": ["Obsidian", "Mixed"],
            "List Price": [399, 320.5],
            "Quantity Available": [4, 0],
        })
        buffer = io.BytesIO()
        frame.to_excel(buffer, index=False)

        result = importer.import_bytes(buffer.getvalue(), "inventory.xlsx")

        assert result.imported == 2
        names = [p.name for p in store.list()]
        assert names == ["Google Pixel 8 Obsidian", "Apple iPad Air"]
        assert store.list()[1].in_stock is False

    def test_corrupt_workbook_raises(self, importer):
        with pytest.raises(ImportFileError, match="Cannot read workbook"):
            importer.import_bytes(b"not a workbook", "inventory.xlsx")

    def test_unsupported_extension_raises(self, importer):
        with pytest.raises(ImportFileError, match="Unsupported file format"):
            importer.import_bytes(b"{}", "inventory.json")

    def test_non_utf8_text_raises(self, importer):
        with pytest.raises(ImportFileError, match="not UTF-8"):
            importer.import_bytes(b"\xff\xfe\x00bad", "inventory.csv")


class TestImportFile:
    def test_reads_file(self, importer, tmp_path, inventory_text, iphone_row):
        path = tmp_path / "inventory.txt"
        path.write_text(inventory_text(iphone_row), encoding="utf-8")
        assert importer.import_file(path).imported == 1

    def test_missing_file_raises(self, importer, tmp_path):
        with pytest.raises(ImportFileError, match="Cannot read"):
            importer.import_file(tmp_path / "missing.tsv")
