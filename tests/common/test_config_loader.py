"""Tests for catalog/common/config_loader.py"""

import pytest

from catalog.common.config_loader import (
    build_alias_lookup,
    load_config,
    load_image_sources,
    load_import_settings,
    load_spec_sources,
)


class TestBuildAliasLookup:
    def test_keys_are_lowercase_and_stripped(self):
        lookup = build_alias_lookup({"manufacturer": [" Manufacturer ", "Brand"]})
        assert lookup == {"manufacturer": "manufacturer", "brand": "manufacturer"}

    def test_first_field_claiming_a_header_wins(self):
        lookup = build_alias_lookup({"capacity": ["Storage"], "storage": ["Storage"]})
        assert lookup["storage"] == "capacity"

    def test_empty(self):
        assert build_alias_lookup({}) == {}


class TestLoadConfig:
    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.yaml")

    def test_env_override(self, tmp_path, monkeypatch):
        (tmp_path / "import_settings.yaml").write_text("batch_size: 2\n", encoding="utf-8")
        monkeypatch.setenv("CATALOG_CONFIG_DIR", str(tmp_path))
        assert load_import_settings() == {"batch_size": 2}

    def test_empty_file_is_empty_dict(self, tmp_path, monkeypatch):
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")
        monkeypatch.setenv("CATALOG_CONFIG_DIR", str(tmp_path))
        assert load_config("empty.yaml") == {}


class TestShippedConfig:
    def test_import_settings(self):
        settings = load_import_settings()
        assert settings["batch_size"] == 5
        assert settings["test_mode_limit"] == 10

    def test_column_aliases_cover_every_inventory_field(self):
        from catalog.models import INVENTORY_FIELDS

        aliases = load_import_settings()["column_aliases"]
        assert set(aliases) == set(INVENTORY_FIELDS)

    def test_image_sources(self):
        config = load_image_sources()
        assert config["placeholder"] == "/images/no-image.png"
        assert "{query}" in config["search_url_template"]
        assert "iphone 15" in config["product_images"]

    def test_spec_sources(self):
        config = load_spec_sources()
        assert config["min_confidence"] == 0.3
        assert [s["name"] for s in config["sources"]] == ["gsmarena", "phonearena"]
