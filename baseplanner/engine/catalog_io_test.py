"""Tests for catalog JSON loading and the built-in catalogs."""

import json

import pytest

from .catalog_io import (
    builtin_catalog_names,
    builtin_catalog_path,
    load_catalog,
    save_catalog,
)
from .types import BuildingSpec, Catalog, CatalogEntry


class TestBuiltinCatalogs:
    def test_names(self):
        assert builtin_catalog_names() == ["classic", "default"]

    def test_default_set(self):
        catalog = load_catalog(builtin_catalog_path("default"))
        assert catalog.name == "Default"
        assert len(catalog.entries) == 15
        wall = catalog.get("wall")
        assert wall.count == 250
        assert wall.spec.footprint_size == 1
        assert wall.spec.visual_class == "wall"
        assert catalog.get("townhall").spec.footprint_size == 4
        assert catalog.get("xbow").spec.radius == 11.5

    def test_classic_set(self):
        catalog = load_catalog(builtin_catalog_path("classic"))
        assert catalog.get("wall100").count == 100
        assert "wall" not in catalog
        assert catalog.get("tesla").spec.footprint_size == 2


class TestLoadSave:
    def test_round_trip(self, tmp_path):
        catalog = Catalog(
            entries=[
                CatalogEntry("gate", BuildingSpec("gate", 2, 0.0, "wall"), 3),
                CatalogEntry(
                    "laser", BuildingSpec("laser", 3, 12.5, "xbow"), 1
                ),
            ],
            name="Custom",
        )
        path = tmp_path / "nested" / "custom.json"
        save_catalog(catalog, path)
        assert load_catalog(path) == catalog

    def test_defaults_for_optional_fields(self, tmp_path):
        path = tmp_path / "min.json"
        path.write_text(json.dumps({"buildings": [{"key": "hut", "size": 2}]}))
        catalog = load_catalog(path)
        entry = catalog.get("hut")
        assert entry.spec.name == "hut"
        assert entry.spec.radius == 0.0
        assert entry.count == 0
        assert catalog.name is None

    def test_duplicate_keys(self, tmp_path):
        path = tmp_path / "dupe.json"
        building = {"key": "hut", "size": 2, "count": 1}
        path.write_text(json.dumps({"buildings": [building, building]}))
        with pytest.raises(ValueError, match="hut"):
            load_catalog(path)

    def test_invalid_footprint(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"buildings": [{"key": "x", "size": 0}]}))
        with pytest.raises(ValueError):
            load_catalog(path)

