"""Tests for the built-in catalog registry."""

import pytest

from ..engine.catalog_io import builtin_catalog_names, save_catalog
from ..engine.types import BuildingSpec, Catalog, CatalogEntry
from .catalogs import BUILDING_CATALOGS, DEFAULT_CATALOG_NAME, resolve_catalog


def test_every_builtin_is_registered():
    assert DEFAULT_CATALOG_NAME in BUILDING_CATALOGS
    assert len(BUILDING_CATALOGS) == len(builtin_catalog_names())


class TestResolveCatalog:
    def test_empty_means_default(self):
        assert resolve_catalog(None) is BUILDING_CATALOGS["Default"]
        assert resolve_catalog("") is BUILDING_CATALOGS["Default"]

    def test_case_insensitive_name(self):
        assert resolve_catalog("classic") is BUILDING_CATALOGS["Classic"]
        assert resolve_catalog("DEFAULT") is BUILDING_CATALOGS["Default"]

    def test_json_path(self, tmp_path):
        path = tmp_path / "mine.json"
        hut = CatalogEntry("hut", BuildingSpec("hut", 2), 1)
        save_catalog(Catalog(entries=[hut]), path)
        assert resolve_catalog(str(path)).keys() == ["hut"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown catalog"):
            resolve_catalog(str(tmp_path / "absent.json"))

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown catalog"):
            resolve_catalog("nonexistent")
