"""Tests for the board data types and their dict formats."""

import pytest

from .types import (
    BoardConfig,
    BuildingSpec,
    Catalog,
    CatalogEntry,
    InventoryEntry,
    PlacedToken,
)


class TestBuildingSpec:
    def test_rejects_empty_footprint(self):
        with pytest.raises(ValueError):
            BuildingSpec("hut", 0)

    def test_rejects_negative_radius(self):
        with pytest.raises(ValueError):
            BuildingSpec("hut", 1, -1.0)


class TestInventoryEntry:
    def test_taken_clamps_at_zero(self):
        entry = InventoryEntry(BuildingSpec("wall", 1), 2)
        assert entry.taken().remaining == 1
        assert entry.taken(5).remaining == 0

    def test_returned(self):
        entry = InventoryEntry(BuildingSpec("wall", 1), 0)
        assert entry.returned(3).remaining == 3


class TestPlacedToken:
    def test_dict_keys(self):
        token = PlacedToken(
            id="a", spec_key="cannon", x=1, y=2, footprint_size=3,
            radius=9.0, visual_class="cannon",
        )
        d = token.to_dict()
        assert d == {
            "id": "a",
            "key": "cannon",
            "x": 1,
            "y": 2,
            "size": 3,
            "radius": 9.0,
            "cls": "cannon",
        }
        assert PlacedToken.from_dict(d) == token

    def test_from_dict_defaults(self):
        token = PlacedToken.from_dict(
            {"id": 7, "key": "wall", "x": 0, "y": 0, "size": 1}
        )
        assert token.id == "7"
        assert token.radius == 0.0
        assert token.visual_class == ""
        assert not token.selected

    def test_is_wall_needs_class_and_1x1(self):
        wall = PlacedToken("w", "wall", 0, 0, 1, visual_class="wall")
        block = PlacedToken("b", "block", 0, 0, 2, visual_class="wall")
        hut = PlacedToken("h", "hut", 0, 0, 1, visual_class="hut")
        assert wall.is_wall
        assert not block.is_wall
        assert not hut.is_wall

    def test_overlaps(self):
        a = PlacedToken("a", "k", 0, 0, 3)
        assert a.overlaps(PlacedToken("b", "k", 2, 2, 2))
        assert not a.overlaps(PlacedToken("c", "k", 3, 0, 2))
        assert not a.overlaps(PlacedToken("d", "k", 0, 3, 1))


class TestCatalog:
    def test_full_stock(self):
        catalog = Catalog(
            entries=[CatalogEntry("hut", BuildingSpec("hut", 2), 4)]
        )
        stock = catalog.full_stock()
        assert list(stock) == ["hut"]
        assert stock["hut"].remaining == 4
        assert stock["hut"].footprint_size == 2

    def test_lookup(self):
        catalog = Catalog(
            entries=[CatalogEntry("hut", BuildingSpec("hut", 2), 4)]
        )
        assert "hut" in catalog
        assert "castle" not in catalog
        assert catalog.get("castle") is None

    def test_to_dict_omits_missing_name(self):
        assert Catalog().to_dict() == {"buildings": []}


class TestBoardConfig:
    def test_defaults(self):
        assert BoardConfig.from_dict(None) == BoardConfig()
        assert BoardConfig() == BoardConfig(60, 22.0, 50.0, 1400.0)

    def test_partial_dict(self):
        config = BoardConfig.from_dict({"grid_size": 40})
        assert config.grid_size == 40
        assert config.tile_half_width == 22.0

    def test_round_trip(self):
        config = BoardConfig(44, 16.0, 30.0, 900.0)
        assert BoardConfig.from_dict(config.to_dict()) == config
