"""Data types for the base planner board and its JSON formats."""

from __future__ import annotations

from dataclasses import dataclass, field

WALL_CLASS = "wall"
GHOST_ID = "ghost"


@dataclass(frozen=True)
class BuildingSpec:
    name: str
    footprint_size: int
    radius: float = 0.0
    visual_class: str = ""

    def __post_init__(self) -> None:
        if self.footprint_size < 1:
            raise ValueError(
                f"footprint_size must be positive, got {self.footprint_size}"
            )
        if self.radius < 0:
            raise ValueError(f"radius must be non-negative, got {self.radius}")


@dataclass(frozen=True)
class InventoryEntry:
    spec: BuildingSpec
    remaining: int = 0

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def footprint_size(self) -> int:
        return self.spec.footprint_size

    @property
    def radius(self) -> float:
        return self.spec.radius

    @property
    def visual_class(self) -> str:
        return self.spec.visual_class

    def taken(self, n: int = 1) -> InventoryEntry:
        """Entry with ``n`` fewer pieces, clamped at zero."""
        return InventoryEntry(self.spec, max(0, self.remaining - n))

    def returned(self, n: int = 1) -> InventoryEntry:
        return InventoryEntry(self.spec, self.remaining + n)


@dataclass(frozen=True)
class PlacedToken:
    id: str
    spec_key: str
    x: int
    y: int
    footprint_size: int
    radius: float = 0.0
    visual_class: str = ""
    selected: bool = False

    @property
    def is_wall(self) -> bool:
        """True for the 1x1 wall pieces the wall-chain extender works on."""
        return self.visual_class == WALL_CLASS and self.footprint_size == 1

    def overlaps(self, other: PlacedToken) -> bool:
        return (
            self.x < other.x + other.footprint_size
            and other.x < self.x + self.footprint_size
            and self.y < other.y + other.footprint_size
            and other.y < self.y + self.footprint_size
        )

    @staticmethod
    def from_spec(
        token_id: str, spec_key: str, spec: BuildingSpec, x: int, y: int
    ) -> PlacedToken:
        return PlacedToken(
            id=token_id,
            spec_key=spec_key,
            x=x,
            y=y,
            footprint_size=spec.footprint_size,
            radius=spec.radius,
            visual_class=spec.visual_class,
        )

    @staticmethod
    def from_dict(d: dict) -> PlacedToken:
        return PlacedToken(
            id=str(d["id"]),
            spec_key=str(d["key"]),
            x=d["x"],
            y=d["y"],
            footprint_size=d["size"],
            radius=d.get("radius", 0.0),
            visual_class=d.get("cls", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "key": self.spec_key,
            "x": self.x,
            "y": self.y,
            "size": self.footprint_size,
            "radius": self.radius,
            "cls": self.visual_class,
        }


@dataclass(frozen=True)
class CatalogEntry:
    key: str
    spec: BuildingSpec
    count: int

    @staticmethod
    def from_dict(d: dict) -> CatalogEntry:
        return CatalogEntry(
            key=d["key"],
            spec=BuildingSpec(
                name=d.get("name", d["key"]),
                footprint_size=d["size"],
                radius=d.get("radius", 0.0),
                visual_class=d.get("cls", ""),
            ),
            count=d.get("count", 0),
        )

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.spec.name,
            "size": self.spec.footprint_size,
            "radius": self.spec.radius,
            "count": self.count,
            "cls": self.spec.visual_class,
        }


@dataclass
class Catalog:
    entries: list[CatalogEntry] = field(default_factory=list)
    name: str | None = None

    def keys(self) -> list[str]:
        return [e.key for e in self.entries]

    def get(self, key: str) -> CatalogEntry | None:
        for e in self.entries:
            if e.key == key:
                return e
        return None

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def full_stock(self) -> dict[str, InventoryEntry]:
        """Inventory with every building at its initial count."""
        return {e.key: InventoryEntry(e.spec, e.count) for e in self.entries}

    @staticmethod
    def from_dict(d: dict) -> Catalog:
        return Catalog(
            entries=[
                CatalogEntry.from_dict(b) for b in d.get("buildings", [])
            ],
            name=d.get("name"),
        )

    def to_dict(self) -> dict:
        d: dict = {"buildings": [e.to_dict() for e in self.entries]}
        if self.name:
            d["name"] = self.name
        return d


@dataclass(frozen=True)
class BoardConfig:
    grid_size: int = 60
    tile_half_width: float = 22.0
    top_padding: float = 50.0
    canvas_width: float = 1400.0

    @staticmethod
    def from_dict(d: dict | None) -> BoardConfig:
        if not d:
            return BoardConfig()
        return BoardConfig(
            grid_size=d.get("grid_size", 60),
            tile_half_width=d.get("tile_half_width", 22.0),
            top_padding=d.get("top_padding", 50.0),
            canvas_width=d.get("canvas_width", 1400.0),
        )

    def to_dict(self) -> dict:
        return {
            "grid_size": self.grid_size,
            "tile_half_width": self.tile_half_width,
            "top_padding": self.top_padding,
            "canvas_width": self.canvas_width,
        }
