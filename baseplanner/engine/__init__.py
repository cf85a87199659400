"""Headless board engine: transform, occupancy, state and drag controller."""

from .controller import PlacementController
from .state import EditorState, LayoutError, UnknownSpecError
from .types import BoardConfig, BuildingSpec, Catalog, PlacedToken

__all__ = [
    "BoardConfig",
    "BuildingSpec",
    "Catalog",
    "EditorState",
    "LayoutError",
    "PlacedToken",
    "PlacementController",
    "UnknownSpecError",
]
