"""Built-in building catalogs.

Pure data module with no UI dependencies (no tkinter), so it can be imported
by headless scripts as well as the GUI.

Loads catalog data from JSON files under ``baseplanner/catalogs/builtin/``:
  - "Default": the full building set (cannons, towers, 250 walls, traps...).
  - "Classic": the smaller starter set with 100 walls.

Provides:
  - BUILDING_CATALOGS: dict mapping catalog name -> ``Catalog``.
  - DEFAULT_CATALOG_NAME: the catalog the app opens with.
"""

from pathlib import Path

from ..engine.catalog_io import builtin_catalog_path, load_catalog
from ..engine.types import Catalog

DEFAULT_CATALOG_NAME = "Default"

BUILDING_CATALOGS: dict[str, Catalog] = {
    "Default": load_catalog(builtin_catalog_path("default")),
    "Classic": load_catalog(builtin_catalog_path("classic")),
}


def resolve_catalog(name_or_path: str | None) -> Catalog:
    """Look up a built-in catalog by name (case-insensitive) or load a file.

    Raises ValueError if the argument is neither.
    """
    if not name_or_path:
        return BUILDING_CATALOGS[DEFAULT_CATALOG_NAME]
    for name, catalog in BUILDING_CATALOGS.items():
        if name.lower() == name_or_path.lower():
            return catalog
    path = Path(name_or_path)
    if path.suffix.lower() == ".json" and path.is_file():
        return load_catalog(path)
    raise ValueError(
        f"Unknown catalog {name_or_path!r}; "
        f"choose one of {sorted(BUILDING_CATALOGS)} or a .json file"
    )
