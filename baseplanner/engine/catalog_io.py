"""Load and save building catalogs from/to JSON files.

A catalog file looks like::

    {
      "name": "Default",
      "buildings": [
        {"key": "cannon", "name": "cannon", "size": 3, "radius": 9,
         "count": 5, "cls": "cannon"},
        ...
      ]
    }

Built-in catalogs live in ``baseplanner/catalogs/builtin/``.
"""

from __future__ import annotations

import json
from pathlib import Path

from .types import Catalog

# baseplanner/catalogs/ is one level up from baseplanner/engine/catalog_io.py
_CATALOGS_DIR = Path(__file__).parent.parent / "catalogs"


def builtin_catalog_path(name: str) -> Path:
    """Return the path to a built-in catalog JSON file.

    Args:
        name: Catalog name without extension (e.g. "default").

    Returns:
        Path to ``baseplanner/catalogs/builtin/{name}.json``.
    """
    return _CATALOGS_DIR / "builtin" / f"{name}.json"


def builtin_catalog_names() -> list[str]:
    return sorted(p.stem for p in (_CATALOGS_DIR / "builtin").glob("*.json"))


def load_catalog(path: Path) -> Catalog:
    """Load a JSON catalog file and return a typed ``Catalog``.

    Raises ValueError if two buildings share a key.
    """
    with open(path) as f:
        data = json.load(f)
    catalog = Catalog.from_dict(data)
    keys = catalog.keys()
    dupes = sorted({k for k in keys if keys.count(k) > 1})
    if dupes:
        raise ValueError(f"Duplicate building keys in {path}: {dupes}")
    return catalog


def save_catalog(catalog: Catalog, path: Path) -> None:
    """Write a catalog to a JSON file.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(catalog.to_dict(), f, indent=2)
        f.write("\n")
