"""Save and load board layouts as JSON or PNG (with embedded metadata).

A layout is a flat snapshot of placed tokens::

    {"placed": [{"id": ..., "key": "cannon", "x": 5, "y": 5,
                 "size": 3, "radius": 9, "cls": "cannon"}, ...]}

JSON is the primary format. The PNG variant stores the rendered board with
the same JSON in a tEXt chunk (key: ``baseplanner_layout``), so an exported
picture can be loaded back into the app.

Used by ``app.py`` for its Export/Import buttons and by
``scripts/render_layout.py``.
"""

import json
from pathlib import Path

from PIL import Image
from PIL.PngImagePlugin import PngInfo

METADATA_KEY = "baseplanner_layout"


def layout_from_records(records: list[dict]) -> dict:
    return {"placed": list(records)}


def records_from_layout(layout: dict) -> list[dict]:
    """Return the placed-token records of a loaded layout.

    Raises ValueError if the layout has no ``placed`` list.
    """
    placed = layout.get("placed") if isinstance(layout, dict) else None
    if not isinstance(placed, list):
        raise ValueError("Layout does not contain a 'placed' list")
    return placed


def save_layout_json(layout: dict, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(layout, f, indent=2)
        f.write("\n")


def load_layout_json(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def save_layout_png(img: Image.Image, layout: dict, path: str) -> None:
    """Save the board image with the layout JSON in a PNG tEXt chunk."""
    info = PngInfo()
    info.add_text(METADATA_KEY, json.dumps(layout))
    img.save(path, pnginfo=info)


def load_layout_png(path: str) -> dict:
    """Read the layout back out of an exported board PNG.

    Raises ValueError for a PNG that was not written by ``save_layout_png``.
    """
    with Image.open(path) as img:
        text_data = getattr(img, "text", None)
        if not text_data or METADATA_KEY not in text_data:
            raise ValueError(
                "PNG file does not contain layout metadata "
                f"(missing '{METADATA_KEY}' chunk)"
            )
        return json.loads(text_data[METADATA_KEY])


_LOADERS = {".png": load_layout_png, ".json": load_layout_json}


def load_layout(path) -> dict:
    """Load a layout by file extension: ``.png`` or ``.json``.

    Raises ValueError for any other extension.
    """
    loader = _LOADERS.get(Path(path).suffix.lower())
    if loader is None:
        raise ValueError(f"Unsupported file extension: {path}")
    return loader(str(path))
