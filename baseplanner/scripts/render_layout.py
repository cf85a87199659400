#!/usr/bin/env python3
"""Render a saved layout to a PNG without opening the GUI.

Loads a layout (.json or .png with embedded metadata), validates it against
a catalog exactly like the app's Import button, and writes the rendered
board. By default the layout JSON is embedded in the output so the PNG can
be imported back.

Usage:
    python -m baseplanner.scripts.render_layout layout.json board.png
    python -m baseplanner.scripts.render_layout layout.json board.png \\
        --catalog classic --grid-size 44 --tile 16 --no-embed

Exit codes:
  0 = image written
  1 = layout could not be loaded
"""

import argparse
import logging
import sys

from ..engine.controller import PlacementController
from ..engine.types import BoardConfig
from ..frontend.catalogs import DEFAULT_CATALOG_NAME, resolve_catalog
from ..frontend.layout_io import (
    layout_from_records,
    load_layout,
    records_from_layout,
    save_layout_png,
)
from ..frontend.renderer import board_height, render_board_image

logger = logging.getLogger(__name__)


def _canvas_width(grid_size: int, tile: float, padding: float) -> float:
    """Width that fits the full diamond: 2 * grid_size * tile plus margins."""
    return 2 * grid_size * tile + 2 * padding


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("layout", help="Layout file (.json or .png)")
    parser.add_argument("output", help="Output PNG path")
    parser.add_argument("--catalog", default=DEFAULT_CATALOG_NAME)
    parser.add_argument("--grid-size", type=int, default=60)
    parser.add_argument("--tile", type=float, default=22.0)
    parser.add_argument("--supersample", type=int, default=2)
    parser.add_argument(
        "--embed",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Embed the layout JSON in the PNG",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    padding = BoardConfig.top_padding
    config = BoardConfig(
        grid_size=args.grid_size,
        tile_half_width=args.tile,
        top_padding=padding,
        canvas_width=_canvas_width(args.grid_size, args.tile, padding),
    )
    try:
        catalog = resolve_catalog(args.catalog)
        controller = PlacementController(catalog, config)
        controller.load_records(records_from_layout(load_layout(args.layout)))
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    img = render_board_image(
        controller.state,
        controller.transform,
        controller.grid_size,
        supersample=max(1, args.supersample),
    )
    if args.embed:
        layout = layout_from_records(controller.export_records())
        save_layout_png(img, layout, args.output)
    else:
        img.save(args.output)
    logger.info(
        "wrote %s (%dx%d, %d tokens)",
        args.output,
        img.width,
        board_height(controller.transform, controller.grid_size),
        len(controller.state.placed),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
