"""Tkinter GUI for the base planner.

This is the main application file. It wires the headless engine
(``PlacementController``) to a desktop window. The major classes are:

  * ``InventoryPanel`` — the left sidebar listing every building in the
    catalog with its footprint, radius and remaining count. Clicking a row
    with stock left starts placing a new piece.
  * ``App`` — the top-level window: toolbar (Clear / Export / Import), the
    board canvas, the status bar, and the frame loop.

Input and drawing are kept apart. Canvas mouse bindings forward raw pixel
events to the controller, which swaps in a new ``EditorState``. The frame
loop (``_tick``) polls the controller's current state every ``FRAME_MS`` and
redraws only when the snapshot changed; it never mutates anything.

Layouts are exported as JSON, or as PNG with the JSON embedded, via
``layout_io.py``.
"""

import argparse
import logging
import time
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk

from PIL import ImageTk

from ..engine.controller import (
    DRAGGING,
    HOVER_ONLY,
    PRIMARY,
    SECONDARY,
    PlacementController,
)
from ..engine.iso import IsoTransform
from ..engine.types import BoardConfig, InventoryEntry
from .catalogs import BUILDING_CATALOGS, DEFAULT_CATALOG_NAME, resolve_catalog
from .layout_io import (
    layout_from_records,
    load_layout,
    records_from_layout,
    save_layout_json,
    save_layout_png,
)
from .renderer import CANVAS_BG, board_height, render_board_image

logger = logging.getLogger(__name__)

# -- Visual constants --

PANEL_BG = "#111722"
FRAME_MS = 16
EXPORT_SUPERSAMPLE = 2
HINT_TEXT = (
    "LMB: place / move. RMB on a building: delete. "
    "Click a building: show its radius. "
    "Arrows around a selected wall extend it."
)


def _cursor_for(mode, arrow_hover):
    """Tk cursor name for the current interaction."""
    if arrow_hover is not None:
        return "hand2"
    if mode == DRAGGING:
        return "fleur"
    if mode == HOVER_ONLY:
        return "hand1"
    return "arrow"


def _inventory_row(entry: InventoryEntry):
    """(name, footprint, radius, count) column values for a panel row."""
    size = f"{entry.footprint_size}×{entry.footprint_size}"
    radius = f"R{entry.radius:g}" if entry.radius else ""
    return (entry.name, size, radius, f"× {entry.remaining}")


def _status_text(controller: PlacementController) -> str:
    state = controller.state
    parts = [f"{len(state.placed)} placed"]
    selected = state.selected
    if selected is not None:
        parts.append(
            f"selected {selected.spec_key} at ({selected.x}, {selected.y})"
        )
    if state.anchor_id is not None:
        parts.append("wall anchor set")
    if state.ghost is not None:
        parts.append(f"dragging {state.ghost.spec_key}")
    return " · ".join(parts)


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


class InventoryPanel(ttk.Frame):
    """Building list; a click on a row begins placing that building."""

    COLUMNS = ("name", "size", "radius", "count")

    def __init__(self, parent, on_pick):
        super().__init__(parent, padding=5)
        self._on_pick = on_pick
        self._inventory = None
        self._build()

    def _build(self):
        ttk.Label(
            self, text="Buildings", font=("TkDefaultFont", 11, "bold")
        ).pack(anchor="w", pady=(0, 4))

        self.tree = ttk.Treeview(
            self, columns=self.COLUMNS, show="headings", height=20
        )
        widths = {"name": 130, "size": 50, "radius": 50, "count": 60}
        for col in self.COLUMNS:
            self.tree.heading(col, text=col.title())
            self.tree.column(col, width=widths[col], anchor="w")
        self.tree.tag_configure("empty", foreground="#777777")
        self.tree.pack(fill=tk.BOTH, expand=True)
        self.tree.bind("<ButtonPress-1>", self._on_click)

        ttk.Label(self, text=HINT_TEXT, wraplength=280, justify=tk.LEFT).pack(
            anchor="w", pady=(6, 0)
        )

    def refresh(self, inventory):
        """Rebuild rows if the inventory snapshot changed."""
        if inventory is self._inventory:
            return
        self._inventory = inventory
        self.tree.delete(*self.tree.get_children())
        for key, entry in inventory.items():
            tags = ("empty",) if entry.remaining <= 0 else ()
            self.tree.insert(
                "", tk.END, iid=key, values=_inventory_row(entry), tags=tags
            )

    def _on_click(self, event):
        key = self.tree.identify_row(event.y)
        if key:
            self._on_pick(key)


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


class App:
    def __init__(self, catalog, config=None):
        self.root = tk.Tk()
        self.root.title("Base Planner")
        self.root.geometry("1400x900")
        self.root.resizable(True, True)
        self.root.configure(bg=PANEL_BG)

        style = ttk.Style()
        style.theme_use("clam")

        self.controller = PlacementController(catalog, config)

        # Left: inventory
        self.inventory_panel = InventoryPanel(self.root, on_pick=self._on_pick)
        self.inventory_panel.pack(side=tk.LEFT, fill=tk.Y, padx=5, pady=5)

        # Right: toolbar, canvas, status
        right = ttk.Frame(self.root)
        right.pack(side=tk.RIGHT, fill=tk.BOTH, expand=True, padx=5, pady=5)

        toolbar = ttk.Frame(right)
        toolbar.pack(side=tk.TOP, fill=tk.X)
        ttk.Button(toolbar, text="Clear", command=self._on_clear).pack(
            side=tk.LEFT, padx=(0, 4)
        )
        ttk.Button(toolbar, text="Export", command=self._on_export).pack(
            side=tk.LEFT, padx=4
        )
        ttk.Button(toolbar, text="Import", command=self._on_import).pack(
            side=tk.LEFT, padx=4
        )

        bg = "#%02x%02x%02x" % CANVAS_BG[:3]
        self.canvas = tk.Canvas(right, bg=bg, highlightthickness=0)
        self.canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        self.status_label = ttk.Label(right, text="")
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X, pady=(4, 0))

        self._photo = None  # prevent GC
        self._drawn = None  # (state, arrow_hover, width) last drawn

        self.canvas.bind("<Configure>", self._on_canvas_configure)
        self.canvas.bind("<Motion>", self._on_motion)
        self.canvas.bind("<ButtonPress-1>", self._on_press_primary)
        self.canvas.bind("<ButtonPress-3>", self._on_press_secondary)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<Leave>", self._on_leave)
        self.root.bind("<Escape>", self._on_escape)

        self.controller.subscribe("place", self._log_event("place"))
        self.controller.subscribe("remove", self._log_event("remove"))
        self.controller.subscribe("expand", self._log_event("expand"))

        self.root.after(FRAME_MS, self._tick)

    @staticmethod
    def _log_event(name):
        def handler(*args):
            logger.debug("%s %s", name, args)

        return handler

    # -- input: push events into the controller --

    def _on_pick(self, spec_key):
        if not self.controller.begin_placement_from_inventory(spec_key):
            self.root.bell()

    def _on_motion(self, event):
        self.controller.pointer_move(event.x, event.y)

    def _on_press_primary(self, event):
        self.canvas.focus_set()
        self.controller.pointer_down(event.x, event.y, PRIMARY)

    def _on_press_secondary(self, event):
        self.controller.pointer_down(event.x, event.y, SECONDARY)

    def _on_release(self, event):
        self.controller.pointer_up(event.x, event.y)

    def _on_leave(self, _event):
        self.controller.pointer_leave()

    def _on_escape(self, _event=None):
        self.controller.cancel_drag()

    def _on_canvas_configure(self, event):
        if event.width > 1:
            self.controller.set_canvas_width(event.width)

    # -- frame loop: read-only --

    def _tick(self):
        try:
            self._render()
        finally:
            self.root.after(FRAME_MS, self._tick)

    def _render(self):
        c = self.controller
        key = (c.state, c.arrow_hover, c.transform.canvas_width)
        if (
            self._drawn is not None
            and key[0] is self._drawn[0]
            and key[1:] == self._drawn[1:]
        ):
            return
        self._drawn = key

        img = render_board_image(
            c.state, c.transform, c.grid_size, arrow_hover=c.arrow_hover
        )
        self._photo = ImageTk.PhotoImage(img)
        self.canvas.delete("all")
        self.canvas.create_image(0, 0, image=self._photo, anchor="nw")
        self.canvas.configure(
            scrollregion=(0, 0, img.width, img.height),
            cursor=_cursor_for(c.mode, c.arrow_hover),
        )
        self.inventory_panel.refresh(c.state.inventory)
        self.status_label.config(text=_status_text(c))

    # -- toolbar actions --

    def _on_clear(self):
        self.controller.reset()

    def _on_export(self):
        path = filedialog.asksaveasfilename(
            defaultextension=".json",
            filetypes=[("JSON files", "*.json"), ("PNG files", "*.png")],
            initialfile=f"layout_{time.strftime('%Y-%m-%d_%H-%M-%S')}.json",
        )
        if not path:
            return
        layout = layout_from_records(self.controller.export_records())
        if path.lower().endswith(".png"):
            img = render_board_image(
                self.controller.state,
                self.controller.transform,
                self.controller.grid_size,
                supersample=EXPORT_SUPERSAMPLE,
            )
            save_layout_png(img, layout, path)
        else:
            save_layout_json(layout, path)
        logger.info("exported %d tokens to %s", len(layout["placed"]), path)

    def _on_import(self):
        path = filedialog.askopenfilename(
            filetypes=[
                ("Layout files", "*.json *.png"),
                ("JSON files", "*.json"),
                ("PNG files", "*.png"),
            ],
        )
        if not path:
            return
        self.import_layout(path)

    def import_layout(self, path):
        try:
            layout = load_layout(path)
            self.controller.load_records(records_from_layout(layout))
        except (ValueError, OSError) as e:
            messagebox.showerror("Import Error", str(e))
            return
        logger.info("imported layout from %s", path)

    def run(self):
        self.root.mainloop()


def _build_arg_parser():
    parser = argparse.ArgumentParser(
        description="Isometric base layout planner"
    )
    parser.add_argument(
        "--catalog",
        default=DEFAULT_CATALOG_NAME,
        help=(
            f"Built-in catalog ({', '.join(sorted(BUILDING_CATALOGS))}) "
            "or path to a catalog .json"
        ),
    )
    parser.add_argument(
        "--grid-size", type=int, default=BoardConfig.grid_size
    )
    parser.add_argument(
        "--tile",
        type=float,
        default=BoardConfig.tile_half_width,
        help="Tile half-width in pixels",
    )
    parser.add_argument(
        "--load", type=Path, default=None, help="Layout file to open"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    return parser


def main(argv=None):
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        catalog = resolve_catalog(args.catalog)
    except ValueError as e:
        raise SystemExit(str(e)) from e
    config = BoardConfig(grid_size=args.grid_size, tile_half_width=args.tile)
    logger.info(
        "catalog %r, %dx%d grid, board height %dpx",
        catalog.name,
        config.grid_size,
        config.grid_size,
        board_height(IsoTransform.from_config(config), config.grid_size),
    )
    app = App(catalog, config)
    if args.load is not None:
        app.import_layout(str(args.load))
    app.run()


if __name__ == "__main__":
    main()
