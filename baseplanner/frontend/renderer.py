"""Pillow renderer for the isometric board.

``BoardRenderer.render`` draws one ``EditorState`` snapshot: grid lines,
token diamonds with their labels, the attack-radius ellipse of the selected
token, the hover outline, the drag ghost and the wall-extension arrows
around a selected 1x1 wall. It only reads the state; the app calls it from
its frame loop and the export path calls it to produce PNGs.

Semi-transparent layers (ghost, radius, arrow boxes) are drawn on their own
RGBA layer and alpha-composited, since ImageDraw overwrites rather than
blends.
"""

from __future__ import annotations

from PIL import Image, ImageDraw

from ..engine.iso import IsoTransform
from ..engine.state import EditorState
from ..engine.types import GHOST_ID, PlacedToken

# -- Visual constants --

CANVAS_BG = (11, 15, 23, 255)
GRID_LINE = "#1b2230"
TOKEN_OUTLINE = "#202a38"
TOWER_FILL = "#0b1018"
LABEL_COLOR = "#e7ebf3"
HOVER_OUTLINE = "#57dcfd"
RADIUS_FILL = (87, 220, 253)
RADIUS_OUTLINE = (42, 165, 199)
ARROW_FILL = (42, 165, 199)
ARROW_HOVER_FILL = (87, 220, 253)
DEFAULT_FILL = "#6b7c8f"

CLASS_COLORS = {
    "wall": "#394050",
    "tower": "#3a6ff2",
    "archer": "#3a6ff2",
    "cannon": "#c95b3d",
    "mortar": "#8a6cff",
    "sorcery": "#e46ad2",
    "wizard": "#e46ad2",
    "tesla": "#38e0b9",
    "mine": "#8b9aa7",
    "storage": "#8b9aa7",
    "th": "#fdcb57",
    "aa": "#57dcfd",
    "airdef": "#57dcfd",
    "sweeper": "#7fd1a8",
    "bomb": "#d0704a",
    "xbow": "#b04ad0",
    "clan": "#c9a43d",
    "hero": "#f2a03a",
    "spring": "#5f6b78",
}

GHOST_ALPHA = 0.6
RADIUS_ALPHA = 0.18
GHOST_RADIUS_ALPHA = 0.35

# Radius ellipse scale: a footprint's diagonal grows by sqrt(2) per cell.
RADIUS_SCALE = 1.414


def color_for(visual_class: str) -> str:
    return CLASS_COLORS.get(visual_class, DEFAULT_FILL)


def abbreviation(name: str, limit: int = 3) -> str:
    """Initials of each word, upper-cased: "air defense" -> "AD"."""
    words = [w for w in name.replace("-", " ").split() if w]
    return "".join(w[0] for w in words).upper()[:limit]


def board_height(transform: IsoTransform, grid_size: int) -> int:
    """Pixel height needed to show the whole diamond with padding."""
    t = transform.tile_half_width
    return int(grid_size * t + 2 * transform.top_padding)


class BoardRenderer:
    """Renders an editor state to a Pillow image."""

    def __init__(self, transform, grid_size, height=None, line_scale=1):
        self.transform = transform
        self.grid_size = grid_size
        self.width = int(transform.canvas_width)
        self.height = height or board_height(transform, grid_size)
        self.line_scale = line_scale

    def _lw(self, base_width):
        """Scale a pixel width by the supersample factor."""
        return max(1, round(base_width * self.line_scale))

    def render(self, state: EditorState, arrow_hover=None) -> Image.Image:
        img = Image.new("RGBA", (self.width, self.height), CANVAS_BG)
        draw = ImageDraw.Draw(img)
        self._draw_grid(draw)

        for token in state.placed:
            self._draw_token(draw, token, hover=(token.id == state.hover_id))
            if token.selected and token.radius > 0:
                img = self._draw_radius(img, token, RADIUS_ALPHA)
                draw = ImageDraw.Draw(img)
            if token.selected and token.is_wall:
                img = self._draw_wall_arrows(img, token, arrow_hover)
                draw = ImageDraw.Draw(img)

        ghost = state.ghost
        if ghost is not None:
            layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
            self._draw_token(ImageDraw.Draw(layer), ghost, hover=False)
            img = _composite(img, layer, GHOST_ALPHA)
            if ghost.id == GHOST_ID and ghost.radius > 0:
                img = self._draw_radius(img, ghost, GHOST_RADIUS_ALPHA)
        return img

    def _draw_grid(self, draw):
        n = self.grid_size
        to_screen = self.transform.grid_to_screen
        for y in range(n + 1):
            draw.line(
                [to_screen(0, y), to_screen(n, y)],
                fill=GRID_LINE,
                width=self._lw(1),
            )
        for x in range(n + 1):
            draw.line(
                [to_screen(x, 0), to_screen(x, n)],
                fill=GRID_LINE,
                width=self._lw(1),
            )

    def _draw_token(self, draw, token: PlacedToken, hover: bool):
        diamond = self.transform.footprint_diamond(token)
        draw.polygon(
            diamond,
            fill=color_for(token.visual_class),
            outline=TOKEN_OUTLINE,
            width=self._lw(2),
        )

        # Small dark "tower" block in the middle of the footprint.
        t = self.transform.tile_half_width
        cx, cy = self.transform.footprint_center(token)
        tower_h = max(8 * self.line_scale, t * token.footprint_size * 0.6)
        tower_w = t * token.footprint_size * 0.72
        draw.rectangle(
            [
                cx - tower_w / 2,
                cy - tower_h * 0.4,
                cx + tower_w / 2,
                cy - tower_h * 0.1,
            ],
            fill=TOWER_FILL,
        )

        label = abbreviation(token.spec_key)
        left, top, right, bottom = draw.textbbox((0, 0), label)
        draw.text(
            (cx - (right - left) / 2, cy - (bottom - top) / 2),
            label,
            fill=LABEL_COLOR,
        )

        if hover:
            draw.polygon(diamond, outline=HOVER_OUTLINE, width=self._lw(3))

    def _draw_radius(self, img, token: PlacedToken, alpha: float):
        cx, cy = self.transform.footprint_center(token)
        rx = token.radius * self.transform.tile_half_width * RADIUS_SCALE
        ry = rx * 0.5
        layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
        ImageDraw.Draw(layer).ellipse(
            [cx - rx, cy - ry, cx + rx, cy + ry],
            fill=RADIUS_FILL + (255,),
            outline=RADIUS_OUTLINE + (255,),
            width=self._lw(2),
        )
        return _composite(img, layer, alpha)

    def _draw_wall_arrows(self, img, token: PlacedToken, arrow_hover):
        layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        for direction, x, y, w, h in self.transform.wall_arrow_boxes(token):
            hovering = arrow_hover == (token.id, direction)
            box_alpha = 90 if hovering else 38
            draw.rectangle(
                [x, y, x + w, y + h], fill=ARROW_FILL + (box_alpha,)
            )
            color = ARROW_HOVER_FILL if hovering else ARROW_FILL
            draw.polygon(
                _arrow_triangle(
                    direction, x + w / 2, y + h / 2, min(w, h) * 0.9
                ),
                fill=color + (242,),
            )
        return Image.alpha_composite(img, layer)


def _composite(img, layer, alpha):
    """Alpha-composite ``layer`` onto ``img`` with extra opacity ``alpha``."""
    if alpha < 1.0:
        a = layer.getchannel("A").point(lambda v: int(v * alpha))
        layer.putalpha(a)
    return Image.alpha_composite(img, layer)


def _arrow_triangle(direction, cx, cy, s):
    """Triangle pointing in ``direction`` inside a box of side ``s``."""
    if direction == "N":
        return [
            (cx, cy - s * 0.45),
            (cx - s * 0.35, cy + s * 0.25),
            (cx + s * 0.35, cy + s * 0.25),
        ]
    if direction == "E":
        return [
            (cx + s * 0.45, cy),
            (cx - s * 0.25, cy - s * 0.35),
            (cx - s * 0.25, cy + s * 0.35),
        ]
    if direction == "S":
        return [
            (cx, cy + s * 0.45),
            (cx - s * 0.35, cy - s * 0.25),
            (cx + s * 0.35, cy - s * 0.25),
        ]
    return [
        (cx - s * 0.45, cy),
        (cx + s * 0.25, cy - s * 0.35),
        (cx + s * 0.25, cy + s * 0.35),
    ]


def render_board_image(
    state: EditorState,
    transform: IsoTransform,
    grid_size: int,
    supersample: int = 1,
    arrow_hover=None,
) -> Image.Image:
    """Render the board, optionally supersampled and downsampled with LANCZOS.

    Returns an RGB image sized ``transform.canvas_width`` by the board
    height, ready for Tk display or PNG export.
    """
    w = int(transform.canvas_width)
    h = board_height(transform, grid_size)
    if supersample > 1:
        scaled = IsoTransform(
            tile_half_width=transform.tile_half_width * supersample,
            top_padding=transform.top_padding * supersample,
            canvas_width=transform.canvas_width * supersample,
        )
        renderer = BoardRenderer(
            scaled, grid_size, height=h * supersample, line_scale=supersample
        )
        img = renderer.render(state, arrow_hover=arrow_hover)
        img = img.resize((w, h), Image.Resampling.LANCZOS)
    else:
        img = BoardRenderer(transform, grid_size, height=h).render(
            state, arrow_hover=arrow_hover
        )
    return img.convert("RGB")
