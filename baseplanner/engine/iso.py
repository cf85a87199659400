"""Isometric (2:1 diamond) mapping between grid cells and screen pixels.

Grid axes map to the two screen diagonals: +x runs down-right, +y runs
down-left. A cell (gx, gy) lands at

    px = (gx - gy) * t + canvas_width / 2
    py = (gx + gy) * t * 0.5 + top_padding

where ``t`` is the tile half-width in pixels. ``screen_to_grid`` solves that
2x2 system exactly and returns fractional cells; callers round or clamp.

Also provides the screen-space shapes the controller and renderer share:
footprint diamonds, the bounding box used for hit-testing (a deliberate
over-approximation of the diamond), and the arrow hit zones drawn around a
selected 1x1 wall.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .types import BoardConfig, PlacedToken

Point = tuple[float, float]

# (dir, left, top, width, height) in screen pixels
ArrowBox = tuple[str, float, float, float, float]

ARROW_BOX_SIZE = 24.0
ARROW_BOX_GAP = 10.0


@dataclass(frozen=True)
class IsoTransform:
    tile_half_width: float = 22.0
    top_padding: float = 50.0
    canvas_width: float = 1400.0

    @staticmethod
    def from_config(config: BoardConfig) -> IsoTransform:
        return IsoTransform(
            tile_half_width=config.tile_half_width,
            top_padding=config.top_padding,
            canvas_width=config.canvas_width,
        )

    def with_canvas_width(self, canvas_width: float) -> IsoTransform:
        return replace(self, canvas_width=canvas_width)

    def grid_to_screen(self, gx: float, gy: float) -> Point:
        t = self.tile_half_width
        px = (gx - gy) * t + self.canvas_width / 2
        py = (gx + gy) * t * 0.5 + self.top_padding
        return px, py

    def screen_to_grid(self, px: float, py: float) -> Point:
        t = self.tile_half_width
        sx = (px - self.canvas_width / 2) / t
        sy = (py - self.top_padding) / (t * 0.5)
        return (sx + sy) / 2, (sy - sx) / 2

    def footprint_center(self, token: PlacedToken) -> Point:
        half = token.footprint_size / 2
        return self.grid_to_screen(token.x + half, token.y + half)

    def footprint_diamond(self, token: PlacedToken) -> list[Point]:
        """Screen vertices of the footprint: top, right, bottom, left."""
        cx, cy = self.footprint_center(token)
        half_w = self.tile_half_width * token.footprint_size
        half_h = half_w * 0.5
        return [
            (cx, cy - half_h),
            (cx + half_w, cy),
            (cx, cy + half_h),
            (cx - half_w, cy),
        ]

    def footprint_bbox(
        self, token: PlacedToken
    ) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) box around the footprint diamond."""
        cx, cy = self.footprint_center(token)
        half_w = self.tile_half_width * token.footprint_size
        half_h = half_w * 0.5
        return cx - half_w, cy - half_h, cx + half_w, cy + half_h

    def hits(self, token: PlacedToken, px: float, py: float) -> bool:
        left, top, right, bottom = self.footprint_bbox(token)
        return left < px < right and top < py < bottom

    def wall_arrow_boxes(self, token: PlacedToken) -> list[ArrowBox]:
        """Clickable squares just outside a 1x1 diamond, one per direction."""
        cx, cy = self.footprint_center(token)
        pad_x = self.tile_half_width + ARROW_BOX_GAP
        pad_y = self.tile_half_width * 0.5 + ARROW_BOX_GAP
        s = ARROW_BOX_SIZE
        return [
            ("N", cx - s / 2, cy - pad_y - s, s, s),
            ("E", cx + pad_x, cy - s / 2, s, s),
            ("S", cx - s / 2, cy + pad_y, s, s),
            ("W", cx - pad_x - s, cy - s / 2, s, s),
        ]

    def arrow_at(self, token: PlacedToken, px: float, py: float) -> str | None:
        """Direction whose arrow box contains the point, inclusive edges."""
        for direction, x, y, w, h in self.wall_arrow_boxes(token):
            if x <= px <= x + w and y <= py <= y + h:
                return direction
        return None
