"""Tests for the isometric grid <-> screen transform."""

import pytest

from .iso import ARROW_BOX_GAP, ARROW_BOX_SIZE, IsoTransform
from .types import BoardConfig, PlacedToken


def _token(x, y, size, cls="cannon"):
    return PlacedToken(
        id="t", spec_key=cls, x=x, y=y, footprint_size=size, visual_class=cls
    )


T = IsoTransform(tile_half_width=22.0, top_padding=50.0, canvas_width=1400.0)


class TestGridToScreen:
    def test_origin_is_top_center(self):
        assert T.grid_to_screen(0, 0) == (700.0, 50.0)

    def test_x_axis_runs_down_right(self):
        assert T.grid_to_screen(1, 0) == (722.0, 61.0)

    def test_y_axis_runs_down_left(self):
        assert T.grid_to_screen(0, 1) == (678.0, 61.0)

    def test_diagonal_is_vertical(self):
        px, py = T.grid_to_screen(10, 10)
        assert px == 700.0
        assert py == pytest.approx(50.0 + 20 * 11.0)

    def test_accepts_fractional_cells(self):
        px, py = T.grid_to_screen(6.5, 6.5)
        assert px == pytest.approx(700.0)
        assert py == pytest.approx(50.0 + 13 * 11.0)


class TestScreenToGrid:
    def test_inverse_of_origin(self):
        assert T.screen_to_grid(700.0, 50.0) == pytest.approx((0.0, 0.0))

    @pytest.mark.parametrize(
        "cell", [(0, 0), (5, 5), (59, 0), (0, 59), (59, 59), (17, 42)]
    )
    def test_round_trip(self, cell):
        gx, gy = T.screen_to_grid(*T.grid_to_screen(*cell))
        assert gx == pytest.approx(cell[0], abs=1e-9)
        assert gy == pytest.approx(cell[1], abs=1e-9)

    def test_returns_fractions(self):
        gx, gy = T.screen_to_grid(711.0, 55.5)
        assert gx == pytest.approx(0.5)
        assert gy == pytest.approx(0.0)

    def test_round_trip_with_other_constants(self):
        t = IsoTransform(
            tile_half_width=15.0, top_padding=8.0, canvas_width=333
        )
        gx, gy = t.screen_to_grid(*t.grid_to_screen(12.25, 3.75))
        assert gx == pytest.approx(12.25)
        assert gy == pytest.approx(3.75)


class TestConfig:
    def test_from_config(self):
        cfg = BoardConfig(tile_half_width=10, top_padding=5, canvas_width=400)
        t = IsoTransform.from_config(cfg)
        assert t.grid_to_screen(0, 0) == (200.0, 5.0)

    def test_with_canvas_width_shifts_horizontally(self):
        wider = T.with_canvas_width(1600.0)
        px, py = wider.grid_to_screen(3, 4)
        opx, opy = T.grid_to_screen(3, 4)
        assert px == pytest.approx(opx + 100.0)
        assert py == opy


class TestFootprintGeometry:
    def test_center_is_middle_of_footprint(self):
        center = T.footprint_center(_token(5, 5, 3))
        assert center == T.grid_to_screen(6.5, 6.5)

    def test_diamond_vertices(self):
        cx, cy = T.footprint_center(_token(5, 5, 3))
        top, right, bottom, left = T.footprint_diamond(_token(5, 5, 3))
        assert top == (cx, cy - 33.0)
        assert right == (cx + 66.0, cy)
        assert bottom == (cx, cy + 33.0)
        assert left == (cx - 66.0, cy)

    def test_bbox_half_extents(self):
        cx, cy = T.footprint_center(_token(0, 0, 2))
        assert T.footprint_bbox(_token(0, 0, 2)) == (
            cx - 44.0,
            cy - 22.0,
            cx + 44.0,
            cy + 22.0,
        )

    def test_hits_center(self):
        token = _token(5, 5, 3)
        assert T.hits(token, *T.footprint_center(token))

    def test_bbox_edge_is_exclusive(self):
        token = _token(5, 5, 3)
        left, top, right, bottom = T.footprint_bbox(token)
        cx, cy = T.footprint_center(token)
        assert not T.hits(token, left, cy)
        assert not T.hits(token, cx, bottom)

    def test_bbox_corner_hits_outside_diamond(self):
        """The hit box over-approximates the diamond on purpose."""
        token = _token(5, 5, 3)
        left, top, _, _ = T.footprint_bbox(token)
        assert T.hits(token, left + 2, top + 2)


class TestWallArrows:
    def test_four_boxes_around_wall(self):
        wall = _token(10, 10, 1, cls="wall")
        cx, cy = T.footprint_center(wall)
        boxes = {
            d: (x, y, w, h) for d, x, y, w, h in T.wall_arrow_boxes(wall)
        }
        assert set(boxes) == {"N", "E", "S", "W"}
        s = ARROW_BOX_SIZE
        assert boxes["E"] == (cx + 22.0 + ARROW_BOX_GAP, cy - s / 2, s, s)
        assert boxes["N"][1] + s == pytest.approx(cy - 11.0 - ARROW_BOX_GAP)

    def test_arrow_at_box_centers(self):
        wall = _token(10, 10, 1, cls="wall")
        for d, x, y, w, h in T.wall_arrow_boxes(wall):
            assert T.arrow_at(wall, x + w / 2, y + h / 2) == d

    def test_no_arrow_on_the_wall_itself(self):
        wall = _token(10, 10, 1, cls="wall")
        assert T.arrow_at(wall, *T.footprint_center(wall)) is None
