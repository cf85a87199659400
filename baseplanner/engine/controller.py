"""Pointer-driven placement and drag state machine.

``PlacementController`` sits between the UI and the board. The UI feeds it
raw pointer events in screen pixels (``pointer_down``/``pointer_move``/
``pointer_up``/``pointer_leave``), inventory clicks
(``begin_placement_from_inventory``) and wall arrow requests
(``request_directional_expand``). The controller converts pixels to cells
with the ``IsoTransform``, validates against its ``OccupancyGrid`` and
swaps in the next ``EditorState``. Listeners registered with ``subscribe``
hear about each committed change.

Modes:

  * ``IDLE`` — nothing under the pointer.
  * ``HOVER_ONLY`` — pointer over a token, no drag.
  * ``DRAGGING`` — moving an existing token (its cells are freed for the
    duration so it never blocks itself) or a new ghost from the inventory.

While dragging, moves only update the ghost preview. The drop validates the
last preview; a rejected drop (collision or bounds) re-marks the original
cells or discards the ghost. Leaving the surface cancels and rebuilds the
occupancy grid from the placed set. Nothing here raises for a rejected
operation; the worst outcome is an unchanged board.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import replace
from typing import Callable

from .iso import IsoTransform
from .occupancy import OccupancyGrid
from .state import (
    EditorState,
    LayoutError,
    begin_placement,
    clear_selection,
    initial_state,
    load_tokens,
    move_token,
    out_of_bounds,
    place_new,
    remove_token,
    reset_board,
    set_ghost,
    set_hover,
    toggle_selection,
)
from .types import GHOST_ID, BoardConfig, Catalog, PlacedToken
from .walls import extend_wall_chain

logger = logging.getLogger(__name__)

IDLE = "idle"
HOVER_ONLY = "hover"
DRAGGING = "dragging"

# tkinter button numbers
PRIMARY = 1
SECONDARY = 3

EVENTS = ("place", "move", "remove", "select", "cancel_drag", "expand")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _default_id() -> str:
    return str(uuid.uuid4())


class PlacementController:
    def __init__(
        self,
        catalog: Catalog,
        config: BoardConfig | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or BoardConfig()
        self.transform = IsoTransform.from_config(self.config)
        self._new_id = id_factory or _default_id
        self._state = initial_state(catalog)
        self.occupancy = OccupancyGrid(self.config.grid_size)
        self._occupancy_version = self._state.structure_version

        # Drag state
        self._dragging_id: str | None = None
        self._drag_origin: PlacedToken | None = None

        # (wall id, direction) of the arrow under the pointer
        self.arrow_hover: tuple[str, str] | None = None

        self._listeners: dict[str, list[Callable]] = {e: [] for e in EVENTS}

    # -- queries --

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def grid_size(self) -> int:
        return self.config.grid_size

    @property
    def dragging_id(self) -> str | None:
        return self._dragging_id

    @property
    def mode(self) -> str:
        if self._dragging_id is not None:
            return DRAGGING
        if self._state.hover_id is not None:
            return HOVER_ONLY
        return IDLE

    def hit_test(self, px: float, py: float) -> str | None:
        """Id of the topmost token whose box contains the point."""
        for token in reversed(self._state.placed):
            if self.transform.hits(token, px, py):
                return token.id
        return None

    def export_records(self) -> list[dict]:
        return [t.to_dict() for t in self._state.placed]

    # -- notifications --

    def subscribe(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown event: {event!r}")
        self._listeners[event].append(callback)

    def _emit(self, event: str, *args) -> None:
        for callback in self._listeners[event]:
            callback(*args)

    def _set_state(self, new_state: EditorState) -> None:
        self._state = new_state
        if new_state.structure_version != self._occupancy_version:
            self.occupancy.rebuild(new_state.placed)
            self._occupancy_version = new_state.structure_version

    # -- inventory --

    def begin_placement_from_inventory(self, spec_key: str) -> bool:
        """Start dragging a new ghost of ``spec_key``; False if none left."""
        if self._dragging_id is not None:
            self.cancel_drag()
        new_state = begin_placement(self._state, spec_key)
        if new_state is self._state:
            return False
        self._set_state(new_state)
        self._dragging_id = GHOST_ID
        self._drag_origin = None
        return True

    # -- pointer events --

    def pointer_down(
        self, px: float, py: float, button: int = PRIMARY
    ) -> None:
        if button == SECONDARY:
            if self._dragging_id is not None:
                self.cancel_drag()
                return
            hit = self.hit_test(px, py)
            if hit is not None:
                self.remove(hit)
            return
        if button != PRIMARY or self._dragging_id is not None:
            # A pending ghost keeps dragging; the release drops it.
            return

        wall = self._selected_wall()
        if wall is not None:
            direction = self.transform.arrow_at(wall, px, py)
            if direction is not None:
                self.request_directional_expand(wall.id, direction)
                return

        hit = self.hit_test(px, py)
        if hit is not None:
            token = self._state.find(hit)
            assert token is not None
            self._dragging_id = hit
            self._drag_origin = token
            self.occupancy.mark(token, None)
            self._set_state(toggle_selection(self._state, hit))
            self._emit("select", hit)
        elif self._state.selected is not None:
            self._set_state(clear_selection(self._state))
            self._emit("select", None)

    def pointer_move(self, px: float, py: float) -> None:
        self._update_arrow_hover(px, py)

        if self._dragging_id is not None:
            src = self._drag_source()
            if src is None:
                return
            size = src.footprint_size
            gx, gy = self.transform.screen_to_grid(px, py)
            hi = self.grid_size - size
            nx = max(0, min(hi, _round_half_up(gx - size / 2)))
            ny = max(0, min(hi, _round_half_up(gy - size / 2)))
            preview = replace(src, x=nx, y=ny)
            self._set_state(set_ghost(self._state, preview))
            self._emit("move", preview)
            return

        self._set_state(set_hover(self._state, self.hit_test(px, py)))

    def pointer_up(self, px: float, py: float) -> None:
        if self._dragging_id is None:
            return
        target = self._state.ghost

        if self._dragging_id == GHOST_ID:
            if target is not None and self.occupancy.can_place(
                target.x, target.y, target.footprint_size
            ):
                token_id = self._new_id()
                self._set_state(
                    place_new(
                        self._state,
                        target.spec_key,
                        target.x,
                        target.y,
                        token_id,
                    )
                )
                token = self._state.find(token_id)
                assert token is not None
                self.occupancy.mark(token, token_id)
                logger.debug(
                    "placed %s at (%d, %d)", token.spec_key, token.x, token.y
                )
                self._end_drag()
                self._emit("place", token)
            else:
                logger.debug("drop rejected for new %s", _key_of(target))
                self._set_state(set_ghost(self._state, None))
                self._end_drag()
                self._emit("cancel_drag")
            return

        origin = self._drag_origin
        assert origin is not None
        if target is not None and self.occupancy.can_place(
            target.x, target.y, origin.footprint_size, exclude_id=origin.id
        ):
            self._set_state(
                move_token(self._state, origin.id, target.x, target.y)
            )
            moved = self._state.find(origin.id)
            assert moved is not None
            self.occupancy.mark(moved, moved.id)
            logger.debug("moved %s to (%d, %d)", moved.id, moved.x, moved.y)
            self._end_drag()
            self._emit("place", moved)
        else:
            self.occupancy.mark(origin, origin.id)
            self._set_state(set_ghost(self._state, None))
            self._end_drag()
            self._emit("cancel_drag")

    def pointer_leave(self) -> None:
        self.arrow_hover = None
        self._set_state(set_hover(self._state, None))
        if self._dragging_id is None:
            return
        self._set_state(set_ghost(self._state, None))
        self.occupancy.rebuild(self._state.placed)
        self._end_drag()
        self._emit("cancel_drag")

    def cancel_drag(self) -> None:
        """Abandon the current drag, restoring the dragged token's cells."""
        if self._dragging_id is None:
            return
        if self._drag_origin is not None:
            self.occupancy.mark(self._drag_origin, self._drag_origin.id)
        self._set_state(set_ghost(self._state, None))
        self._end_drag()
        self._emit("cancel_drag")

    # -- board edits --

    def remove(self, token_id: str) -> None:
        token = self._state.find(token_id)
        if token is None:
            return
        if self._dragging_id is not None:
            self.cancel_drag()
        self.occupancy.mark(token, None)
        self._set_state(remove_token(self._state, token_id))
        if self.arrow_hover and self.arrow_hover[0] == token_id:
            self.arrow_hover = None
        self._emit("remove", token)

    def request_directional_expand(
        self, token_id: str, direction: str
    ) -> list[PlacedToken]:
        """Extend the wall chain; returns the walls placed (maybe none)."""
        if self._dragging_id is not None:
            return []
        new_state, walls = extend_wall_chain(
            self._state, self.occupancy, token_id, direction, self._new_id
        )
        if not walls:
            return []
        for wall in walls:
            self.occupancy.mark(wall, wall.id)
        self._set_state(new_state)
        self.arrow_hover = None
        self._emit("expand", walls[-1].id, direction, walls)
        return walls

    def reset(self) -> None:
        """Clear the board and return all pieces to stock."""
        self._abandon_drag()
        self.arrow_hover = None
        self._set_state(reset_board(self._state, self.catalog))
        logger.info("board reset")

    def load_records(self, records: list[dict]) -> None:
        """Replace the board with exported records.

        Raises ``LayoutError`` (or ``UnknownSpecError``) and leaves the
        board untouched when the records cannot be loaded.
        """
        try:
            tokens = [PlacedToken.from_dict(r) for r in records]
        except (KeyError, TypeError, AttributeError) as e:
            raise LayoutError(f"Malformed token record: {e}") from e
        new_state = load_tokens(
            self._state, self.catalog, tokens, self.grid_size
        )
        self._abandon_drag()
        self.arrow_hover = None
        self._set_state(new_state)

    def set_grid_size(self, grid_size: int) -> None:
        outside = out_of_bounds(self._state.placed, grid_size)
        if outside:
            raise ValueError(
                f"Token {outside[0].id!r} does not fit a {grid_size} grid"
            )
        # Raises for a non-positive size before anything is touched.
        occupancy = OccupancyGrid.from_tokens(grid_size, self._state.placed)
        self._abandon_drag()
        self.config = replace(self.config, grid_size=grid_size)
        self.occupancy = occupancy

    def set_canvas_width(self, canvas_width: float) -> None:
        self.config = replace(self.config, canvas_width=canvas_width)
        self.transform = self.transform.with_canvas_width(canvas_width)

    # -- helpers --

    def _drag_source(self) -> PlacedToken | None:
        if self._dragging_id == GHOST_ID:
            return self._state.ghost
        token = self._state.find(self._dragging_id)
        return token if token is not None else self._drag_origin

    def _selected_wall(self) -> PlacedToken | None:
        selected = self._state.selected
        if selected is not None and selected.is_wall:
            return selected
        return None

    def _update_arrow_hover(self, px: float, py: float) -> None:
        wall = self._selected_wall()
        hover = None
        if wall is not None:
            direction = self.transform.arrow_at(wall, px, py)
            if direction is not None:
                hover = (wall.id, direction)
        if hover != self.arrow_hover:
            if hover is None:
                logger.debug("[arrows] leave %s", self.arrow_hover)
            else:
                logger.debug("[arrows] enter %s", hover)
            self.arrow_hover = hover

    def _end_drag(self) -> None:
        self._dragging_id = None
        self._drag_origin = None

    def _abandon_drag(self) -> None:
        if self._dragging_id is not None:
            self._set_state(set_ghost(self._state, None))
            self._end_drag()
            self._emit("cancel_drag")


def _key_of(token: PlacedToken | None) -> str:
    return token.spec_key if token is not None else "?"
