"""Wall-chain extension: grow a straight wall run from the anchored wall.

A directional request (N/E/S/W) places up to ``MAX_SEGMENTS_PER_REQUEST``
new 1x1 walls in a line from the base wall. The base is the current anchor
when it still exists and is a 1x1 wall, otherwise the wall the request names.
Placement stops early at the first blocked or out-of-bounds cell, or when the
base wall's stock runs out; whatever was placed before that is kept.

After a successful extension the last new wall becomes both the anchor and
the only selected token, so the next request continues from the tip.
Invalid bases, empty stock and fully blocked first steps are silent no-ops.
"""

from __future__ import annotations

import logging
from typing import Callable

from .occupancy import OccupancyGrid
from .state import EditorState, add_walls
from .types import PlacedToken

logger = logging.getLogger(__name__)

MAX_SEGMENTS_PER_REQUEST = 2

DIRECTION_STEPS: dict[str, tuple[int, int]] = {
    "N": (0, -1),
    "E": (1, 0),
    "S": (0, 1),
    "W": (-1, 0),
}


def resolve_base(state: EditorState, token_id: str) -> PlacedToken | None:
    """Anchor first, then the requested token; None unless a 1x1 wall."""
    anchor = state.anchor
    if anchor is not None and anchor.is_wall:
        return anchor
    base = state.find(token_id)
    if base is None or not base.is_wall:
        return None
    return base


def extend_wall_chain(
    state: EditorState,
    occupancy: OccupancyGrid,
    token_id: str,
    direction: str,
    new_id: Callable[[], str],
) -> tuple[EditorState, list[PlacedToken]]:
    """Place up to two walls from the base; return the new state and walls.

    ``occupancy`` is only read; the caller marks the returned walls.
    """
    if direction not in DIRECTION_STEPS:
        raise ValueError(f"Unknown direction: {direction!r}")

    base = resolve_base(state, token_id)
    if base is None:
        logger.debug("[expand] base not a 1x1 wall, ignore")
        return state, []

    left = state.remaining(base.spec_key)
    if left <= 0:
        logger.debug("[expand] no %r left", base.spec_key)
        return state, []

    dx, dy = DIRECTION_STEPS[direction]
    x, y = base.x, base.y
    walls: list[PlacedToken] = []
    for step in range(1, MAX_SEGMENTS_PER_REQUEST + 1):
        x += dx
        y += dy
        if len(walls) >= left or not occupancy.can_place(x, y, 1):
            logger.debug(
                "[expand] blocked or no stock at step %d at (%d, %d)",
                step,
                x,
                y,
            )
            break
        walls.append(
            PlacedToken(
                id=new_id(),
                spec_key=base.spec_key,
                x=x,
                y=y,
                footprint_size=1,
                radius=base.radius,
                visual_class=base.visual_class,
            )
        )

    if not walls:
        return state, []

    logger.debug(
        "[expand] placed %d wall(s), new anchor = %s", len(walls), walls[-1].id
    )
    return add_walls(state, base.spec_key, walls), walls
