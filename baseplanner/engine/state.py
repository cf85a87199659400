"""The editor's single owned state value and its transitions.

``EditorState`` bundles everything the board shows: placed tokens (in
insertion order, which is also draw order), the inventory, the drag ghost,
the hovered token and the wall anchor. It is immutable. Every function here
takes a state and returns the next one; none of them touch the occupancy
grid, which the controller owns and keeps in step.

The bookkeeping functions assume the caller already validated geometry:
``place_new`` and ``move_token`` do not check collisions. ``load_tokens`` is
the exception since imported data arrives unvalidated; it checks everything
and raises ``LayoutError`` rather than producing a state that breaks the
board invariants (no overlap, footprints in bounds, stock conserved).
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Iterable

from .types import GHOST_ID, Catalog, InventoryEntry, PlacedToken

logger = logging.getLogger(__name__)


class LayoutError(ValueError):
    """Imported layout data cannot be reconciled with the board."""


class UnknownSpecError(LayoutError):
    def __init__(self, spec_key: str) -> None:
        super().__init__(f"Unknown building key in layout: {spec_key!r}")
        self.spec_key = spec_key


@dataclass(frozen=True)
class EditorState:
    placed: tuple[PlacedToken, ...] = ()
    inventory: dict[str, InventoryEntry] = field(default_factory=dict)
    ghost: PlacedToken | None = None
    hover_id: str | None = None
    anchor_id: str | None = None
    # Bumped when the placed set is replaced wholesale (load, reset), so
    # derived caches know to rebuild rather than patch.
    structure_version: int = 0

    def find(self, token_id: str | None) -> PlacedToken | None:
        if token_id is None:
            return None
        for t in self.placed:
            if t.id == token_id:
                return t
        return None

    @property
    def selected(self) -> PlacedToken | None:
        for t in self.placed:
            if t.selected:
                return t
        return None

    @property
    def anchor(self) -> PlacedToken | None:
        return self.find(self.anchor_id)

    def remaining(self, spec_key: str) -> int:
        entry = self.inventory.get(spec_key)
        return entry.remaining if entry else 0


def initial_state(catalog: Catalog) -> EditorState:
    return EditorState(inventory=catalog.full_stock())


def _with_entry(
    inventory: dict[str, InventoryEntry], key: str, entry: InventoryEntry
) -> dict[str, InventoryEntry]:
    updated = dict(inventory)
    updated[key] = entry
    return updated


def _anchor_for(token: PlacedToken | None) -> str | None:
    if token is not None and token.selected and token.is_wall:
        return token.id
    return None


# -- ghost & hover --


def begin_placement(state: EditorState, spec_key: str) -> EditorState:
    """Create a ghost for a new piece; ``state`` itself if none are left."""
    entry = state.inventory.get(spec_key)
    if entry is None or entry.remaining <= 0:
        logger.debug("begin placement: no %r left", spec_key)
        return state
    ghost = PlacedToken.from_spec(GHOST_ID, spec_key, entry.spec, 0, 0)
    return replace(state, ghost=ghost)


def set_ghost(state: EditorState, ghost: PlacedToken | None) -> EditorState:
    return replace(state, ghost=ghost)


def set_hover(state: EditorState, token_id: str | None) -> EditorState:
    if state.hover_id == token_id:
        return state
    return replace(state, hover_id=token_id)


# -- placed set --


def place_new(
    state: EditorState, spec_key: str, x: int, y: int, token_id: str
) -> EditorState:
    """Take one piece from stock and put it on the board at (x, y)."""
    entry = state.inventory[spec_key]
    token = PlacedToken.from_spec(token_id, spec_key, entry.spec, x, y)
    return replace(
        state,
        placed=state.placed + (token,),
        inventory=_with_entry(state.inventory, spec_key, entry.taken()),
        ghost=None,
    )


def move_token(
    state: EditorState, token_id: str, x: int, y: int
) -> EditorState:
    placed = tuple(
        replace(t, x=x, y=y) if t.id == token_id else t for t in state.placed
    )
    return replace(state, placed=placed, ghost=None)


def remove_token(state: EditorState, token_id: str) -> EditorState:
    """Take a token off the board and return its piece to stock."""
    token = state.find(token_id)
    if token is None:
        return state
    inventory = state.inventory
    entry = inventory.get(token.spec_key)
    if entry is not None:
        inventory = _with_entry(inventory, token.spec_key, entry.returned())
    return replace(
        state,
        placed=tuple(t for t in state.placed if t.id != token_id),
        inventory=inventory,
        hover_id=None if state.hover_id == token_id else state.hover_id,
        anchor_id=None if state.anchor_id == token_id else state.anchor_id,
    )


def add_walls(
    state: EditorState, spec_key: str, walls: list[PlacedToken]
) -> EditorState:
    """Append chain walls, charge stock, and select/anchor the last one."""
    if not walls:
        return state
    tip = walls[-1].id
    placed = tuple(
        replace(t, selected=(t.id == tip)) for t in state.placed + tuple(walls)
    )
    entry = state.inventory[spec_key]
    return replace(
        state,
        placed=placed,
        inventory=_with_entry(
            state.inventory, spec_key, entry.taken(len(walls))
        ),
        anchor_id=tip,
    )


# -- selection --


def toggle_selection(state: EditorState, token_id: str) -> EditorState:
    """Flip selection on ``token_id`` and deselect everything else.

    A selected 1x1 wall becomes the anchor; any other outcome clears it.
    """
    placed = tuple(
        replace(t, selected=(not t.selected) if t.id == token_id else False)
        for t in state.placed
    )
    new_state = replace(state, placed=placed)
    return replace(new_state, anchor_id=_anchor_for(new_state.selected))


def clear_selection(state: EditorState) -> EditorState:
    if state.selected is None and state.anchor_id is None:
        return state
    placed = tuple(
        replace(t, selected=False) if t.selected else t for t in state.placed
    )
    return replace(state, placed=placed, anchor_id=None)


# -- whole-board operations --


def reset_board(state: EditorState, catalog: Catalog) -> EditorState:
    """Empty the board and return every piece to stock."""
    return EditorState(
        inventory=catalog.full_stock(),
        structure_version=state.structure_version + 1,
    )


def overlapping_pairs(
    placed: Iterable[PlacedToken],
) -> list[tuple[PlacedToken, PlacedToken]]:
    tokens = list(placed)
    pairs = []
    for i, a in enumerate(tokens):
        for b in tokens[i + 1 :]:
            if a.overlaps(b):
                pairs.append((a, b))
    return pairs


def out_of_bounds(
    placed: Iterable[PlacedToken], grid_size: int
) -> list[PlacedToken]:
    return [
        t
        for t in placed
        if t.x < 0
        or t.y < 0
        or t.x + t.footprint_size > grid_size
        or t.y + t.footprint_size > grid_size
    ]


def stock_conserved(state: EditorState, catalog: Catalog) -> bool:
    """remaining + placed == initial count, for every catalog key."""
    placed_counts = Counter(t.spec_key for t in state.placed)
    for e in catalog.entries:
        if state.remaining(e.key) + placed_counts[e.key] != e.count:
            return False
    return True


# JSON true/false decode to bool, which is an int subclass.
def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return _is_int(value) or isinstance(value, float)


def load_tokens(
    state: EditorState,
    catalog: Catalog,
    tokens: Iterable[PlacedToken],
    grid_size: int,
) -> EditorState:
    """Replace the board with imported tokens, recomputing inventory.

    Stock starts full and each token takes one piece of its key. Token
    geometry comes from the record, but it must agree with the catalog's
    footprint size; a missing visual class falls back to the catalog's.
    Raises ``UnknownSpecError`` for keys not in the catalog and
    ``LayoutError`` for anything else that would break the board.
    """
    loaded = [replace(t, selected=False) for t in tokens]
    inventory = catalog.full_stock()
    seen_ids: set[str] = set()

    for i, t in enumerate(loaded):
        if t.spec_key not in inventory:
            raise UnknownSpecError(t.spec_key)
        if t.id in seen_ids or t.id == GHOST_ID:
            raise LayoutError(f"Duplicate or reserved token id: {t.id!r}")
        seen_ids.add(t.id)
        if not _is_int(t.x) or not _is_int(t.y):
            raise LayoutError(f"Token {t.id!r} has non-integer position")
        if not _is_int(t.footprint_size):
            raise LayoutError(f"Token {t.id!r} has non-integer size")
        if not _is_number(t.radius) or not t.radius >= 0:
            raise LayoutError(
                f"Token {t.id!r} has invalid radius {t.radius!r}"
            )
        entry = inventory[t.spec_key]
        if t.footprint_size != entry.footprint_size:
            raise LayoutError(
                f"Token {t.id!r} has size {t.footprint_size}, "
                f"but {t.spec_key!r} is {entry.footprint_size}"
            )
        if entry.remaining <= 0:
            raise LayoutError(f"Layout uses more {t.spec_key!r} than in stock")
        inventory[t.spec_key] = entry.taken()
        if not t.visual_class:
            loaded[i] = replace(t, visual_class=entry.visual_class)

    outside = out_of_bounds(loaded, grid_size)
    if outside:
        raise LayoutError(
            f"Token {outside[0].id!r} lies outside the "
            f"{grid_size}x{grid_size} grid"
        )
    clashes = overlapping_pairs(loaded)
    if clashes:
        a, b = clashes[0]
        raise LayoutError(f"Tokens {a.id!r} and {b.id!r} overlap")

    logger.info("loaded %d tokens", len(loaded))
    return EditorState(
        placed=tuple(loaded),
        inventory=inventory,
        structure_version=state.structure_version + 1,
    )
