"""Cell ownership cache for the board.

The grid is a ``grid_size x grid_size`` numpy object matrix indexed
``[y, x]``; each cell is ``None`` or the id of the token whose footprint
covers it. It is never the source of truth: ``rebuild`` replays the placed
tokens and must always reproduce it. The controller keeps it current
incrementally (``mark``) and rebuilds after structural changes.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .types import PlacedToken


class OccupancyGrid:
    def __init__(self, grid_size: int) -> None:
        if grid_size < 1:
            raise ValueError(f"grid_size must be positive, got {grid_size}")
        self.grid_size = grid_size
        self.cells = np.full((grid_size, grid_size), None, dtype=object)

    @staticmethod
    def from_tokens(
        grid_size: int, placed: Iterable[PlacedToken]
    ) -> OccupancyGrid:
        grid = OccupancyGrid(grid_size)
        grid.rebuild(placed)
        return grid

    def in_bounds(self, x: int, y: int, size: int) -> bool:
        return (
            x >= 0
            and y >= 0
            and x + size <= self.grid_size
            and y + size <= self.grid_size
        )

    def can_place(
        self, x: int, y: int, size: int, exclude_id: str | None = None
    ) -> bool:
        """True if a size x size footprint at (x, y) is inside and free.

        Cells owned by ``exclude_id`` count as free so a token can be
        validated against the cells it currently holds.
        """
        if not self.in_bounds(x, y, size):
            return False
        block = self.cells[y : y + size, x : x + size]
        for owner in block.flat:
            if owner is not None and owner != exclude_id:
                return False
        return True

    def mark(self, token: PlacedToken, owner: str | None) -> None:
        s = token.footprint_size
        self.cells[token.y : token.y + s, token.x : token.x + s] = owner

    def rebuild(self, placed: Iterable[PlacedToken]) -> None:
        self.cells[:, :] = None
        for token in placed:
            self.mark(token, token.id)

    def owner_at(self, x: int, y: int) -> str | None:
        if not (0 <= x < self.grid_size and 0 <= y < self.grid_size):
            return None
        return self.cells[y, x]

    def owned_count(self) -> int:
        return int(np.count_nonzero(self.cells != None))  # noqa: E711

    def copy(self) -> OccupancyGrid:
        other = OccupancyGrid(self.grid_size)
        other.cells = self.cells.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OccupancyGrid):
            return NotImplemented
        return self.grid_size == other.grid_size and bool(
            np.array_equal(self.cells, other.cells)
        )

    def __repr__(self) -> str:
        return (
            f"OccupancyGrid(grid_size={self.grid_size}, "
            f"owned={self.owned_count()})"
        )
