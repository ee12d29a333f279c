"""Tetris board with single-level place/undo.

The board is a width x height grid of filled/empty cells. (0, 0) is the
bottom-left cell; y increases upward. Row widths, column heights and the
max height are kept up to date incrementally so the AI can read them
cheaply after every tentative placement.

Placement follows a commit/undo discipline: place() leaves the board
uncommitted with a backup of the prior state, undo() restores it and
commit() accepts the new state. Only one placement may be pending.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .pieces import Piece


class PlacementError(RuntimeError):
    """The place/undo contract between a board and its caller was broken."""


class PlaceResult(IntEnum):
    PLACED = 0
    ROW_FILLED = 1  # placed, and at least one row is now full
    OUT_BOUNDS = 2
    BAD = 3  # overlaps a filled cell

    @property
    def is_valid(self) -> bool:
        return self <= PlaceResult.ROW_FILLED


class Board:
    """Grid of filled cells, 10 wide by 20 tall unless told otherwise."""

    WIDTH = 10
    HEIGHT = 20

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        self.width = width
        self.height = height
        self._grid = np.zeros((width, height), dtype=bool)  # indexed [x, y]
        self._widths = np.zeros(height, dtype=int)
        self._heights = np.zeros(width, dtype=int)
        self._max_height = 0

        self._committed = True
        self._backup: tuple[np.ndarray, np.ndarray, np.ndarray, int] | None = None

    @classmethod
    def from_occupancy(cls, grid: np.ndarray) -> Board:
        """Create a board from a (rows, cols) boolean grid.

        Row 0 is the top row, so the array reads the way the board is drawn.
        """
        grid = np.asarray(grid, dtype=bool)
        rows, cols = grid.shape
        board = cls(width=cols, height=rows)
        board._grid = np.flipud(grid).T.copy()
        board._recompute_metrics()
        return board

    def copy(self) -> Board:
        """An independent committed copy of the current state."""
        board = Board(self.width, self.height)
        board._grid = self._grid.copy()
        board._widths = self._widths.copy()
        board._heights = self._heights.copy()
        board._max_height = self._max_height
        return board

    # ── Read accessors ──────────────────────────────────────────────────────

    def cell_filled(self, x: int, y: int) -> bool:
        """True if the cell is filled. Cells outside the board read as filled."""
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return True
        return bool(self._grid[x, y])

    def column_height(self, x: int) -> int:
        """1 + the y of the highest filled cell in column x (0 if empty)."""
        return int(self._heights[x])

    def column_heights(self) -> np.ndarray:
        return self._heights.copy()

    def row_width(self, y: int) -> int:
        """Number of filled cells in row y."""
        return int(self._widths[y])

    def max_height(self) -> int:
        """Height of the tallest column."""
        return self._max_height

    @property
    def committed(self) -> bool:
        return self._committed

    def to_occupancy_grid(self) -> np.ndarray:
        """Return a (height, width) boolean array, row 0 at the top."""
        return np.flipud(self._grid.T).copy()

    # ── Placement ───────────────────────────────────────────────────────────

    def drop_height(self, piece: Piece, x: int) -> int:
        """Row the piece's origin comes to rest on when dropped at offset x."""
        return max(
            int(self._heights[x + i]) - low for i, low in enumerate(piece.skirt)
        )

    def place(self, piece: Piece, x: int, y: int) -> PlaceResult:
        """Put the piece with its origin at (x, y).

        Always leaves the board uncommitted, even for an invalid result, so
        every place() must be paired with undo() or commit(). Invalid results
        leave the grid unchanged.
        """
        if not self._committed:
            raise PlacementError("place() called on an uncommitted board")
        self._backup = (
            self._grid.copy(),
            self._widths.copy(),
            self._heights.copy(),
            self._max_height,
        )
        self._committed = False

        targets = [(x + dx, y + dy) for dx, dy in piece.cells]
        for cx, cy in targets:
            if cx < 0 or cx >= self.width or cy < 0 or cy >= self.height:
                return PlaceResult.OUT_BOUNDS
        if any(self._grid[cx, cy] for cx, cy in targets):
            return PlaceResult.BAD

        result = PlaceResult.PLACED
        for cx, cy in targets:
            self._grid[cx, cy] = True
            self._widths[cy] += 1
            if self._widths[cy] == self.width:
                result = PlaceResult.ROW_FILLED
            if cy + 1 > self._heights[cx]:
                self._heights[cx] = cy + 1
        self._max_height = int(self._heights.max())
        return result

    def clear_rows(self) -> int:
        """Remove every full row, shifting the rows above down.

        Returns the number of rows cleared.
        """
        keep = self._widths < self.width
        cleared = int(self.height - keep.sum())
        if cleared == 0:
            return 0

        if self._committed:
            # A clear outside a pending placement is undone on its own.
            self._backup = (
                self._grid.copy(),
                self._widths.copy(),
                self._heights.copy(),
                self._max_height,
            )
            self._committed = False

        grid = np.zeros_like(self._grid)
        grid[:, : self.height - cleared] = self._grid[:, keep]
        self._grid = grid
        self._recompute_metrics()
        return cleared

    def undo(self):
        """Restore the state saved by the last place() or clear_rows()."""
        if self._committed:
            return
        self._grid, self._widths, self._heights, self._max_height = self._backup
        self._backup = None
        self._committed = True

    def commit(self):
        """Accept the current state; a later undo() will not revert it."""
        self._backup = None
        self._committed = True

    def _recompute_metrics(self):
        self._widths = self._grid.sum(axis=0).astype(int)
        heights = np.zeros(self.width, dtype=int)
        for x in range(self.width):
            filled = np.flatnonzero(self._grid[x])
            if filled.size:
                heights[x] = filled[-1] + 1
        self._heights = heights
        self._max_height = int(heights.max()) if self.width else 0

    # ── Display ─────────────────────────────────────────────────────────────

    def to_ascii(self) -> str:
        """Render the board as an ASCII art string."""
        lines = []
        lines.append("+" + "-" * self.width + "+")
        for row in self.to_occupancy_grid():
            lines.append("|" + "".join("#" if c else "." for c in row) + "|")
        lines.append("+" + "-" * self.width + "+")
        return "\n".join(lines)

    def __repr__(self):
        return self.to_ascii()
