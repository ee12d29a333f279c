"""Heuristic evaluation function for Tetris board positions.

Scores a board as a weighted sum of eleven structural features.
Lower scores are better. All weights are non-negative, so every feature
counts as "badness"; complete_lines and height_diff are computed but
carry zero weight by default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ..game.board import Board


@dataclass
class Weights:
    """Tunable weights for the heuristic evaluation."""

    holes: float = 93
    max_height: float = 64
    average_height: float = 29
    bumpiness: float = 10
    complete_lines: float = 0
    row_transitions: float = 37
    column_transitions: float = 37
    wells: float = 25
    rows_with_holes: float = 39
    height_diff: float = 0
    variance_height: float = 1


DEFAULT_WEIGHTS = Weights()


@dataclass
class BoardFeatures:
    """Raw feature values for one board."""

    holes: int = 0
    max_height: int = 0
    average_height: float = 0.0
    bumpiness: int = 0
    complete_lines: int = 0
    row_transitions: int = 0
    column_transitions: int = 0
    wells: int = 0
    rows_with_holes: int = 0
    height_diff: int = 0
    variance_height: float = 0.0


def _occupancy(board: Board) -> np.ndarray:
    """(width, height) bool array indexed [x, y]."""
    return np.array(
        [[board.cell_filled(x, y) for y in range(board.height)] for x in range(board.width)],
        dtype=bool,
    )


def compute_features(board: Board) -> BoardFeatures:
    """Scan the board once and compute every feature."""
    width = board.width
    height = board.height
    max_height = board.max_height()

    grid = _occupancy(board)
    heights = np.array([board.column_height(x) for x in range(width)], dtype=int)
    rows = np.arange(height)

    # Holes: empty cells under the top filled cell of their column
    hole_mask = ~grid & (rows[None, :] < heights[:, None] - 1)
    holes = int(hole_mask.sum())
    rows_with_holes = int(hole_mask.any(axis=0).sum())

    # Integer division: the mean height is truncated
    average_height = float(int(heights.sum()) // width)
    variance_height = float(((heights - average_height) ** 2).sum() / width)
    height_diff = abs(max_height - min(height, int(heights.min())))
    bumpiness = int(np.abs(np.diff(heights)).sum())

    complete_lines = sum(
        1 for y in range(max_height) if board.row_width(y) == width
    )

    # Transitions: filled cells inside their column's height next to an
    # empty cell. Only neighbours on the board count.
    inside = grid & (rows[None, :] < heights[:, None])
    row_transitions = int(
        (inside[1:, :] & ~grid[:-1, :]).sum() + (inside[:-1, :] & ~grid[1:, :]).sum()
    )
    column_transitions = int(
        (inside[:, 1:] & ~grid[:, :-1]).sum() + (inside[:, :-1] & ~grid[:, 1:]).sum()
    )

    wells = _count_wells(grid, heights, max_height)

    return BoardFeatures(
        holes=holes,
        max_height=max_height,
        average_height=average_height,
        bumpiness=bumpiness,
        complete_lines=complete_lines,
        row_transitions=row_transitions,
        column_transitions=column_transitions,
        wells=wells,
        rows_with_holes=rows_with_holes,
        height_diff=height_diff,
        variance_height=variance_height,
    )


def _count_wells(grid: np.ndarray, heights: np.ndarray, max_height: int) -> int:
    """Count empty cells above their column with filled cells on both sides.

    Cells off the board read as filled. Column 0 only needs its right
    neighbour. The last column is counted by the two-sided rule (its right
    neighbour is off the board) and again when its left neighbour is
    filled and the cell above is empty, so it can score twice per cell.
    """
    width, height = grid.shape
    if max_height == 0:
        return 0

    padded = np.ones((width + 2, height + 1), dtype=bool)
    padded[1:-1, :height] = grid
    left = padded[:-2, :max_height]
    right = padded[2:, :max_height]
    above = padded[1:-1, 1 : max_height + 1]

    rows = np.arange(max_height)
    open_cells = ~grid[:, :max_height] & (rows[None, :] >= heights[:, None])

    wells = int((open_cells[0] & right[0]).sum())
    wells += int((open_cells[1:] & left[1:] & right[1:]).sum())
    wells += int((open_cells[-1] & left[-1] & ~above[-1]).sum())
    return wells


class HeuristicEvaluator:
    """Scores board positions using weighted features."""

    def __init__(self, weights: Weights | None = None):
        self.weights = weights or DEFAULT_WEIGHTS

    def evaluate(self, board: Board) -> float:
        """Score a board position. Lower is better."""
        return self.score(compute_features(board))

    def score(self, features: BoardFeatures) -> float:
        """Weighted sum of precomputed features. Lower is better."""
        w = self.weights
        score = 0.0
        score += w.holes * features.holes
        score += w.max_height * features.max_height
        score += w.average_height * features.average_height
        score += w.bumpiness * features.bumpiness
        score += w.complete_lines * features.complete_lines
        score += w.row_transitions * features.row_transitions
        score += w.column_transitions * features.column_transitions
        score += w.wells * features.wells
        score += w.rows_with_holes * features.rows_with_holes
        score += w.height_diff * features.height_diff
        score += w.variance_height * features.variance_height
        return score
