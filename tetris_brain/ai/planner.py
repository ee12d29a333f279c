"""Move planner: searches all possible piece placements and selects the best.

Tries every distinct rotation of the piece at every horizontal offset,
drops it, clears any full rows, rates the resulting board with the
heuristic and undoes the placement again. The placement with the lowest
score wins; the first one found wins a tie.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass

from ..game.board import Board, PlacementError, PlaceResult
from ..game.pieces import MAX_ROTATIONS, Piece
from .heuristic import HeuristicEvaluator

logger = logging.getLogger(__name__)


@dataclass
class Move:
    """A specific placement of a piece on the board."""

    x: int          # leftmost column of the piece
    y: int          # row the piece's origin lands on
    piece: Piece    # rotation state to place
    score: float    # heuristic evaluation score, lower is better


def distinct_rotations(piece: Piece) -> list[Piece]:
    """Follow next_rotation() until the cycle closes on the starting shape."""
    rotations = [piece]
    current = piece.next_rotation()
    while current != piece and len(rotations) < MAX_ROTATIONS:
        rotations.append(current)
        current = current.next_rotation()
    return rotations


@contextmanager
def tentative_placement(board: Board, piece: Piece, x: int, y: int):
    """Place a piece and clear rows for the duration of the block.

    The placement is always undone on exit, including when the block raises.
    """
    result = board.place(piece, x, y)
    try:
        if not result.is_valid:
            raise PlacementError(
                f"{piece!r} at x={x} y={y} rejected by the board: {result.name}"
            )
        if result == PlaceResult.ROW_FILLED:
            board.clear_rows()
        yield board
    finally:
        board.undo()


class MovePlanner:
    """Searches all possible placements and selects the best one."""

    def __init__(self, evaluator: HeuristicEvaluator | None = None):
        self.evaluator = evaluator or HeuristicEvaluator()

    def best_move(self, board: Board, piece: Piece, height_limit: int) -> Move | None:
        """Find the lowest-scoring placement for the piece.

        A placement whose landing row would push the piece above
        height_limit, or out of the top of the board, is skipped. Returns
        None if nothing fits. The board is left exactly as it was passed in.
        """
        best: Move | None = None
        candidates = 0

        for rotation in distinct_rotations(piece):
            y_bound = min(height_limit, board.height) - rotation.height + 1
            for x in range(board.width - rotation.width + 1):
                y = board.drop_height(rotation, x)
                if y >= y_bound:
                    continue  # piece sticks up too far

                with tentative_placement(board, rotation, x, y):
                    score = self.evaluator.evaluate(board)
                candidates += 1

                if best is None or score < best.score:
                    best = Move(x, y, rotation, score)

        if best is None:
            logger.debug("No legal move for %s under height %d", piece, height_limit)
        else:
            logger.debug(
                "Best move for %s: x=%d y=%d (score=%.2f, %d candidates)",
                piece, best.x, best.y, best.score, candidates,
            )
        return best
