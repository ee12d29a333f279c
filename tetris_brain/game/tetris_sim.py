"""Headless Tetris game driven by the move planner.

No rendering and no input: every piece is placed wherever the planner
says, full rows are cleared and the placement committed. The game ends
when the planner finds no legal move under the height limit.

Usage:
    sim = TetrisSim(seed=0)
    stats = sim.play(max_pieces=500)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from ..ai.planner import Move, MovePlanner
from .board import Board, PlacementError, PlaceResult
from .pieces import Piece, PieceType

logger = logging.getLogger(__name__)

# Rows kept free at the top of the board; the planner may not stack into them.
TOP_SPACE = 4


@dataclass
class GameStats:
    pieces_placed: int = 0
    lines_cleared: int = 0
    highest_stack: int = 0


class TetrisSim:
    """Plays one game at a time with a standard 7-bag randomizer."""

    def __init__(
        self,
        width: int = Board.WIDTH,
        height: int = Board.HEIGHT,
        seed: int | None = None,
        planner: MovePlanner | None = None,
    ):
        self.width = width
        self.height = height
        self.planner = planner or MovePlanner()
        self._rng = random.Random(seed)
        self._bag: list[PieceType] = []
        self.board = Board(width, height)
        self.stats = GameStats()
        self.game_over = False

    @property
    def height_limit(self) -> int:
        return self.height - TOP_SPACE

    def reset(self):
        """Start a new game on an empty board. The randomizer keeps its state."""
        self.board = Board(self.width, self.height)
        self.stats = GameStats()
        self.game_over = False
        self._bag = []

    def step(self) -> Move | None:
        """Draw the next piece and play it. Returns None once the game is over."""
        if self.game_over:
            return None

        piece = Piece.spawn(self._draw_piece())
        move = self.planner.best_move(self.board, piece, self.height_limit)
        if move is None:
            self.game_over = True
            logger.info(
                "Game over after %d pieces, %d lines",
                self.stats.pieces_placed,
                self.stats.lines_cleared,
            )
            return None

        result = self.board.place(move.piece, move.x, move.y)
        if not result.is_valid:
            self.board.undo()
            raise PlacementError(f"planned move rejected by the board: {result.name}")

        # Stack height before the clear, the way it looked on screen
        self.stats.highest_stack = max(self.stats.highest_stack, self.board.max_height())
        if result == PlaceResult.ROW_FILLED:
            self.stats.lines_cleared += self.board.clear_rows()
        self.board.commit()
        self.stats.pieces_placed += 1
        return move

    def play(self, max_pieces: int | None = None) -> GameStats:
        """Play until game over, or until max_pieces have been placed."""
        while not self.game_over:
            if max_pieces is not None and self.stats.pieces_placed >= max_pieces:
                break
            self.step()
        return self.stats

    def _draw_piece(self) -> PieceType:
        """Draw next piece from the 7-bag randomizer."""
        if not self._bag:
            self._bag = list(PieceType)
            self._rng.shuffle(self._bag)
        return self._bag.pop()

    def render(self) -> str:
        """ASCII rendering of the current board with a one-line summary."""
        return (
            f"Pieces: {self.stats.pieces_placed}  "
            f"Lines: {self.stats.lines_cleared}  "
            f"Highest: {self.stats.highest_stack}\n"
            + self.board.to_ascii()
        )
