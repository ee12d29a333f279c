"""Tests for the Board class and its place/undo discipline."""

import numpy as np
import pytest

from tetris_brain.game.board import Board, PlacementError, PlaceResult
from tetris_brain.game.pieces import Piece, PieceType


def _snapshot(board: Board):
    return (
        board.to_occupancy_grid(),
        board.column_heights(),
        [board.row_width(y) for y in range(board.height)],
        board.max_height(),
    )


def _assert_same_state(board: Board, snapshot):
    grid, heights, widths, max_height = snapshot
    np.testing.assert_array_equal(board.to_occupancy_grid(), grid)
    np.testing.assert_array_equal(board.column_heights(), heights)
    assert [board.row_width(y) for y in range(board.height)] == widths
    assert board.max_height() == max_height


class TestBoardBasics:
    def _make_board_with_bottom_row(self) -> Board:
        grid = np.zeros((20, 10), dtype=bool)
        grid[19, :] = True
        return Board.from_occupancy(grid)

    def test_empty_board_dimensions(self):
        board = Board()
        assert board.width == 10
        assert board.height == 20
        assert board.max_height() == 0
        assert board.committed

    def test_custom_dimensions(self):
        board = Board(width=6, height=12)
        assert board.to_occupancy_grid().shape == (12, 6)

    def test_from_occupancy_orientation(self):
        """Row 0 of the grid is the top of the board."""
        grid = np.zeros((20, 10), dtype=bool)
        grid[19, 0] = True
        board = Board.from_occupancy(grid)
        assert board.cell_filled(0, 0)
        assert not board.cell_filled(0, 19)

    def test_from_occupancy_roundtrip(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[15:20, 0:5] = True
        board = Board.from_occupancy(grid)
        np.testing.assert_array_equal(board.to_occupancy_grid(), grid)

    def test_outside_cells_read_filled(self):
        board = Board(width=4, height=6)
        assert board.cell_filled(-1, 0)
        assert board.cell_filled(4, 0)
        assert board.cell_filled(0, 6)
        assert board.cell_filled(0, -1)
        assert not board.cell_filled(3, 5)

    def test_column_heights_varied(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[19, 0] = True   # col 0: height 1
        grid[18, 1] = True   # col 1: height 2 (hole underneath)
        grid[15, 2] = True   # col 2: height 5
        board = Board.from_occupancy(grid)
        assert board.column_height(0) == 1
        assert board.column_height(1) == 2
        assert board.column_height(2) == 5
        assert board.column_height(3) == 0
        assert board.max_height() == 5

    def test_row_widths(self):
        board = self._make_board_with_bottom_row()
        assert board.row_width(0) == 10
        assert board.row_width(1) == 0

    def test_ascii_with_blocks(self):
        board = self._make_board_with_bottom_row()
        ascii_repr = board.to_ascii()
        assert "+----------+" in ascii_repr
        assert "|##########|" in ascii_repr
        assert "|..........|" in ascii_repr

    def test_copy_is_independent(self):
        board = self._make_board_with_bottom_row()
        clone = board.copy()
        clone.place(Piece.spawn(PieceType.O), 0, 1)
        clone.commit()
        assert board.column_height(0) == 1
        assert clone.column_height(0) == 3


class TestDropHeight:
    def test_empty_board(self):
        board = Board()
        assert board.drop_height(Piece.spawn(PieceType.O), 0) == 0

    def test_rests_on_tallest_column(self):
        grid = np.zeros((20, 10), dtype=bool)
        grid[17:20, 1] = True  # col 1 height 3
        board = Board.from_occupancy(grid)
        assert board.drop_height(Piece.spawn(PieceType.O), 0) == 3
        assert board.drop_height(Piece.spawn(PieceType.O), 2) == 0

    def test_skirt_hangs_over_step(self):
        """The raised left foot of Z hangs over a one-high step."""
        grid = np.zeros((20, 10), dtype=bool)
        grid[19, 0] = True  # col 0 height 1
        board = Board.from_occupancy(grid)
        assert board.drop_height(Piece.spawn(PieceType.Z), 0) == 0


class TestPlaceAndUndo:
    def test_place_updates_metrics(self):
        board = Board(width=4, height=6)
        result = board.place(Piece.spawn(PieceType.T), 0, 0)
        assert result == PlaceResult.PLACED
        assert board.column_height(1) == 2
        assert board.row_width(0) == 3
        assert board.max_height() == 2
        assert not board.committed

    def test_place_reports_filled_row(self):
        board = Board(width=4, height=6)
        result = board.place(Piece.spawn(PieceType.I), 0, 0)
        assert result == PlaceResult.ROW_FILLED
        assert result.is_valid

    def test_out_of_bounds(self):
        board = Board(width=4, height=6)
        result = board.place(Piece.spawn(PieceType.I), 1, 0)
        assert result == PlaceResult.OUT_BOUNDS
        assert not result.is_valid
        assert board.max_height() == 0
        board.undo()
        assert board.committed

    def test_overlap_is_bad(self):
        board = Board(width=4, height=6)
        board.place(Piece.spawn(PieceType.O), 0, 0)
        board.commit()
        result = board.place(Piece.spawn(PieceType.O), 1, 0)
        assert result == PlaceResult.BAD
        board.undo()
        assert board.row_width(0) == 2

    def test_place_on_uncommitted_board_raises(self):
        board = Board(width=4, height=6)
        board.place(Piece.spawn(PieceType.O), 0, 0)
        with pytest.raises(PlacementError):
            board.place(Piece.spawn(PieceType.O), 2, 0)

    def test_undo_restores_state(self):
        grid = np.zeros((6, 4), dtype=bool)
        grid[5, 0:2] = True
        board = Board.from_occupancy(grid)
        before = _snapshot(board)
        board.place(Piece.spawn(PieceType.T), 1, 1)
        board.undo()
        _assert_same_state(board, before)
        assert board.committed

    def test_undo_on_committed_board_is_noop(self):
        board = Board(width=4, height=6)
        board.place(Piece.spawn(PieceType.O), 0, 0)
        board.commit()
        board.undo()
        assert board.column_height(0) == 2


class TestClearRows:
    def test_clear_single_row(self):
        grid = np.zeros((6, 4), dtype=bool)
        grid[5, 0:2] = True
        grid[4, 0] = True
        board = Board.from_occupancy(grid)
        # O at x=2 fills the rest of the bottom row
        result = board.place(Piece.spawn(PieceType.O), 2, 0)
        assert result == PlaceResult.ROW_FILLED
        assert board.clear_rows() == 1
        assert board.to_ascii().splitlines()[-2] == "|#.##|"
        assert board.max_height() == 1
        assert board.row_width(0) == 3

    def test_clear_then_undo_restores_pre_place_state(self):
        grid = np.zeros((6, 4), dtype=bool)
        grid[5, 0:2] = True
        grid[4, 0:2] = True
        board = Board.from_occupancy(grid)
        before = _snapshot(board)
        board.place(Piece.spawn(PieceType.O), 2, 0)
        assert board.clear_rows() == 2
        assert board.max_height() == 0
        board.undo()
        _assert_same_state(board, before)

    def test_clear_rows_no_lines(self):
        board = Board()
        assert board.clear_rows() == 0
        assert board.committed

    def test_clear_keeps_rows_above_in_order(self):
        grid = np.zeros((6, 4), dtype=bool)
        grid[5, :] = True     # full
        grid[4, 0] = True
        grid[3, 1] = True
        board = Board.from_occupancy(grid)
        board.clear_rows()
        board.commit()
        assert board.cell_filled(0, 0)
        assert board.cell_filled(1, 1)
        assert board.column_height(1) == 2
