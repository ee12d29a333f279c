"""Tetromino definitions and rotation.

Cells are (x, y) offsets with x increasing rightward and y increasing
upward, so (0, 0) is the bottom-left corner of a piece's bounding box.
Each Piece is one rotation state; next_rotation() turns it 90 degrees
counter-clockwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class PieceType(IntEnum):
    I = 0
    J = 1
    L = 2
    O = 3
    S = 4
    T = 5
    Z = 6


# Spawn orientation of each piece.
PIECE_SHAPES: dict[PieceType, tuple[tuple[int, int], ...]] = {
    PieceType.I: ((0, 0), (1, 0), (2, 0), (3, 0)),  # ----
    PieceType.J: ((0, 1), (1, 1), (2, 1), (2, 0)),  # ---, hook down-right
    PieceType.L: ((0, 1), (1, 1), (2, 1), (0, 0)),  # ---, hook down-left
    PieceType.O: ((0, 0), (1, 0), (0, 1), (1, 1)),  # square
    PieceType.S: ((0, 0), (1, 0), (1, 1), (2, 1)),
    PieceType.T: ((0, 0), (1, 0), (2, 0), (1, 1)),  # T pointing up
    PieceType.Z: ((0, 1), (1, 1), (1, 0), (2, 0)),
}

# No tetromino has more than four distinct rotation states.
MAX_ROTATIONS = 4


def normalize_cells(cells) -> tuple[tuple[int, int], ...]:
    """Shift cells so the minimum x and y are both 0, sorted."""
    min_x = min(x for x, _ in cells)
    min_y = min(y for _, y in cells)
    return tuple(sorted((x - min_x, y - min_y) for x, y in cells))


@dataclass(frozen=True)
class Piece:
    """One rotation state of a tetromino. Compares by value."""

    kind: PieceType
    cells: tuple[tuple[int, int], ...]

    @classmethod
    def spawn(cls, kind: PieceType) -> Piece:
        return cls(kind, normalize_cells(PIECE_SHAPES[kind]))

    @classmethod
    def all_pieces(cls) -> list[Piece]:
        """Spawn orientation of every piece type, in PieceType order."""
        return [cls.spawn(kind) for kind in PieceType]

    @property
    def width(self) -> int:
        return max(x for x, _ in self.cells) + 1

    @property
    def height(self) -> int:
        return max(y for _, y in self.cells) + 1

    @property
    def skirt(self) -> tuple[int, ...]:
        """Lowest occupied y for each column of the piece."""
        return tuple(
            min(y for x, y in self.cells if x == col) for col in range(self.width)
        )

    def cell_filled(self, x: int, y: int) -> bool:
        return (x, y) in self.cells

    def next_rotation(self) -> Piece:
        """This piece turned 90 degrees counter-clockwise."""
        return Piece(self.kind, normalize_cells([(-y, x) for x, y in self.cells]))

    def to_ascii(self) -> str:
        rows = []
        for y in reversed(range(self.height)):
            rows.append(
                "".join("#" if self.cell_filled(x, y) else "." for x in range(self.width))
            )
        return "\n".join(rows)

    def __repr__(self):
        return f"Piece({self.kind.name}, {self.width}x{self.height})"
