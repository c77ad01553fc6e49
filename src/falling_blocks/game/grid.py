from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from .pieces import Color, Piece, TetrominoType


logger = logging.getLogger(__name__)

BOARD_WIDTH = 10
BOARD_HEIGHT = 20

# Rows 0 and 1; any block resting here ends the game.
TOP_ROWS = 2

ColorGrid = Tuple[Tuple[Optional[Color], ...], ...]


class GameGrid:
    """Fixed-size board holding the colors of locked pieces.

    The grid uses 0 for empty cells and the ``TetrominoType`` value of the
    piece that filled a cell otherwise. Row 0 is the top (the skyline); a
    piece may hang above it with negative ``y`` while it spawns.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "GameGrid":
        """Build a board from text rows, top row first.

        ``.`` is an empty cell; any piece letter fills the cell with that
        kind's color. Missing rows at the top are left empty.
        """
        width = len(rows[0]) if rows else BOARD_WIDTH
        board = cls(width=width)
        if len(rows) > board.height:
            raise ValueError(f"{len(rows)} rows do not fit a board of height {board.height}")
        offset = board.height - len(rows)
        for r, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch != ".":
                    board.grid[offset + r, x] = TetrominoType[ch]
        return board

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_cell_empty(self, x: int, y: int) -> bool:
        if not self.is_inside(x, y):
            return False
        return self.grid[y, x] == 0

    def is_valid_position(self, piece: Piece) -> bool:
        for x, y in piece.cells():
            if x < 0 or x >= self.width or y >= self.height:
                return False
            # Above the skyline counts as free space.
            if y >= 0 and not self.is_cell_empty(x, y):
                return False
        return True

    def drop_distance(self, piece: Piece) -> int:
        """Number of rows ``piece`` can fall before it is blocked."""
        distance = 0
        while self.is_valid_position(piece.moved(0, distance + 1)):
            distance += 1
        return distance

    def place(self, piece: Piece) -> None:
        value = int(piece.kind)
        for x, y in piece.cells():
            if self.is_inside(x, y):
                self.grid[y, x] = value
            elif y < 0:
                logger.warning("Dropping cell (%d, %d) of %s locked above the skyline", x, y, piece.kind.name)

    def clear_full_lines(self) -> int:
        full_rows = np.where(np.all(self.grid != 0, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        remaining = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, remaining))
        return num

    def is_game_over(self) -> bool:
        return bool(np.any(self.grid[:TOP_ROWS] != 0))

    def get_color(self, x: int, y: int) -> Optional[Color]:
        if not self.is_inside(x, y):
            return None
        value = int(self.grid[y, x])
        if value == 0:
            return None
        return TetrominoType(value).color

    def colors(self) -> ColorGrid:
        return tuple(
            tuple(self.get_color(x, y) for x in range(self.width))
            for y in range(self.height)
        )

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def to_ascii(self) -> str:
        lines = []
        for y in range(self.height):
            row = ""
            for x in range(self.width):
                value = int(self.grid[y, x])
                row += "." if value == 0 else TetrominoType(value).name
            lines.append(row)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.to_ascii()
