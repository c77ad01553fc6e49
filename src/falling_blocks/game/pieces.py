from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Dict, List, Tuple

import numpy as np


class Color(Enum):
    CYAN = (0, 240, 240)
    YELLOW = (240, 240, 0)
    PURPLE = (160, 0, 240)
    GREEN = (0, 240, 0)
    RED = (240, 0, 0)
    BLUE = (0, 0, 240)
    ORANGE = (240, 160, 0)

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.value


class TetrominoType(IntEnum):
    # 0 is reserved for an empty grid cell
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7

    @property
    def color(self) -> Color:
        return PIECE_COLORS[self]

    @property
    def rotation_count(self) -> int:
        return len(ROTATION_SHAPES[self])


Shape = np.ndarray


def _shape(*rows: str) -> Shape:
    arr = np.array([[ch == "1" for ch in row] for row in rows], dtype=bool)
    arr.flags.writeable = False
    return arr


PIECE_COLORS: Dict[TetrominoType, Color] = {
    TetrominoType.I: Color.CYAN,
    TetrominoType.O: Color.YELLOW,
    TetrominoType.T: Color.PURPLE,
    TetrominoType.S: Color.GREEN,
    TetrominoType.Z: Color.RED,
    TetrominoType.J: Color.BLUE,
    TetrominoType.L: Color.ORANGE,
}

# Pre-enumerated orientations, in clockwise order starting from spawn.
ROTATION_SHAPES: Dict[TetrominoType, Tuple[Shape, ...]] = {
    TetrominoType.I: (
        _shape("1111"),
        _shape("1", "1", "1", "1"),
    ),
    TetrominoType.O: (
        _shape("11", "11"),
    ),
    TetrominoType.T: (
        _shape("010", "111"),
        _shape("10", "11", "10"),
        _shape("111", "010"),
        _shape("01", "11", "01"),
    ),
    TetrominoType.S: (
        _shape("011", "110"),
        _shape("10", "11", "01"),
    ),
    TetrominoType.Z: (
        _shape("110", "011"),
        _shape("01", "11", "10"),
    ),
    TetrominoType.J: (
        _shape("100", "111"),
        _shape("11", "10", "10"),
        _shape("111", "001"),
        _shape("01", "01", "11"),
    ),
    TetrominoType.L: (
        _shape("001", "111"),
        _shape("10", "10", "11"),
        _shape("111", "100"),
        _shape("11", "01", "01"),
    ),
}

SPAWN_X = 3
SPAWN_Y = 0


@dataclass(frozen=True)
class Piece:
    """An active tetromino: kind, grid anchor and rotation index.

    Transforms never mutate; ``moved`` and ``rotated`` return new pieces and
    leave bounds checking to the board.
    """

    kind: TetrominoType
    x: int = SPAWN_X
    y: int = SPAWN_Y
    rotation: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", self.rotation % self.kind.rotation_count)

    @classmethod
    def spawn(cls, kind: TetrominoType, x: int = SPAWN_X, y: int = SPAWN_Y) -> "Piece":
        return cls(kind=kind, x=x, y=y)

    @property
    def color(self) -> Color:
        return self.kind.color

    def shape(self) -> Shape:
        return ROTATION_SHAPES[self.kind][self.rotation]

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self) -> "Piece":
        return replace(self, rotation=self.rotation + 1)

    def cells(self) -> List[Tuple[int, int]]:
        s = self.shape()
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((self.x + dx, self.y + dy))
        return cells
