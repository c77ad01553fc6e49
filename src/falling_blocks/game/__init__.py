"""Game module for falling_blocks.

Exports the core game engine and supporting classes:
- GameGrid: Board representation, validity checks and line clearing
- Piece: Tetromino instance with pure move/rotate transforms
- TetrominoType: Enum of the seven piece kinds
- ScoringRules: Line-clear table, level and drop-speed formulas
- ManualClock: Virtual-time scheduler that drives the drop tick
- TetrisEngine: State machine that owns the session
"""

from .clock import ManualClock, ScheduledTask, Scheduler
from .grid import GameGrid
from .pieces import Color, Piece, TetrominoType
from .randomizer import PieceSource, SequencePieceSource, UniformPieceSource
from .rules import ScoringRules
from .core import Action, GameConfig, GamePhase, GameSnapshot, TetrisEngine

__all__ = [
    "GameGrid",
    "Piece",
    "TetrominoType",
    "Color",
    "ScoringRules",
    "ManualClock",
    "ScheduledTask",
    "Scheduler",
    "PieceSource",
    "SequencePieceSource",
    "UniformPieceSource",
    "TetrisEngine",
    "GameConfig",
    "GamePhase",
    "GameSnapshot",
    "Action",
]
