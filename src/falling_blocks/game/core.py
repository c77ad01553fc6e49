from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Callable, List, Optional, Tuple

from .clock import ManualClock, ScheduledTask, Scheduler
from .grid import ColorGrid, GameGrid
from .pieces import Color, Piece, TetrominoType
from .randomizer import PieceSource, UniformPieceSource
from .rules import ScoringRules


logger = logging.getLogger(__name__)


class GamePhase(Enum):
    MENU = auto()
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    TOGGLE_PAUSE = 5
    START = 6
    MENU = 7
    NONE = 8


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_x: int = 3
    spawn_y: int = 0
    clear_flash_duration: float = 0.3

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board must be non-empty, got {self.width}x{self.height}")
        if not 0 <= self.spawn_x < self.width:
            raise ValueError(f"spawn_x {self.spawn_x} is outside a board {self.width} wide")
        if self.clear_flash_duration < 0:
            raise ValueError("clear_flash_duration must be non-negative")


Cells = Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the engine handed to the presentation layer."""

    board: ColorGrid
    active_cells: Cells
    active_color: Optional[Color]
    ghost_cells: Cells
    next_kind: Optional[TetrominoType]
    next_shape: Tuple[Tuple[bool, ...], ...]
    score: int
    level: int
    lines: int
    phase: GamePhase
    drop_interval: float
    lines_just_cleared: bool

    @property
    def next_color(self) -> Optional[Color]:
        return self.next_kind.color if self.next_kind is not None else None


Listener = Callable[[GameSnapshot], None]


class TetrisEngine:
    """Owns the board, the active and next pieces, and the session counters.

    Every mutation happens on the thread that calls the intent methods or
    advances the scheduler; the engine itself never spawns threads. After each
    mutating call, subscribers receive a fresh ``GameSnapshot``.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        piece_source: Optional[PieceSource] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler: Scheduler = scheduler if scheduler is not None else ManualClock()
        self.piece_source: PieceSource = piece_source or UniformPieceSource(self.config.random_seed)
        self.board = GameGrid(self.config.width, self.config.height)
        self.phase = GamePhase.MENU
        self.current_piece: Optional[Piece] = None
        self.next_piece: Optional[Piece] = None
        self.score = 0
        self.level = 1
        self.lines = 0
        self.drop_interval = self.rules.drop_interval(1)
        self.lines_just_cleared = False
        self._drop_task: Optional[ScheduledTask] = None
        self._flash_task: Optional[ScheduledTask] = None
        self._listeners: List[Listener] = []

    # ── Session lifecycle ───────────────────────────────────────────────────

    def start(self) -> None:
        self._reset_session()
        self.next_piece = self._random_piece()
        self._set_phase(GamePhase.PLAYING)
        logger.info("Game started")
        self.spawn_piece()
        if self.phase is GamePhase.PLAYING:
            self._start_timer()
        self._notify()

    def play_again(self) -> None:
        if self.phase is not GamePhase.GAME_OVER:
            logger.debug("play_again ignored in phase %s", self.phase.name)
            return
        self.start()

    def pause(self) -> None:
        if self.phase is not GamePhase.PLAYING:
            logger.debug("pause ignored in phase %s", self.phase.name)
            return
        self._set_phase(GamePhase.PAUSED)
        self._stop_timer()
        self._notify()

    def resume(self) -> None:
        if self.phase is not GamePhase.PAUSED:
            logger.debug("resume ignored in phase %s", self.phase.name)
            return
        self._set_phase(GamePhase.PLAYING)
        self._start_timer()
        self._notify()

    def reset(self) -> None:
        self._reset_session()
        self._set_phase(GamePhase.MENU)
        self._notify()

    def _reset_session(self) -> None:
        self._stop_timer()
        if self._flash_task is not None:
            self._flash_task.cancel()
            self._flash_task = None
        self.board = GameGrid(self.config.width, self.config.height)
        self.current_piece = None
        self.next_piece = None
        self.score = 0
        self.level = 1
        self.lines = 0
        self.drop_interval = self.rules.drop_interval(1)
        self.lines_just_cleared = False

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    def _set_phase(self, phase: GamePhase) -> None:
        if phase is not self.phase:
            logger.debug("Phase %s -> %s", self.phase.name, phase.name)
        self.phase = phase

    def _game_over(self) -> None:
        self._set_phase(GamePhase.GAME_OVER)
        self._stop_timer()
        self.current_piece = None
        logger.info("Game over: score=%d level=%d lines=%d", self.score, self.level, self.lines)

    # ── Drop timer ──────────────────────────────────────────────────────────

    def _start_timer(self) -> None:
        self._stop_timer()
        self._drop_task = self.scheduler.call_every(self.drop_interval, self.drop)
        logger.debug("Drop timer started at %.2fs", self.drop_interval)

    def _stop_timer(self) -> None:
        if self._drop_task is not None:
            self._drop_task.cancel()
            self._drop_task = None

    # ── Pieces ──────────────────────────────────────────────────────────────

    def _random_piece(self) -> Piece:
        kind = self.piece_source.next_kind()
        return Piece.spawn(kind, self.config.spawn_x, self.config.spawn_y)

    def spawn_piece(self) -> None:
        """Promote the next piece to active and draw a new next piece.

        A piece that does not fit where it spawns ends the game without ever
        touching the board. Outside PLAYING nothing changes.
        """
        if self.phase is not GamePhase.PLAYING or self.next_piece is None:
            logger.debug("spawn ignored in phase %s", self.phase.name)
            return
        self.current_piece = self.next_piece
        self.next_piece = self._random_piece()
        logger.debug("Spawned %s, next %s", self.current_piece.kind.name, self.next_piece.kind.name)
        if not self.board.is_valid_position(self.current_piece):
            self._game_over()

    def ghost_piece(self) -> Optional[Piece]:
        if self.current_piece is None:
            return None
        return self.current_piece.moved(0, self.board.drop_distance(self.current_piece))

    # ── Intents ─────────────────────────────────────────────────────────────

    def _can_act(self, intent: str) -> bool:
        if self.phase is not GamePhase.PLAYING or self.current_piece is None:
            logger.debug("%s ignored in phase %s", intent, self.phase.name)
            return False
        return True

    def _try_replace(self, candidate: Piece) -> bool:
        if not self.board.is_valid_position(candidate):
            return False
        self.current_piece = candidate
        self._notify()
        return True

    def move(self, dx: int, dy: int = 0) -> bool:
        if not self._can_act("move"):
            return False
        return self._try_replace(self.current_piece.moved(dx, dy))

    def move_left(self) -> bool:
        return self.move(-1)

    def move_right(self) -> bool:
        return self.move(1)

    def rotate(self) -> bool:
        if not self._can_act("rotate"):
            return False
        return self._try_replace(self.current_piece.rotated())

    def drop(self) -> None:
        """Advance the active piece one row, landing it if it is blocked."""
        if not self._can_act("drop"):
            return
        if not self._try_replace(self.current_piece.moved(0, 1)):
            self._land()
            self._notify()

    def soft_drop(self) -> None:
        self.drop()

    def hard_drop(self) -> int:
        """Drop the active piece to its resting row and land it at once.

        Returns the number of rows fallen.
        """
        if not self._can_act("hard_drop"):
            return 0
        distance = self.board.drop_distance(self.current_piece)
        self.score += self.rules.hard_drop_bonus(distance)
        self.current_piece = self.current_piece.moved(0, distance)
        self._land()
        self._notify()
        return distance

    def _land(self) -> None:
        assert self.current_piece is not None
        self.board.place(self.current_piece)
        cleared = self.board.clear_full_lines()
        self.update_score(cleared)
        if cleared:
            self._flash_cleared_lines()
        if self.board.is_game_over():
            self._game_over()
        else:
            self.spawn_piece()

    def step(self, action: Action) -> GameSnapshot:
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.TOGGLE_PAUSE:
            if self.phase is GamePhase.PAUSED:
                self.resume()
            else:
                self.pause()
        elif action == Action.START:
            if self.phase in (GamePhase.MENU, GamePhase.GAME_OVER):
                self.start()
        elif action == Action.MENU:
            self.reset()
        elif action == Action.NONE:
            pass
        return self.snapshot()

    # ── Scoring ─────────────────────────────────────────────────────────────

    def update_score(self, lines_cleared: int) -> None:
        self.lines += lines_cleared
        self.score += self.rules.score_for_lines(lines_cleared, self.level)
        new_level = self.rules.level_for_lines(self.lines)
        if new_level > self.level:
            self.level = new_level
            self.drop_interval = self.rules.drop_interval(self.level)
            logger.info("Level %d reached, drop interval %.2fs", self.level, self.drop_interval)
            if self.phase is GamePhase.PLAYING:
                self._start_timer()

    def _flash_cleared_lines(self) -> None:
        if self._flash_task is not None:
            self._flash_task.cancel()
        self.lines_just_cleared = True
        self._flash_task = self.scheduler.call_later(self.config.clear_flash_duration, self._end_flash)

    def _end_flash(self) -> None:
        self._flash_task = None
        self.lines_just_cleared = False
        self._notify()

    # ── Observation ─────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Snapshot listener %r failed", listener)

    def snapshot(self) -> GameSnapshot:
        active_cells: Cells = ()
        ghost_cells: Cells = ()
        active_color = None
        if self.current_piece is not None:
            active_cells = tuple(self.current_piece.cells())
            active_color = self.current_piece.color
            ghost = self.ghost_piece()
            if ghost is not None:
                ghost_cells = tuple(ghost.cells())
        next_kind = None
        next_shape: Tuple[Tuple[bool, ...], ...] = ()
        if self.next_piece is not None:
            next_kind = self.next_piece.kind
            next_shape = tuple(tuple(bool(v) for v in row) for row in self.next_piece.shape())
        return GameSnapshot(
            board=self.board.colors(),
            active_cells=active_cells,
            active_color=active_color,
            ghost_cells=ghost_cells,
            next_kind=next_kind,
            next_shape=next_shape,
            score=self.score,
            level=self.level,
            lines=self.lines,
            phase=self.phase,
            drop_interval=self.drop_interval,
            lines_just_cleared=self.lines_just_cleared,
        )
