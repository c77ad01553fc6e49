from __future__ import annotations

import itertools
import random
from typing import Iterable, Optional, Protocol

from .pieces import TetrominoType


class PieceSource(Protocol):
    def next_kind(self) -> TetrominoType: ...


class UniformPieceSource:
    """Independent uniform draw over the seven kinds; no bag, no history."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def next_kind(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))


class SequencePieceSource:
    """Deals kinds from a fixed sequence, optionally cycling forever."""

    def __init__(self, kinds: Iterable[TetrominoType], cycle: bool = True) -> None:
        kinds = list(kinds)
        if not kinds:
            raise ValueError("SequencePieceSource needs at least one piece kind")
        self._kinds = itertools.cycle(kinds) if cycle else iter(kinds)

    def next_kind(self) -> TetrominoType:
        try:
            return next(self._kinds)
        except StopIteration:
            raise RuntimeError("piece sequence exhausted") from None
