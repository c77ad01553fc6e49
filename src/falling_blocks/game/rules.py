from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (40, 100, 300, 1200)
    hard_drop_points_per_row: int = 2
    lines_per_level: int = 10
    base_drop_interval: float = 1.0
    min_drop_interval: float = 0.1
    interval_step: float = 0.1

    def score_for_lines(self, lines: int, level: int) -> int:
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1] * level
        return 0

    def hard_drop_bonus(self, rows: int) -> int:
        return max(0, rows) * self.hard_drop_points_per_row

    def level_for_lines(self, lines: int) -> int:
        return lines // self.lines_per_level + 1

    def drop_interval(self, level: int) -> float:
        return max(self.min_drop_interval, self.base_drop_interval - (level - 1) * self.interval_step)
