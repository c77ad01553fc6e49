"""Tests for scoring, levels and drop speed."""

import pytest

from falling_blocks.game.randomizer import SequencePieceSource, UniformPieceSource
from falling_blocks.game.pieces import TetrominoType
from falling_blocks.game.rules import ScoringRules


class TestScoring:
    def test_line_clear_table_at_level_one(self):
        rules = ScoringRules()
        assert rules.score_for_lines(0, 1) == 0
        assert rules.score_for_lines(1, 1) == 40
        assert rules.score_for_lines(2, 1) == 100
        assert rules.score_for_lines(3, 1) == 300
        assert rules.score_for_lines(4, 1) == 1200

    def test_level_multiplier(self):
        assert ScoringRules().score_for_lines(4, 3) == 3600

    def test_out_of_table_counts_score_nothing(self):
        rules = ScoringRules()
        assert rules.score_for_lines(5, 1) == 0
        assert rules.score_for_lines(-1, 1) == 0

    def test_hard_drop_bonus(self):
        rules = ScoringRules()
        assert rules.hard_drop_bonus(0) == 0
        assert rules.hard_drop_bonus(17) == 34


class TestLevels:
    @pytest.mark.parametrize(
        "lines, level",
        [(0, 1), (9, 1), (10, 2), (19, 2), (20, 3), (95, 10)],
    )
    def test_level_for_lines(self, lines, level):
        assert ScoringRules().level_for_lines(lines) == level

    def test_drop_interval(self):
        rules = ScoringRules()
        assert rules.drop_interval(1) == pytest.approx(1.0)
        assert rules.drop_interval(2) == pytest.approx(0.9)
        assert rules.drop_interval(5) == pytest.approx(0.6)

    def test_drop_interval_floor(self):
        rules = ScoringRules()
        assert rules.drop_interval(10) == pytest.approx(0.1)
        assert rules.drop_interval(15) == 0.1


class TestPieceSources:
    def test_uniform_source_is_seeded(self):
        a = UniformPieceSource(seed=7)
        b = UniformPieceSource(seed=7)
        assert [a.next_kind() for _ in range(20)] == [b.next_kind() for _ in range(20)]

    def test_uniform_source_covers_all_kinds(self):
        source = UniformPieceSource(seed=1)
        seen = {source.next_kind() for _ in range(500)}
        assert seen == set(TetrominoType)

    def test_sequence_source_cycles(self):
        source = SequencePieceSource([TetrominoType.I, TetrominoType.O])
        kinds = [source.next_kind() for _ in range(5)]
        assert kinds == [TetrominoType.I, TetrominoType.O] * 2 + [TetrominoType.I]

    def test_sequence_source_exhausts(self):
        source = SequencePieceSource([TetrominoType.T], cycle=False)
        assert source.next_kind() is TetrominoType.T
        with pytest.raises(RuntimeError):
            source.next_kind()

    def test_sequence_source_needs_kinds(self):
        with pytest.raises(ValueError):
            SequencePieceSource([])
