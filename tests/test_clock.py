"""Tests for the virtual-time scheduler."""

import pytest

from falling_blocks.game.clock import ManualClock


class TestRepeating:
    def test_fires_once_per_interval(self):
        clock = ManualClock()
        calls = []
        clock.call_every(1.0, lambda: calls.append(clock.now))
        assert clock.advance(0.5) == 0
        assert clock.advance(0.5) == 1
        assert clock.advance(2.0) == 2
        assert calls == [1.0, 2.0, 3.0]
        assert clock.now == 3.0

    def test_cancel_stops_future_fires(self):
        clock = ManualClock()
        calls = []
        task = clock.call_every(1.0, lambda: calls.append(1))
        clock.advance(1.0)
        task.cancel()
        clock.advance(10.0)
        assert calls == [1]
        assert task.cancelled
        assert clock.pending == []

    def test_cancel_from_another_callback(self):
        clock = ManualClock()
        calls = []
        victim = clock.call_every(1.0, lambda: calls.append("victim"))
        clock.call_later(0.5, victim.cancel)
        clock.advance(5.0)
        assert calls == []

    def test_task_scheduled_during_advance(self):
        clock = ManualClock()
        calls = []

        def restart():
            calls.append(("restart", clock.now))
            clock.call_every(0.5, lambda: calls.append(("fast", clock.now)))

        clock.call_later(1.0, restart)
        clock.advance(2.0)
        assert calls == [("restart", 1.0), ("fast", 1.5), ("fast", 2.0)]

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ManualClock().call_every(0, lambda: None)


class TestOneShot:
    def test_fires_once(self):
        clock = ManualClock()
        calls = []
        task = clock.call_later(0.3, lambda: calls.append(clock.now))
        clock.advance(0.2)
        assert calls == []
        clock.advance(1.0)
        assert calls == [0.3]
        assert task.cancelled
        clock.advance(1.0)
        assert calls == [0.3]

    def test_ties_fire_in_scheduling_order(self):
        clock = ManualClock()
        calls = []
        clock.call_later(1.0, lambda: calls.append("a"))
        clock.call_later(1.0, lambda: calls.append("b"))
        clock.call_later(0.5, lambda: calls.append("c"))
        clock.advance(1.0)
        assert calls == ["c", "a", "b"]

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            ManualClock().call_later(-1, lambda: None)

    def test_rejects_negative_advance(self):
        with pytest.raises(ValueError):
            ManualClock().advance(-0.1)
